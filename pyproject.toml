[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ludwig"
version = "0.1.0"
description = "Core data structures and file handling of the Ludwig text editor: grouped line lists, line-oriented file I/O with backups, file argument parsing, a file table and an indexed help browser."
requires-python = ">=3.10"
dependencies = []
keywords = ["editor", "text-editor", "ludwig", "lines", "help"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ludwig"]

[tool.pytest.ini_options]
addopts = "-ra"
