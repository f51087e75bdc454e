"""Core data structures and file handling of the Ludwig text editor: lines and groups, file I/O, argument parsing, the file table and help."""

__version__ = "0.1.0"

__all__ = ["lines", "filesys", "fileparse", "fyle", "filetable", "helpfile", "help"]