"""Command-line style parsing of file specifications for the editor and its file commands."""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ludwig.filesys import FileObject, FileSysError, create_open
from ludwig.lines import MAX_SPACE

USAGE = (
    "usage : ludwig [-c] [-r] [-i value] [-I] "
    "[-s value] [-m file] [-M] [-t] [-T] "
    "[-b value] [-B value] [-o] [-O] [-u] "
    "[file [file]]"
)
FILE_USAGE = "usage : [-m file] [-t] [-T] [-b value] [-B value] [file [file]]"

_INTEGER = re.compile(r"[+-]?\d+")


class ParseType(Enum):
    """What a file specification is being parsed for."""

    COMMAND = auto()
    INPUT = auto()
    OUTPUT = auto()
    EDIT = auto()
    EXECUTE = auto()
    STDIN = auto()


class ParseError(Exception):
    """Raised when a file specification is invalid or its files cannot be opened."""


@dataclass
class FileData:
    """Editor-wide file defaults, set from the invoking command line."""

    initial: str = ""
    space: int = MAX_SPACE
    entab: bool = False
    purge: bool = False
    versions: int = 1
    old_cmds: bool = False


def _atoi(text: str) -> Optional[int]:
    if _INTEGER.fullmatch(text):
        return int(text)
    return None


def _read_memory(path: str) -> Optional[str]:
    try:
        with open(path, encoding="utf-8") as mem:
            name = mem.readline().strip()
    except OSError:
        return None
    return name or None


def _open_input(fyle: FileObject) -> None:
    fyle.create = False
    if not fyle.filename:
        raise ParseError(f"Error opening ({fyle.filename}) as input")
    try:
        create_open(fyle, None)
    except FileSysError as exc:
        raise ParseError(f"Error opening ({fyle.filename}) as input") from exc
    fyle.valid = True


def _open_output(fyle: FileObject, related: Optional[FileObject]) -> None:
    try:
        create_open(fyle, related)
    except FileSysError as exc:
        raise ParseError(str(exc)) from exc
    fyle.valid = True


def _set_output_defaults(output: FileObject, memory: str, entab: bool,
                         purge: bool, versions: int) -> None:
    output.memory = memory
    output.entab = entab
    output.purge = purge
    output.versions = versions


def parse(command_line: str, parse_type: ParseType, file_data: FileData,
          input_file: Optional[FileObject], output_file: Optional[FileObject]) -> None:
    """Parse ``command_line`` and open the files it names.

    Raises ParseError when the specification is invalid or a required file
    cannot be opened.  For ``ParseType.COMMAND`` the editor-wide defaults in
    ``file_data`` are updated.
    """
    if parse_type is ParseType.STDIN:
        input_file.valid = True
        input_file.fd = sys.stdin.buffer
        input_file.eof = False
        input_file.l_counter = 0
        return

    argv = ["Ludwig", *command_line.split()]

    entab = file_data.entab
    space = file_data.space
    purge = file_data.purge
    versions = file_data.versions

    create_flag = read_only_flag = space_flag = usage_flag = version_flag = False
    errors = 0
    check_input = False

    if parse_type is ParseType.COMMAND:
        home = os.environ.get("HOME") or "."
        initialize = home + "/.ludwigrc"
        memory = home + "/.lud_memory"
    else:
        initialize = ""
        memory = ""

    optind = 1
    while optind < len(argv):
        arg = argv[optind]
        if not arg.startswith("-"):
            break
        optind += 1
        for c in arg[1:]:
            if optind < len(argv) and not argv[optind].startswith("-"):
                optarg = argv[optind]
            else:
                optarg = ""
            if c == "c":
                if read_only_flag:
                    errors += 1
                else:
                    create_flag = True
            elif c == "r":
                if create_flag:
                    errors += 1
                else:
                    read_only_flag = True
            elif c == "i":
                initialize = optarg
                optind += 1
            elif c == "I":
                initialize = ""
            elif c == "s":
                value = _atoi(optarg)
                if value is None:
                    errors += 1
                else:
                    space = value
                    space_flag = True
                    optind += 1
            elif c == "m":
                memory = optarg
                optind += 1
            elif c == "M":
                memory = ""
            elif c == "t":
                entab = True
            elif c == "T":
                entab = False
            elif c in "bB":
                value = _atoi(optarg)
                if value is None:
                    errors += 1
                else:
                    versions = value
                    purge = c == "B"
                    optind += 1
            elif c == "o":
                version_flag = True
                file_data.old_cmds = True
            elif c == "O":
                version_flag = True
                file_data.old_cmds = False
            elif c == "u":
                usage_flag = True

    if usage_flag or errors:
        raise ParseError(USAGE if parse_type is ParseType.COMMAND else FILE_USAGE)

    if parse_type is ParseType.COMMAND:
        file_data.initial = initialize
        file_data.space = space
        file_data.entab = entab
        file_data.purge = purge
        file_data.versions = versions
    elif create_flag or read_only_flag or initialize or space_flag or version_flag:
        raise ParseError("Option not allowed here")

    files = argv[optind:]
    if len(files) > 2:
        raise ParseError("More than two files specified")

    if len(files) == 2:
        check_input = True
        if (parse_type in (ParseType.INPUT, ParseType.OUTPUT, ParseType.EXECUTE)
                or create_flag or read_only_flag):
            raise ParseError("Only one file name can be specified")

    if parse_type in (ParseType.COMMAND, ParseType.EDIT):
        if files:
            input_file.filename = files[0]
        elif memory:
            remembered = _read_memory(memory)
            if remembered is not None and os.path.exists(remembered):
                input_file.filename = remembered
                check_input = True
            else:
                input_file.filename = ""
                if parse_type is ParseType.COMMAND:
                    return
                raise ParseError(f"Error opening memory file ({memory})")
        else:
            input_file.filename = ""
            if parse_type is ParseType.COMMAND:
                return
            raise ParseError("No file name given")

        output_file.filename = files[1] if len(files) > 1 else input_file.filename
        _set_output_defaults(output_file, memory, entab, purge, versions)

        if read_only_flag:
            _open_input(input_file)
        elif create_flag:
            output_file.create = True
            _open_output(output_file, None)
        else:
            output_file.create = False
            try:
                _open_input(input_file)
            except ParseError:
                if check_input or parse_type is ParseType.EDIT:
                    raise
            _open_output(output_file, input_file)

    elif parse_type is ParseType.INPUT:
        if len(files) == 1:
            input_file.filename = files[0]
        else:
            remembered = _read_memory(memory) if memory else None
            if remembered is None:
                input_file.filename = ""
                raise ParseError("No input file name given")
            input_file.filename = remembered
        _open_input(input_file)

    elif parse_type is ParseType.EXECUTE:
        input_file.filename = files[0] if len(files) == 1 else ""
        if not input_file.filename:
            raise ParseError("No file name given")
        _open_input(input_file)

    elif parse_type is ParseType.OUTPUT:
        if len(files) == 1:
            output_file.filename = files[0]
        elif input_file is not None:
            output_file.filename = input_file.filename
        else:
            output_file.filename = ""
        _set_output_defaults(output_file, memory, entab, purge, versions)
        output_file.create = False
        if not output_file.filename:
            raise ParseError("No output file name given")
        _open_output(output_file, input_file)