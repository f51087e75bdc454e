"""Frame-level file handling: opening by specification, reading and writing runs of lines."""

from __future__ import annotations

from typing import Optional

from ludwig.fileparse import FileData, ParseError, ParseType, parse
from ludwig.filesys import CLOSE, DELETE, FileObject, FileSysError, close, read_line, rewind, write_line
from ludwig.lines import Line, change_length, lines_create, lines_destroy

_INPUT_TYPES = frozenset(
    {ParseType.COMMAND, ParseType.INPUT, ParseType.EDIT, ParseType.STDIN, ParseType.EXECUTE}
)
_OUTPUT_TYPES = frozenset({ParseType.COMMAND, ParseType.OUTPUT, ParseType.EDIT})


def _line_text(line: Line) -> str:
    if line.text is None or line.used == 0:
        return ""
    return bytes(line.text[: line.used]).decode("latin-1")


def file_create_open(
    fn: str,
    parse_type: ParseType,
    file_data: FileData,
    input_file: Optional[FileObject] = None,
    output_file: Optional[FileObject] = None,
) -> tuple[Optional[FileObject], Optional[FileObject]]:
    """Parse ``fn`` and open the files it names.

    For parse types that open an input, ``input_file`` must be None; for those
    that open an output, ``output_file`` must be None.  When opening an output
    alone, ``input_file`` may name the related input file.  Returns the
    (input, output) pair, with None for any file that was not opened.
    """
    if parse_type in _INPUT_TYPES:
        if input_file is not None:
            raise ParseError("File already in use")
        input_file = FileObject(output_flag=False)
    if parse_type in _OUTPUT_TYPES:
        if output_file is not None:
            raise ParseError("File already in use")
        output_file = FileObject(output_flag=True)

    parse(fn, parse_type, file_data, input_file, output_file)

    if input_file is not None and not input_file.valid:
        input_file = None
    if output_file is not None and not output_file.valid:
        output_file = None
    return input_file, output_file


def file_close_delete(fp: Optional[FileObject], delete: bool) -> str:
    """Close ``fp``, deleting it if it is an output file and ``delete`` is set.

    Any lines buffered from the file are released.  Returns the status message.
    """
    if fp is None:
        raise FileSysError("No file open")
    message = close(fp, DELETE if delete else CLOSE)
    if fp.first_line is not None:
        lines_destroy(fp.first_line)
        fp.first_line = None
        fp.last_line = None
        fp.line_count = 0
    return message


def file_read(
    fp: FileObject, count: int, best_try: bool
) -> tuple[Optional[Line], Optional[Line], int]:
    """Read ``count`` lines from ``fp`` as a detached chain.

    With ``best_try`` set, fewer lines are returned if the file runs out;
    otherwise running out is an error.  Returns (first, last, actual count),
    with (None, None, 0) when no lines are returned.
    """
    if fp.output_flag:
        raise FileSysError("Not an input file")

    while count > fp.line_count and not fp.eof:
        text = read_line(fp)
        if text is None:
            continue
        text = text.rstrip(" ")
        first, _ = lines_create(1)
        line = first
        change_length(line, len(text))
        if text:
            line.text[: len(text)] = text.encode("latin-1", errors="replace")
        line.used = len(text)
        line.blink = fp.last_line
        if fp.last_line is not None:
            fp.last_line.flink = line
        else:
            fp.first_line = line
        fp.last_line = line
        fp.line_count += 1

    if fp.line_count < count:
        if not best_try:
            raise FileSysError("Not enough input left")
        count = fp.line_count

    if count == 0:
        return None, None, 0

    if fp.line_count == count:
        first, last = fp.first_line, fp.last_line
        fp.first_line = None
        fp.last_line = None
        fp.line_count = 0
        return first, last, count

    if count < fp.line_count // 2:
        line = fp.first_line
        for _ in range(count - 1):
            line = line.flink
    else:
        line = fp.last_line
        for _ in range(fp.line_count - count):
            line = line.blink

    first = fp.first_line
    fp.first_line = line.flink
    line.flink = None
    fp.first_line.blink = None
    fp.line_count -= count
    return first, line, count


def file_write(first_line: Optional[Line], last_line: Optional[Line], fp: FileObject) -> None:
    """Write the lines first_line..last_line to the output file ``fp``."""
    line = first_line
    while line is not None:
        write_line(fp, _line_text(line))
        if line is last_line:
            return
        line = line.flink


def file_rewind(fp: FileObject) -> None:
    """Discard any buffered lines and go back to the start of ``fp``."""
    if fp.first_line is not None:
        lines_destroy(fp.first_line)
        fp.first_line = None
        fp.last_line = None
        fp.line_count = 0
    rewind(fp)