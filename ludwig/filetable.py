"""The file table: a listing of the files attached to frames and the global files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ludwig.filesys import FileObject

FILE_NAME_LEN = 255
HEADER = "Usage   Mod Frame  Filename"
RULE = "------- --- ------ --------"
_FRAME_WIDTH = 6
_PREFIX_WIDTH = 18


@dataclass
class FileSlot:
    """A file in use, with the frame it is attached to, if any.

    ``global_file`` marks the global input or output file; a file that is
    neither attached to a frame nor global is listed as a free file.
    """

    file: FileObject
    frame_name: Optional[str] = None
    modified: bool = False
    global_file: bool = False

    @property
    def usage(self) -> str:
        """The three-letter usage code shown in the table."""
        output = self.file.output_flag
        if self.frame_name is not None:
            return "FO " if output else "FI "
        if self.global_file:
            return "FGO" if output else "FGI"
        return "FFO" if output else "FFI"


def file_name(filename: str, max_len: int) -> str:
    """Return ``filename`` shortened to ``max_len`` characters.

    Characters are cut from the middle and replaced by ``---``.  Widths below
    5 are treated as 5.
    """
    max_len = max(max_len, 5)
    if len(filename) <= max_len:
        return filename
    tail_len = (max_len - 3) // 2
    head_len = max_len - 3 - tail_len
    return filename[:head_len] + "---" + filename[len(filename) - tail_len:]


def format_file_table(slots: Iterable[Optional[FileSlot]], width: Optional[int] = None) -> list[str]:
    """Return the lines of the file table for ``slots``.

    Empty slots (None) are skipped.  When ``width`` is given it is the screen
    width, and file names are shortened to fit beside the other columns;
    otherwise they are shortened to ``FILE_NAME_LEN`` characters.
    """
    lines = [HEADER, RULE, ""]
    room = width - _PREFIX_WIDTH - 1 if width is not None else FILE_NAME_LEN
    for slot in slots:
        if slot is None:
            continue
        eof = "EOF" if slot.file.eof else "   "
        mod = " * " if slot.frame_name is not None and slot.modified else "   "
        frame = slot.frame_name if slot.frame_name is not None else ""
        row = f"{slot.usage} {eof} {mod} {frame.ljust(_FRAME_WIDTH)}"
        if len(frame) > _FRAME_WIDTH:
            lines.append(row)
            row = " " * _PREFIX_WIDTH
        lines.append(f"{row} {file_name(slot.file.filename, room)}")
    return lines