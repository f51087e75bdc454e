"""Low-level file access for frames: opening, line reading and writing, closing with backups."""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from ludwig.lines import MAX_STR_LEN, Line

CLOSE = 0
DELETE = 1
KEEP_OPEN = 2

_NEWLINE = b"\n"
_LINE_ENDS = frozenset(b"\n\r\v\f")
_TMP_DIRS = ("/tmp/", "/usr/tmp/", "/var/tmp/")


class FileSysError(Exception):
    """Raised when a file cannot be opened, written, renamed or removed."""


@dataclass(eq=False)
class FileObject:
    """An input or output file attached to the editor."""

    filename: str = ""
    output_flag: bool = False
    create: bool = False
    fd: Optional[BinaryIO] = field(default=None, repr=False)
    tnm: str = ""
    memory: str = ""
    entab: bool = False
    purge: bool = False
    versions: int = 1
    mode: int = 0
    previous_file_id: int = 0
    eof: bool = False
    l_counter: int = 0
    valid: bool = False
    first_line: Optional[Line] = field(default=None, repr=False)
    last_line: Optional[Line] = field(default=None, repr=False)
    line_count: int = 0


def _expand(name: str) -> str:
    return os.path.expandvars(os.path.expanduser(name))


def _umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _list_backups(prefix: str) -> list[int]:
    directory = os.path.dirname(prefix) or "."
    base = os.path.basename(prefix)
    try:
        names = os.listdir(directory)
    except OSError:
        return []
    return sorted(
        int(name[len(base):])
        for name in names
        if name.startswith(base) and name[len(base):].isdigit()
    )


def _remove_backups(prefix: str, versions: list[int]) -> None:
    for version in versions:
        try:
            os.unlink(prefix + str(version))
        except OSError:
            pass


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def create_open(fyle: FileObject, related: Optional[FileObject]) -> None:
    """Open ``fyle`` for reading, or create a temporary file to write it through."""
    fyle.l_counter = 0
    if not fyle.output_flag:
        if not fyle.filename:
            raise FileSysError("No input file name given")
        fyle.filename = _expand(fyle.filename)
        try:
            st = os.stat(fyle.filename)
        except OSError as exc:
            raise FileSysError(f"Cannot open ({fyle.filename}) as input") from exc
        if os.path.isdir(fyle.filename):
            raise FileSysError(f"File ({fyle.filename}) is a directory")
        try:
            fyle.fd = open(fyle.filename, "rb")
        except OSError as exc:
            raise FileSysError(f"Cannot open ({fyle.filename}) as input") from exc
        fyle.mode = st.st_mode
        fyle.previous_file_id = st.st_mtime_ns
        fyle.eof = False
        return

    related_name = related.filename if related is not None else ""
    if not fyle.filename:
        fyle.filename = related_name
    if not fyle.filename:
        raise FileSysError("No output file name given")
    fyle.filename = _expand(fyle.filename)
    if os.path.isdir(fyle.filename) and related_name:
        fyle.filename = os.path.join(fyle.filename, os.path.basename(related_name))
    if os.path.exists(fyle.filename):
        if fyle.create:
            raise FileSysError(f"File ({fyle.filename}) already exists")
        if os.path.isdir(fyle.filename):
            raise FileSysError(f"File ({fyle.filename}) is a directory")
        if not os.access(fyle.filename, os.W_OK):
            raise FileSysError(f"Write access to file ({fyle.filename}) is denied")
        st = os.stat(fyle.filename)
        fyle.mode = st.st_mode
        fyle.previous_file_id = st.st_mtime_ns
    else:
        fyle.mode = 0o666 & ~_umask()
        fyle.previous_file_id = 0

    uniq = 0
    fyle.tnm = fyle.filename + "-lw"
    while os.path.exists(fyle.tnm):
        uniq += 1
        fyle.tnm = f"{fyle.filename}-lw{uniq}"
    try:
        fyle.fd = open(fyle.tnm, "w+b")
    except OSError as exc:
        raise FileSysError(f"Error opening ({fyle.tnm}) as output") from exc


def close(fyle: FileObject, action: int) -> str:
    """Close ``fyle``; ``action`` is CLOSE, DELETE or KEEP_OPEN. Return a status message."""
    if not fyle.output_flag:
        try:
            fyle.fd.close()
        except OSError as exc:
            raise FileSysError(f"Cannot close {fyle.filename}") from exc
        n = fyle.l_counter
        return f"File {fyle.filename} closed ({n} line{_plural(n)} read)."

    try:
        if action == KEEP_OPEN:
            fyle.fd.flush()
        else:
            fyle.fd.close()
    except OSError as exc:
        raise FileSysError(f"Cannot close {fyle.tnm}") from exc

    if action == DELETE:
        try:
            os.unlink(fyle.tnm)
        except OSError as exc:
            raise FileSysError(f"Cannot delete {fyle.tnm}") from exc
        return f"Output file {fyle.tnm} deleted."

    try:
        st = os.stat(fyle.filename)
    except OSError:
        st = None
    if st is not None and st.st_mtime_ns != fyle.previous_file_id:
        warnings.warn(f"{fyle.filename} was modified by another process", stacklevel=2)

    tname = fyle.filename + "~"
    versions = _list_backups(tname)
    if fyle.purge:
        if fyle.versions <= 0:
            _remove_backups(tname, versions)
        else:
            to_retain = fyle.versions - 1
            if len(versions) > to_retain:
                _remove_backups(tname, versions[: len(versions) - to_retain])
    elif versions and len(versions) >= fyle.versions:
        _remove_backups(tname, versions[:1])
    max_vnum = versions[-1] if versions else 0

    if fyle.versions != 0 or (not fyle.purge and max_vnum != 0):
        if os.path.exists(fyle.filename):
            try:
                os.rename(fyle.filename, tname + str(max_vnum + 1))
            except OSError:
                pass

    try:
        os.chmod(fyle.tnm, fyle.mode & 0o777)
    except OSError:
        pass
    try:
        os.rename(fyle.tnm, fyle.filename)
    except OSError as exc:
        raise FileSysError(f"Cannot rename {fyle.tnm} to {fyle.filename}") from exc

    if fyle.memory and not fyle.filename.startswith(_TMP_DIRS):
        try:
            with open(fyle.memory, "w", encoding="utf-8") as mem:
                mem.write(os.path.abspath(fyle.filename) + "\n")
        except OSError:
            pass
    n = fyle.l_counter
    return f"File {fyle.filename} created ({n} line{_plural(n)} written)."


def read_line(fyle: FileObject) -> Optional[str]:
    """Read the next line, expanding tabs and dropping control characters.

    Lines longer than the maximum line length are split. Returns None at end of file.
    """
    out: list[str] = []
    while True:
        raw = fyle.fd.read(1)
        if not raw:
            fyle.eof = True
            if out:
                break
            return None
        ch = raw[0] & 0x7F
        if 0x20 <= ch <= 0x7E:
            out.append(chr(ch))
        elif ch == 0x09:
            exp = 8 - len(out) % 8
            exp = min(exp, MAX_STR_LEN - len(out))
            out.extend(" " * exp)
        elif ch in _LINE_ENDS:
            break
        if len(out) >= MAX_STR_LEN:
            break
    fyle.l_counter += 1
    return "".join(out)


def write_line(fyle: FileObject, text: str) -> None:
    """Write ``text`` and a newline, turning leading runs of 8 spaces into tabs if entab is set."""
    if text and fyle.entab:
        leading = len(text) - len(text.lstrip(" "))
        tabs = leading // 8
        text = "\t" * tabs + text[tabs * 8:]
    try:
        fyle.fd.write(text.encode("latin-1", errors="replace") + _NEWLINE)
    except OSError as exc:
        raise FileSysError(f"Error writing {fyle.filename}") from exc
    fyle.l_counter += 1


def rewind(fyle: FileObject) -> None:
    """Go back to the start of ``fyle``."""
    try:
        fyle.fd.seek(0)
    except OSError as exc:
        raise FileSysError(f"Cannot rewind {fyle.filename}") from exc
    fyle.eof = False
    fyle.l_counter = 0


def save(input_file: Optional[FileObject], output_file: FileObject, copy_lines: int) -> None:
    """Save the output so far and reopen it, keeping ``copy_lines`` written lines.

    The unread input is copied to the output, the output is renamed into place
    and becomes the new input, and a fresh output file receives its first
    ``copy_lines`` lines again.
    """
    input_eof = False
    input_position = 0
    if input_file is not None:
        input_eof = input_file.eof
        input_position = output_file.fd.tell()
        while (line := read_line(input_file)) is not None:
            write_line(output_file, line)
            if input_file.eof:
                break
        close(input_file, CLOSE)

    close(output_file, KEEP_OPEN)

    temporary = input_file is None
    if temporary:
        input_file = FileObject(output_flag=False)
    input_file.filename = output_file.filename
    input_file.fd = output_file.fd
    rewind(input_file)

    output_file.create = False
    create_open(output_file, None)

    for _ in range(copy_lines):
        line = read_line(input_file)
        if line is None:
            raise FileSysError(f"Cannot reread {input_file.filename}")
        write_line(output_file, line)

    if temporary:
        input_file.fd.close()
    else:
        input_file.eof = input_eof
        input_file.fd.seek(input_position)