"""Indexed help file: an index of keyed entries followed by their text."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import BinaryIO, Optional

NEW_HELPFILE_ENV = "LUD_NEWHELPFILE"
OLD_HELPFILE_ENV = "LUD_HELPFILE"
NEW_DEFAULT_HLP_FILE = "/usr/local/help/ludwignewhlp.idx"
OLD_DEFAULT_HLP_FILE = "/usr/local/help/ludwighlp.idx"
CONTENTS_KEY = "0"


@dataclass
class HelpRecord:
    """One line of a help entry, with the key of the entry it belongs to."""

    key: str
    txt: str


@dataclass
class _Entry:
    start: int
    end: int


def _text(line: bytes) -> str:
    return line.decode("latin-1").rstrip("\n")


class HelpFile:
    """Reads keyed entries from a seekable binary help file stream.

    The stream starts with a line holding the number of index entries and the
    number of lines in the contents page, then one ``key start end`` line per
    entry, then the contents page (key ``"0"``), then the entries' text.
    Entry offsets are relative to the end of the contents page.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream: Optional[BinaryIO] = stream
        self._table: dict[str, _Entry] = {}
        self._current: Optional[tuple[str, _Entry]] = None
        self._read_index()

    def _read_index(self) -> None:
        stream = self._stream
        parts = stream.readline().split()
        if len(parts) != 2:
            raise ValueError("malformed help file header")
        index_size, contents_lines = (int(p) for p in parts)

        entries: dict[str, _Entry] = {}
        for _ in range(index_size):
            line = stream.readline()
            fields = line.split()
            if not line or len(fields) != 3:
                raise ValueError("malformed help file index")
            entries[fields[0].decode("latin-1")] = _Entry(int(fields[1]), int(fields[2]))

        contents_start = stream.tell()
        for _ in range(contents_lines):
            if not stream.readline():
                raise ValueError("help file contents page is truncated")
        contents_end = stream.tell()

        self._table = {
            key: _Entry(e.start + contents_end, e.end + contents_end)
            for key, e in entries.items()
        }
        self._table[CONTENTS_KEY] = _Entry(contents_start, contents_end)

    def __enter__(self) -> "HelpFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def read(self, key: str) -> Optional[HelpRecord]:
        """Return the first line of the entry for ``key``, or None if there is none."""
        entry = self._table.get(key)
        if entry is None:
            return None
        self._current = (key, entry)
        self._stream.seek(entry.start)
        line = self._stream.readline()
        if not line:
            return None
        return HelpRecord(key, _text(line))

    def next(self) -> Optional[HelpRecord]:
        """Return the next line of the current entry, or None at its end."""
        if self._current is None or self._stream is None:
            return None
        key, entry = self._current
        if self._stream.tell() >= entry.end:
            return None
        line = self._stream.readline()
        if not line:
            return None
        return HelpRecord(key, _text(line))

    def close(self) -> None:
        """Close the stream and forget the index."""
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        self._current = None
        self._table = {}


def open_helpfile(path: Optional[str] = None) -> HelpFile:
    """Open the help file at ``path``, or the one named by the environment or the default."""
    if path is None:
        path = os.environ.get(NEW_HELPFILE_ENV) or NEW_DEFAULT_HLP_FILE
    stream = open(path, "rb")
    try:
        return HelpFile(stream)
    except ValueError:
        stream.close()
        raise