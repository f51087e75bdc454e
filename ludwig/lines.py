"""Lines, groups and frames: the linked text structure of an editing frame.

A frame holds its text as a doubly linked list of lines.  The lines are
partitioned into a doubly linked list of groups, each holding at most
``MAX_GROUP_LINES`` consecutive lines, so that line numbers can be computed
quickly.  The last line of every frame is the end-of-page (EOP) line, which
lives in a group created by :func:`eop_create`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Protocol

MAX_STR_LEN = 400
MAX_GROUP_LINES = 64
MAX_SPACE = 10_000_000


class ScreenView(Protocol):
    """What the line structure needs from a screen showing a frame."""

    top_line: "Line"
    bot_line: "Line"

    def lines_inject(self, first_line: "Line", count: int, before_line: "Line") -> None:
        """Show ``count`` new lines starting at ``first_line`` above ``before_line``."""

    def lines_extract(self, first_line: "Line", last_line: "Line") -> None:
        """Remove the displayed lines ``first_line`` .. ``last_line``."""


@dataclass(eq=False)
class Line:
    """One line of text; ``text`` is its allocated buffer, ``used`` its length."""

    flink: Optional["Line"] = field(default=None, repr=False)
    blink: Optional["Line"] = field(default=None, repr=False)
    group: Optional["Group"] = field(default=None, repr=False)
    offset_nr: int = 0
    marks: list = field(default_factory=list, repr=False)
    text: Optional[bytearray] = None
    used: int = 0
    scr_row_nr: int = 0

    @property
    def length(self) -> int:
        """Allocated length of the line's text buffer."""
        return 0 if self.text is None else len(self.text)


@dataclass(eq=False)
class Group:
    """A run of consecutive lines of one frame."""

    flink: Optional["Group"] = field(default=None, repr=False)
    blink: Optional["Group"] = field(default=None, repr=False)
    frame: Optional["Frame"] = field(default=None, repr=False)
    first_line: Optional[Line] = field(default=None, repr=False)
    last_line: Optional[Line] = field(default=None, repr=False)
    first_line_nr: int = 1
    nr_lines: int = 0


@dataclass(eq=False)
class Frame:
    """The parts of an editing frame that the line structure maintains."""

    first_group: Optional[Group] = field(default=None, repr=False)
    last_group: Optional[Group] = field(default=None, repr=False)
    space_limit: int = MAX_SPACE
    space_left: int = MAX_SPACE
    screen: Optional[ScreenView] = field(default=None, repr=False)


def _chain(first_line: Optional[Line]) -> Iterator[Line]:
    line = first_line
    while line is not None:
        yield line
        line = line.flink


def eop_create(frame: Frame) -> Group:
    """Create a group holding only an empty EOP line, belonging to ``frame``."""
    group = Group(frame=frame, first_line_nr=1, nr_lines=1)
    line = Line(group=group)
    group.first_line = line
    group.last_line = line
    return group


def eop_destroy(group: Group) -> None:
    """Release the EOP line of ``group``."""
    eop_line = group.first_line
    if eop_line is not None and eop_line.text is not None:
        eop_line.text = None
        eop_line.marks.clear()


def lines_create(count: int) -> tuple[Optional[Line], Optional[Line]]:
    """Create a detached chain of ``count`` empty lines; return (first, last)."""
    first: Optional[Line] = None
    prev: Optional[Line] = None
    for _ in range(count):
        line = Line(blink=prev)
        if first is None:
            first = line
        if prev is not None:
            prev.flink = line
        prev = line
    return first, prev


def lines_destroy(first_line: Optional[Line]) -> None:
    """Release the text of every line in the chain starting at ``first_line``."""
    for line in _chain(first_line):
        if line.text is not None:
            line.text = None
            line.marks.clear()


def lines_inject(first_line: Line, last_line: Line, before_line: Line) -> None:
    """Insert the detached chain first_line..last_line just above ``before_line``."""
    nr_new_lines = 0
    space = 0
    for line in _chain(first_line):
        space += line.length
        nr_new_lines += 1

    top_line = before_line.blink
    end_group = before_line.group
    top_group = end_group.blink
    this_frame = end_group.frame

    nr_free_lines_end = MAX_GROUP_LINES - end_group.nr_lines
    nr_free_lines_top = MAX_GROUP_LINES - top_group.nr_lines if top_group is not None else 0
    nr_free_lines = nr_free_lines_end + nr_free_lines_top
    line_nr = end_group.first_line_nr

    if nr_new_lines > nr_free_lines:
        nr_new_groups = (nr_new_lines - nr_free_lines - 1) // MAX_GROUP_LINES + 1
        first_group: Optional[Group] = None
        last_group: Optional[Group] = None
        for _ in range(nr_new_groups):
            group = Group(blink=last_group, frame=this_frame, first_line_nr=line_nr, nr_lines=0)
            if first_group is None:
                first_group = group
            if last_group is not None:
                last_group.flink = group
            last_group = group
        last_group.flink = end_group
        end_group.blink = last_group
        if top_group is not None:
            top_group.flink = first_group
            adjust_group = top_group
        else:
            this_frame.first_group = first_group
            adjust_group = first_group
        first_group.blink = top_group
    elif nr_new_lines > nr_free_lines_end:
        adjust_group = top_group
    else:
        adjust_group = end_group

    last_line.flink = before_line
    before_line.blink = last_line
    if before_line.offset_nr == 0:
        end_group.first_line = first_line
    if top_line is not None:
        top_line.flink = first_line
    first_line.blink = top_line

    nr_lines_to_adjust = nr_new_lines
    if nr_new_lines > nr_free_lines_end:
        adjust_line = end_group.first_line
        nr_lines_to_adjust += before_line.offset_nr
        end_group.nr_lines = 0
    else:
        adjust_line = first_line
        end_group.nr_lines = before_line.offset_nr
    end_group_last_line = end_group.last_line

    while nr_lines_to_adjust > 0:
        here = min(MAX_GROUP_LINES - adjust_group.nr_lines, nr_lines_to_adjust)
        if adjust_group.nr_lines == 0:
            adjust_group.first_line = adjust_line
            adjust_group.first_line_nr = line_nr
        for offset in range(adjust_group.nr_lines, adjust_group.nr_lines + here):
            adjust_line.group = adjust_group
            adjust_line.offset_nr = offset
            adjust_line = adjust_line.flink
        adjust_group.last_line = adjust_line.blink
        adjust_group.nr_lines += here
        line_nr = adjust_group.first_line_nr + adjust_group.nr_lines
        nr_lines_to_adjust -= here
        adjust_group = adjust_group.flink

    next_group_first_line = end_group_last_line.flink
    offset = end_group.nr_lines
    while True:
        adjust_line.offset_nr = offset
        offset += 1
        adjust_line = adjust_line.flink
        if adjust_line is next_group_first_line:
            break

    end_group.last_line = end_group_last_line
    if adjust_group is end_group:
        end_group.first_line_nr = line_nr
        end_group.first_line = before_line
    end_group.nr_lines = offset

    group = end_group.flink
    while group is not None:
        group.first_line_nr += nr_new_lines
        group = group.flink

    this_frame.space_left -= space

    screen = this_frame.screen
    if screen is not None and before_line.scr_row_nr != 0 and before_line is not screen.top_line:
        screen.lines_inject(first_line, nr_new_lines, before_line)


def lines_extract(first_line: Line, last_line: Line) -> None:
    """Unlink first_line..last_line from their frame, leaving a detached chain."""
    top_line = first_line.blink
    end_line = last_line.flink

    first_group = first_line.group
    last_group = last_line.group
    top_group = top_line.group if top_line is not None else None
    end_group = end_line.group
    this_frame = end_group.frame

    first_line_offset_nr = first_line.offset_nr
    first_line_nr = first_group.first_line_nr + first_line_offset_nr
    nr_lines_to_remove = last_group.first_line_nr + last_line.offset_nr - first_line_nr + 1

    screen = this_frame.screen
    if screen is not None:
        first_scr: Optional[Line] = None
        if first_line.scr_row_nr != 0:
            first_scr = first_line
        elif first_line_nr < line_to_number(screen.top_line):
            first_scr = screen.top_line
        if first_scr is not None:
            last_scr: Optional[Line] = None
            if last_line.scr_row_nr != 0:
                last_scr = last_line
            elif line_to_number(last_line) > line_to_number(screen.bot_line):
                last_scr = screen.bot_line
            if last_scr is not None:
                screen.lines_extract(first_scr, last_scr)

    if top_line is not None:
        top_line.flink = end_line
    first_line.blink = None
    last_line.flink = None
    end_line.blink = top_line

    space = 0
    line = first_line
    for _ in range(nr_lines_to_remove):
        space += line.length
        line = line.flink
    this_frame.space_left += space

    if top_group is not end_group:
        if top_group is not None:
            top_group.last_line = top_line
        end_group.first_line = end_line
        end_group.first_line_nr = first_line_nr

    group = end_group.flink
    while group is not None:
        group.first_line_nr -= nr_lines_to_remove
        group = group.flink

    if first_group is top_group:
        nr_lines_to_remove -= first_group.nr_lines - first_line_offset_nr
        first_group.nr_lines = first_line_offset_nr
        if first_group is not last_group:
            first_group = first_group.flink

    group = first_group
    while nr_lines_to_remove > 0:
        nr_lines_to_remove -= group.nr_lines
        group.nr_lines = 0
        group = group.flink

    if nr_lines_to_remove < 0:
        if top_group is end_group:
            offset = first_line_offset_nr
            end_group.nr_lines = offset - nr_lines_to_remove
        else:
            offset = 0
            end_group.nr_lines = -nr_lines_to_remove
        line = end_line
        while offset < end_group.nr_lines:
            line.offset_nr = offset
            line = line.flink
            offset += 1

    if first_group.nr_lines == 0:
        last_group = first_group
        end_group = last_group.flink
        while end_group.nr_lines == 0:
            last_group = end_group
            end_group = end_group.flink
        top_group = first_group.blink
        if top_group is not None:
            top_group.flink = end_group
        else:
            this_frame.first_group = end_group
        first_group.blink = None
        last_group.flink = None
        end_group.blink = top_group


def change_length(line: Line, new_length: int) -> None:
    """Reallocate the line's text buffer, quantised upward, keeping its contents."""
    if new_length > 0:
        if new_length < MAX_STR_LEN - 10:
            new_length = (new_length // 10 + 1) * 10
        else:
            new_length = MAX_STR_LEN
        old = bytes(line.text) if line.text is not None else b""
        new_text: Optional[bytearray] = bytearray(old[:new_length].ljust(new_length, b" "))
    else:
        new_length = 0
        new_text = None

    if line.group is not None and line.group.frame is not None:
        line.group.frame.space_left += line.length - new_length
    line.text = new_text


def line_to_number(line: Line) -> int:
    """Return the 1-based line number of ``line`` within its frame."""
    return line.group.first_line_nr + line.offset_nr


def line_from_number(frame: Frame, number: int) -> Optional[Line]:
    """Return the line numbered ``number`` in ``frame``, or None if past the end."""
    group = frame.last_group
    if number >= group.first_line_nr + group.nr_lines:
        return None
    while group.first_line_nr > number:
        group = group.blink
    line = group.first_line
    for _ in range(number - group.first_line_nr):
        line = line.flink
    return line