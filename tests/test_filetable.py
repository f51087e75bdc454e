import pytest

from ludwig.filesys import FileObject
from ludwig.filetable import FileSlot, file_name, format_file_table


def test_file_name_short_unchanged():
    assert file_name("abc.txt", 20) == "abc.txt"


def test_file_name_exact_length_unchanged():
    assert file_name("abcdefghij", 10) == "abcdefghij"


@pytest.mark.parametrize("max_len", [5, 6, 9, 10, 17])
def test_file_name_long_is_cut_in_middle(max_len):
    name = "/home/someone/projects/a_rather_long_file_name.txt"
    short = file_name(name, max_len)
    assert len(short) == max_len
    assert "---" in short
    head, tail = short.split("---", 1)
    assert name.startswith(head)
    assert name.endswith(tail)
    assert len(head) >= len(tail)


def test_file_name_clamps_small_width():
    name = "abcdefghijklmnop"
    assert file_name(name, 1) == file_name(name, 5)
    assert len(file_name(name, 0)) == 5


def test_table_header_only_for_no_slots():
    assert format_file_table([]) == [
        "Usage   Mod Frame  Filename",
        "------- --- ------ --------",
        "",
    ]


def test_empty_slots_skipped():
    assert format_file_table([None, None]) == format_file_table([])


def test_frame_input_with_eof():
    slot = FileSlot(FileObject(filename="in.txt", eof=True), frame_name="C")
    lines = format_file_table([slot])
    assert len(lines) == 4
    row = lines[3]
    assert row.startswith("FI  EOF")
    assert row.endswith(" in.txt")
    assert row.index("in.txt") == lines[0].index("Filename")


def test_modified_output_frame():
    slot = FileSlot(FileObject(filename="out.txt", output_flag=True), frame_name="C", modified=True)
    row = format_file_table([slot])[3]
    assert row.startswith("FO ")
    assert row[8:11] == " * "


def test_usage_codes():
    assert FileSlot(FileObject(), global_file=True).usage == "FGI"
    assert FileSlot(FileObject(output_flag=True), global_file=True).usage == "FGO"
    assert FileSlot(FileObject()).usage == "FFI"
    assert FileSlot(FileObject(output_flag=True)).usage == "FFO"


def test_modified_ignored_without_frame():
    slot = FileSlot(FileObject(filename="g.txt"), modified=True, global_file=True)
    row = format_file_table([slot])[3]
    assert " * " not in row
    assert row.startswith("FGI")


def test_long_frame_name_wraps():
    slot = FileSlot(FileObject(filename="x.txt"), frame_name="LONGFRAMENAME")
    lines = format_file_table([slot])
    assert len(lines) == 5
    assert "LONGFRAMENAME" in lines[3]
    assert lines[4].startswith(" " * 18)
    assert lines[4].strip() == "x.txt"


def test_width_limits_file_name():
    name = "/a/very/long/path/to/some/file/that/does/not/fit.txt"
    slot = FileSlot(FileObject(filename=name), frame_name="C")
    row = format_file_table([slot], width=40)[3]
    shown = row[19:]
    assert shown == file_name(name, 40 - 19)
    assert len(row) == 40
    assert "---" in shown