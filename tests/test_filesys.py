import os

import pytest

from ludwig import filesys
from ludwig.filesys import FileObject, FileSysError
from ludwig.lines import MAX_STR_LEN


@pytest.mark.parametrize(
    "text, entab, expected",
    [
        ("        hello", False, "        hello\n"),
        ("        hello", True, "\thello\n"),
        ("                hello", True, "\t\thello\n"),
        ("       hello", True, "       hello\n"),
        ("hello", True, "hello\n"),
    ],
)
def test_write_line_entab(tmp_path, text, entab, expected):
    path = tmp_path / "out.txt"
    with open(path, "w+b") as fd:
        fyle = FileObject(fd=fd, entab=entab, output_flag=True)
        filesys.write_line(fyle, text)
    assert path.read_bytes().decode() == expected
    assert fyle.l_counter == 1


def test_write_line_counts_lines(tmp_path):
    fd = open(tmp_path / "x", "w+b")
    fyle = FileObject(fd=fd, output_flag=True)
    filesys.write_line(fyle, "a")
    filesys.write_line(fyle, "")
    fd.close()
    assert fyle.l_counter == 2
    assert (tmp_path / "x").read_bytes() == b"a\n\n"


def _input(path):
    fyle = FileObject(filename=str(path))
    filesys.create_open(fyle, None)
    return fyle


def test_read_line_expands_tabs_and_drops_controls(tmp_path):
    path = tmp_path / "in.txt"
    path.write_bytes(b"a\tb\x01c\nlast")
    fyle = _input(path)
    assert filesys.read_line(fyle) == "a       bc"
    assert filesys.read_line(fyle) == "last"
    assert fyle.eof is True
    assert filesys.read_line(fyle) is None
    assert fyle.l_counter == 2
    filesys.close(fyle, filesys.CLOSE)


def test_read_line_splits_long_lines(tmp_path):
    path = tmp_path / "long.txt"
    path.write_bytes(b"x" * (MAX_STR_LEN + 5) + b"\n")
    fyle = _input(path)
    assert filesys.read_line(fyle) == "x" * MAX_STR_LEN
    assert filesys.read_line(fyle) == "xxxxx"
    filesys.close(fyle, filesys.CLOSE)


def test_rewind_restarts(tmp_path):
    path = tmp_path / "in.txt"
    path.write_bytes(b"one\ntwo\n")
    fyle = _input(path)
    filesys.read_line(fyle)
    filesys.read_line(fyle)
    filesys.rewind(fyle)
    assert fyle.l_counter == 0
    assert fyle.eof is False
    assert filesys.read_line(fyle) == "one"
    filesys.close(fyle, filesys.CLOSE)


def test_close_input_message(tmp_path):
    path = tmp_path / "in.txt"
    path.write_bytes(b"one\n")
    fyle = _input(path)
    filesys.read_line(fyle)
    assert filesys.close(fyle, filesys.CLOSE) == f"File {path} closed (1 line read)."


def test_create_open_missing_input(tmp_path):
    fyle = FileObject(filename=str(tmp_path / "nope"))
    with pytest.raises(FileSysError):
        filesys.create_open(fyle, None)


def test_create_open_empty_name():
    with pytest.raises(FileSysError):
        filesys.create_open(FileObject(), None)


def test_create_open_output_existing_with_create(tmp_path):
    path = tmp_path / "exists.txt"
    path.write_text("x")
    fyle = FileObject(filename=str(path), output_flag=True, create=True)
    with pytest.raises(FileSysError, match="already exists"):
        filesys.create_open(fyle, None)


def test_create_open_output_temp_names(tmp_path):
    path = tmp_path / "new.txt"
    (tmp_path / "new.txt-lw").write_text("taken")
    fyle = FileObject(filename=str(path), output_flag=True)
    filesys.create_open(fyle, None)
    assert fyle.tnm == str(path) + "-lw1"
    assert os.path.exists(fyle.tnm)
    filesys.close(fyle, filesys.DELETE)
    assert not os.path.exists(fyle.tnm)


def test_create_open_output_into_directory(tmp_path):
    related = FileObject(filename=str(tmp_path / "source.txt"))
    outdir = tmp_path / "dir"
    outdir.mkdir()
    fyle = FileObject(filename=str(outdir), output_flag=True)
    filesys.create_open(fyle, related)
    assert fyle.filename == str(outdir / "source.txt")
    filesys.close(fyle, filesys.DELETE)


def test_close_output_renames_and_backs_up(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_bytes(b"old\n")
    fyle = FileObject(filename=str(path), output_flag=True, versions=1)
    filesys.create_open(fyle, None)
    filesys.write_line(fyle, "new")
    message = filesys.close(fyle, filesys.CLOSE)
    assert message == f"File {path} created (1 line written)."
    assert path.read_bytes() == b"new\n"
    assert (tmp_path / "doc.txt~1").read_bytes() == b"old\n"
    assert not os.path.exists(fyle.tnm)


def test_close_output_no_backup_when_versions_zero(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_bytes(b"old\n")
    fyle = FileObject(filename=str(path), output_flag=True, versions=0)
    filesys.create_open(fyle, None)
    filesys.write_line(fyle, "new")
    filesys.close(fyle, filesys.CLOSE)
    assert path.read_bytes() == b"new\n"
    assert sorted(os.listdir(tmp_path)) == ["doc.txt"]


def test_save_round_trip(tmp_path):
    src = tmp_path / "in.txt"
    src.write_bytes(b"a\nb\nc\n")
    dst = tmp_path / "out.txt"
    inp = _input(src)
    out = FileObject(filename=str(dst), output_flag=True, versions=0)
    filesys.create_open(out, inp)
    assert filesys.read_line(inp) == "a"
    filesys.write_line(out, "A")

    filesys.save(inp, out, 1)

    assert dst.read_bytes() == b"A\nb\nc\n"
    assert inp.filename == str(dst)
    assert filesys.read_line(inp) == "b"
    filesys.close(inp, filesys.CLOSE)
    out.fd.close()
    assert open(out.tnm, "rb").read() == b"A\n"


def test_save_without_input(tmp_path):
    dst = tmp_path / "out.txt"
    out = FileObject(filename=str(dst), output_flag=True, versions=0)
    filesys.create_open(out, None)
    filesys.write_line(out, "one")
    filesys.write_line(out, "two")
    filesys.save(None, out, 2)
    assert dst.read_bytes() == b"one\ntwo\n"
    out.fd.close()
    assert open(out.tnm, "rb").read() == b"one\ntwo\n"