# ludwig

The core of the Ludwig line editor as a Python library. It has no
dependencies beyond the standard library.

## What is in it

- `ludwig.lines`: the text of a frame is a doubly linked list of `Line`
  objects, split into `Group`s of at most `MAX_GROUP_LINES` lines so that
  line numbers can be found quickly. Each frame ends with an end-of-page
  line, made by `eop_create`. Build and change a `Frame` with
  `lines_create`, `lines_inject`, `lines_extract` and `change_length`.
  `change_length` rounds buffer sizes up to a multiple of 10, with
  `MAX_STR_LEN` as the cap, and keeps the frame's `space_left` up to date.
  `line_to_number` and `line_from_number` convert between lines and line
  numbers. `line_from_number` returns `None` past the end.
- `ludwig.filesys`: line-oriented reading and writing through a
  `FileObject`.
  - `read_line` expands tabs, drops control characters and splits lines
    longer than `MAX_STR_LEN`.
  - `write_line` can turn leading runs of eight spaces into tabs (`entab`).
  - `create_open` sends output to a temporary file (`name-lw`).
  - `close(fyle, action)` takes `CLOSE`, `DELETE` or `KEEP_OPEN`. On a normal
    close it renames the temporary file into place and keeps numbered backups
    (`name~1`, `name~2`, ...) as the `versions` and `purge` settings say. It
    returns a status message.
  - `rewind` goes back to the start of a file, and `save` writes out and
    reopens an output file.
  - Failures raise `FileSysError`.
- `ludwig.fileparse`: `parse` reads editor-style arguments,
  `-c -r -i file -I -s n -m file -M -t -T -b n -B n -o -O -u [file [file]]`.
  It fills in a `FileData` and opens the files needed for a given
  `ParseType` (`COMMAND`, `INPUT`, `OUTPUT`, `EDIT`, `EXECUTE`, `STDIN`).
  Bad usage, or a file that cannot be opened, raises `ParseError`.
- `ludwig.fyle`: higher-level file operations.
  - `file_create_open` returns the opened `(input, output)` pair.
  - `file_read` reads a run of lines into a detached chain. It returns
    `(first, last, count)`.
  - `file_write` writes the chain `first_line..last_line`.
  - `file_close_delete` closes a file, and deletes it if asked.
  - `file_rewind` discards buffered lines and goes back to the start.
- `ludwig.filetable`: `file_name` shortens a long file name to a given width
  by cutting out its middle and putting `---` in its place.
  `format_file_table` returns the lines of a listing of `FileSlot`s.
- `ludwig.helpfile`: `HelpFile` reads an indexed help file from a seekable
  binary stream. `read(key)` returns the first line of an entry as a
  `HelpRecord`, and `next()` returns the lines that follow.
  `open_helpfile(path)` opens a file. With no path it uses the file named by
  the `LUD_NEWHELPFILE` environment variable, or
  `/usr/local/help/ludwignewhlp.idx` if that is not set.
- `ludwig.help`: `run_help(helpfile, selection, write, ask)` runs the help
  browser. It sends text lines to `write` and takes replies from `ask`.

## Install

```
pip install .
pip install ".[test]"   # with the test dependencies
```

## Example

```python
from ludwig.lines import Frame, eop_create, lines_create, lines_inject, line_to_number

frame = Frame()
group = eop_create(frame)
frame.first_group = frame.last_group = group
eop = group.first_line

first, last = lines_create(3)
lines_inject(first, last, eop)
assert line_to_number(first) == 1
assert line_to_number(eop) == 4
```

## What it does not do

This is a library and not an editor. It has no command to run, and no
screen or terminal display. It has no command language, no frame, span or
mark commands, and no search or replace. It ships no help text: give
`open_helpfile` or `HelpFile` an index file of your own.

## Tests

```
pytest
```