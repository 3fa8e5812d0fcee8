from __future__ import annotations

from pathlib import Path

from git_complete.buffer import TextBuffer, mode_for_path


def test_line_helpers_report_offsets() -> None:
    buffer = TextBuffer(text="ab\ncd\n\nef", point=4)

    assert buffer.line_start() == 3
    assert buffer.line_end() == 5
    assert buffer.previous_line_start() == 0
    assert buffer.line_number() == 1
    assert buffer.offset_of_line(3) == 7
    assert buffer.offset_of_line(10) == len(buffer.text)


def test_goto_line_clamps_column() -> None:
    buffer = TextBuffer(text="first\nsecond")

    buffer.goto_line(1)
    assert buffer.point == len(buffer.text)

    buffer.goto_line(0, column=99)
    assert buffer.point == 5

    buffer.goto_line(1, column=2)
    assert buffer.point == 8


def test_edits_keep_point_in_place() -> None:
    buffer = TextBuffer(text="hello world", point=6)

    buffer.insert(0, ">> ")
    assert buffer.point == 9

    removed = buffer.delete(0, 3)
    assert removed == ">> "
    assert buffer.point == 6

    buffer.delete(4, 8)
    assert buffer.text == "hellrld"
    assert buffer.point == 4


def test_from_file_guesses_mode(tmp_path: Path) -> None:
    path = tmp_path / "init.el"
    path.write_text("(require 'cl-lib)\n", encoding="utf-8")

    buffer = TextBuffer.from_file(path)

    assert buffer.mode == "emacs-lisp"
    assert buffer.path == path
    assert mode_for_path(Path("x.unknown")) == ""
