from __future__ import annotations

from git_complete.buffer import TextBuffer
from git_complete.collaborators import CopyIndentReindenter
from git_complete.parens import scan
from git_complete.replace import BalancedReplacer


def _open_count(text: str) -> int:
    return len(scan(text).unmatched_opens)


def test_same_paren_shape_keeps_balance() -> None:
    buffer = TextBuffer(text="(foo bar)\n", point=4)
    before = _open_count(buffer.text)

    result = BalancedReplacer().apply(buffer, 0, 4, "(bar")

    assert result.plan.is_empty
    assert buffer.text == "(bar\n bar)\n"
    assert _open_count(buffer.text) == before
    assert buffer.point == 6


def test_missing_closers_follow_a_blank_line() -> None:
    buffer = TextBuffer(text="foo", point=3)

    BalancedReplacer().apply(buffer, 0, 3, "if (x) {")

    assert buffer.text == "if (x) {\n\n}"
    assert buffer.point == 9


def test_missing_closers_follow_directly_when_blank_line_insensitive() -> None:
    buffer = TextBuffer(text="defun", point=5)

    BalancedReplacer().apply(buffer, 0, 5, "(defun foo ()", blank_line_insensitive=True)

    assert buffer.text == "(defun foo ()\n)"
    assert buffer.point == 14


def test_redundant_closer_after_cursor_is_removed() -> None:
    buffer = TextBuffer(text="f(x)", point=3)

    result = BalancedReplacer().apply(buffer, 0, 3, "g")

    assert [token.closer for token in result.plan.extra_closes] == [")"]
    assert buffer.text == "g\n"
    assert scan(buffer.text).balanced


def test_closer_on_following_line_is_consumed() -> None:
    buffer = TextBuffer(text="foo(\nbar\n)", point=8)

    BalancedReplacer().apply(buffer, 5, 8, "baz)")

    assert buffer.text == "foo(\nbaz)\n\n"
    assert scan(buffer.text).balanced


def test_missing_closer_restores_opener_in_front() -> None:
    buffer = TextBuffer(text="(foo\n  bar)\n", point=4)
    before = _open_count(buffer.text)

    BalancedReplacer().apply(buffer, 0, 4, "baz")

    assert buffer.text == "(baz\n\n  bar)\n"
    assert _open_count(buffer.text) == before


def test_autopair_disabled_only_adds_line_break() -> None:
    buffer = TextBuffer(text="foo", point=3)

    BalancedReplacer(autopair=False).apply(buffer, 0, 3, "if (x) {")

    assert buffer.text == "if (x) {\n"
    assert buffer.point == len(buffer.text)


def test_reindenter_indents_inserted_lines() -> None:
    buffer = TextBuffer(text="    foo", point=7)

    BalancedReplacer(reindenter=CopyIndentReindenter()).apply(buffer, 4, 7, "if (x) {")

    assert buffer.text == "    if (x) {\n    \n    }"
    assert buffer.point == 17
