from __future__ import annotations

from git_complete.buffer import TextBuffer
from git_complete.query import QueryExtractor, QueryMode, trim


def _at_end(text: str) -> TextBuffer:
    return TextBuffer(text=text, point=len(text))


def test_trim_strips_surrounding_whitespace() -> None:
    assert trim("  \tfoo bar  ") == "foo bar"


def test_trim_drops_text_before_match() -> None:
    assert trim("x = foo(bar)", match="foo") == "foo(bar)"


def test_trim_returns_empty_when_match_is_absent() -> None:
    assert trim("abc", match="zz") == ""


def test_trim_delimited_cuts_after_the_enclosing_group() -> None:
    assert trim("x = baz(bar(1, 2), 3)", match="bar(", delimited=True) == "bar(1, 2)"
    assert trim("call(foo(a(b)), c)", match="foo(", delimited=True) == "foo(a(b))"


def test_trim_delimited_keeps_tail_without_closer() -> None:
    assert trim("foo(bar", match="foo(", delimited=True) == "foo(bar"


def test_trim_delimited_keeps_tail_on_mismatched_closer() -> None:
    assert trim("f(a[b)c)", match="f(", delimited=True) == "f(a[b)c)"


def test_same_line_query_covers_line_up_to_cursor() -> None:
    query = QueryExtractor().extract(_at_end("foo.bar("))

    assert query.text == "foo.bar("
    assert query.anchor == 0
    assert query.mode is QueryMode.SAME_LINE


def test_same_line_query_is_anchored_after_indentation() -> None:
    buffer = _at_end("x\n    foo(")

    query = QueryExtractor().extract(buffer)

    assert query.text == "foo("
    assert query.anchor == 6


def test_same_line_query_ignores_text_after_cursor() -> None:
    buffer = TextBuffer(text="import os.path", point=9)

    query = QueryExtractor().extract(buffer)

    assert query.text == "import os"


def test_same_line_query_starts_at_previous_query() -> None:
    buffer = _at_end("  foo = bar.baz")

    query = QueryExtractor().extract(buffer, previous_query="bar")

    assert query.text == "bar.baz"
    assert query.anchor == 8


def test_same_line_query_is_empty_when_previous_query_is_missing() -> None:
    query = QueryExtractor().extract(_at_end("foo = 1"), previous_query="bar")

    assert query.is_empty


def test_cursor_at_line_start_queries_previous_line() -> None:
    buffer = _at_end("  use Foo;\n")

    query = QueryExtractor().extract(buffer)

    assert query.text == "use Foo;"
    assert query.anchor == 2
    assert query.mode is QueryMode.NEXT_LINE


def test_indentation_only_prefix_queries_previous_line() -> None:
    query = QueryExtractor().extract(_at_end("import os\n    "))

    assert query.text == "import os"
    assert query.mode is QueryMode.NEXT_LINE


def test_first_line_without_text_gives_empty_query() -> None:
    query = QueryExtractor().extract(TextBuffer(text="", point=0))

    assert query.is_empty
    assert query.mode is QueryMode.NEXT_LINE


def test_omni_query_starts_at_given_offset() -> None:
    query = QueryExtractor().extract(_at_end("x = foo.bar(baz"), omni_from=4)

    assert query.text == "foo.bar(baz"
    assert query.anchor == 4
    assert query.mode is QueryMode.OMNI


def test_shorten_advances_to_next_token() -> None:
    extractor = QueryExtractor()
    buffer = _at_end("foo.bar(baz")

    assert extractor.shorten(buffer, 0) == 4
    assert extractor.shorten(buffer, 4) == 8
    assert extractor.shorten(buffer, 8) is None


def test_shorten_does_not_stop_at_trailing_punctuation() -> None:
    assert QueryExtractor().shorten(_at_end("foo("), 0) is None


def test_shortening_terminates_within_token_count() -> None:
    extractor = QueryExtractor()
    buffer = _at_end("alpha = beta.gamma(delta, epsilon")
    token_count = 5

    anchor = 0
    steps = 0
    while True:
        next_anchor = extractor.shorten(buffer, anchor)
        if next_anchor is None:
            break
        assert next_anchor > anchor
        anchor = next_anchor
        steps += 1
        assert steps <= token_count

    assert buffer.text[anchor:] == "epsilon"
