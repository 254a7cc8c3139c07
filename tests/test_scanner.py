from __future__ import annotations

import pytest

from syntax_me.exceptions import FormatError, UnterminatedTemplateError
from syntax_me.models import ScanMode, ScanState, SegmentKind
from syntax_me.scanner import LexicalScanner


def _spans(source: str, **options) -> list[tuple[SegmentKind, str]]:
    return [(segment.kind, segment.text) for segment in LexicalScanner(**options).segments(source)]


def _literals(source: str, **options) -> list[tuple[SegmentKind, str]]:
    return [span for span in _spans(source, **options) if span[0] is not SegmentKind.CODE]


def test_code_characters_are_yielded_one_at_a_time():
    assert _spans("a{}") == [
        (SegmentKind.CODE, "a"),
        (SegmentKind.CODE, "{"),
        (SegmentKind.CODE, "}"),
    ]


def test_strings_are_yielded_whole():
    assert _literals("a = 'x;{y}' + \"z\";") == [
        (SegmentKind.STRING, "'x;{y}'"),
        (SegmentKind.STRING, '"z"'),
    ]


def test_escaped_quote_does_not_close_string():
    assert _literals("s = 'x\\'y';") == [(SegmentKind.STRING, "'x\\'y'")]


def test_escaped_backslash_before_quote_closes_string():
    assert _literals("s = 'x\\\\'; t") == [(SegmentKind.STRING, "'x\\\\'")]


def test_other_quote_inside_string_is_plain_text():
    assert _literals("s = \"it's\";") == [(SegmentKind.STRING, "\"it's\"")]


def test_block_comment_hides_braces():
    assert _spans("a/* { */b") == [
        (SegmentKind.CODE, "a"),
        (SegmentKind.BLOCK_COMMENT, "/* { */"),
        (SegmentKind.CODE, "b"),
    ]


def test_line_comment_stops_before_newline():
    assert _spans("x // c\ny") == [
        (SegmentKind.CODE, "x"),
        (SegmentKind.CODE, " "),
        (SegmentKind.LINE_COMMENT, "// c"),
        (SegmentKind.CODE, "\n"),
        (SegmentKind.CODE, "y"),
    ]


def test_line_comments_can_be_disabled():
    assert _literals("a://b", line_comments=False) == []


def test_template_with_nested_interpolations_is_one_span():
    source = "`a${ {b: `c${d}`} }e`;"
    assert _spans(source) == [
        (SegmentKind.TEMPLATE, "`a${ {b: `c${d}`} }e`"),
        (SegmentKind.CODE, ";"),
    ]


def test_braces_in_template_text_are_not_counted():
    assert _spans("`{`}") == [(SegmentKind.TEMPLATE, "`{`"), (SegmentKind.CODE, "}")]


def test_backticks_are_plain_code_when_templates_disabled():
    assert _literals("`a`", templates=False) == []


def test_unterminated_template_raises():
    with pytest.raises(UnterminatedTemplateError) as excinfo:
        list(LexicalScanner().segments("x = `a ${ `b ${ c }` ;"))

    assert excinfo.value.position == 4
    assert excinfo.value.interpolation_depth == 1
    assert isinstance(excinfo.value, FormatError)
    assert "offset 4" in str(excinfo.value)


def test_unterminated_string_is_yielded_verbatim():
    assert _literals("a 'bc") == [(SegmentKind.STRING, "'bc")]


def test_unterminated_block_comment_is_yielded_verbatim():
    assert _literals("a /* b") == [(SegmentKind.BLOCK_COMMENT, "/* b")]


def test_trailing_backslash_in_string_stays_in_bounds():
    assert _literals("'\\") == [(SegmentKind.STRING, "'\\")]


def test_segments_reconstruct_the_source():
    source = "let s = `x${ {a: 'b'} }`; /* c */ f('d') // e\n}"
    assert "".join(text for _, text in _spans(source)) == source


def test_segment_offsets_point_into_source():
    source = "a 'b' c"
    for segment in LexicalScanner().segments(source):
        assert source[segment.start : segment.end] == segment.text


def test_step_enters_and_leaves_interpolation():
    state = ScanState()
    scanner = LexicalScanner(state=state)
    source = "`${x}`"

    assert scanner.step(source, 0) == 1
    assert state.mode is ScanMode.IN_TEMPLATE
    assert scanner.step(source, 1) == 3
    assert state.mode is ScanMode.NORMAL
    assert state.interpolation_braces == [0]
    assert scanner.step(source, 3) == 4
    assert scanner.step(source, 4) == 5
    assert state.mode is ScanMode.IN_TEMPLATE
    assert state.interpolation_braces == []
    assert scanner.step(source, 5) == 6
    assert state.is_top_level


def test_step_does_not_consume_newline_ending_line_comment():
    state = ScanState(mode=ScanMode.IN_LINE_COMMENT)
    scanner = LexicalScanner(state=state)

    assert scanner.step("a\nb", 1) == 1
    assert state.mode is ScanMode.NORMAL


def test_scanner_uses_given_state():
    state = ScanState()
    scanner = LexicalScanner(state=state)
    assert scanner.state is state
