"""Escape-aware lexical scanning shared by the stylesheet and script formatters."""

from __future__ import annotations

from collections.abc import Iterator

from .exceptions import UnterminatedTemplateError
from .models import ScanMode, ScanState, Segment, SegmentKind

_SEGMENT_FOR_MODE = {
    ScanMode.IN_STRING: SegmentKind.STRING,
    ScanMode.IN_LINE_COMMENT: SegmentKind.LINE_COMMENT,
    ScanMode.IN_BLOCK_COMMENT: SegmentKind.BLOCK_COMMENT,
    ScanMode.IN_TEMPLATE: SegmentKind.TEMPLATE,
}


class LexicalScanner:
    """Single-pass scanner that separates structural code from literal spans.

    Structural characters (outside strings, comments and template literals) are
    yielded one at a time as `SegmentKind.CODE` segments so a formatter can react
    to braces and semicolons. Every literal span is yielded whole and verbatim.
    A backslash inside a string or template always consumes the next character.

    Args:
        line_comments: Recognize ``//`` comments (script) or not (stylesheet).
        templates: Recognize backtick template literals with ``${}`` interpolation.
        state: Scan state to drive; a fresh one is created when omitted.

    Examples:
        [s.text for s in LexicalScanner().segments("a = 'x';")]
        # ["a", " ", "=", " ", "'x'", ";"]
    """

    def __init__(
        self,
        *,
        line_comments: bool = True,
        templates: bool = True,
        state: ScanState | None = None,
    ):
        self.line_comments = line_comments
        self.templates = templates
        self.state = state if state is not None else ScanState()

    def segments(self, source: str) -> Iterator[Segment]:
        """Split `source` into code characters and literal spans.

        Raises:
            UnterminatedTemplateError: If a template literal is still open at the
                end of `source`. Unterminated strings and comments are yielded
                verbatim instead.
        """
        state = self.state
        span_start = 0
        span_kind: SegmentKind | None = None
        i = 0

        while i < len(source):
            was_top_level = state.is_top_level
            j = self.step(source, i)

            if was_top_level:
                if state.is_top_level:
                    yield Segment(SegmentKind.CODE, source[i:j], i)
                else:
                    span_start = i
                    span_kind = _SEGMENT_FOR_MODE[state.mode]
            elif state.is_top_level:
                yield Segment(span_kind, source[span_start:j], span_start)
                span_kind = None
            i = j

        if span_kind is SegmentKind.TEMPLATE:
            raise UnterminatedTemplateError(span_start, state.interpolation_depth)
        if span_kind is not None:
            yield Segment(span_kind, source[span_start:], span_start)

    def step(self, source: str, i: int) -> int:
        """Apply one transition at offset `i` and return the next offset.

        Returns `i` unchanged only when a line comment ends; the newline is left
        for the next step to read as code.
        """
        state = self.state
        ch = source[i]
        nxt = source[i + 1 : i + 2]
        mode = state.mode

        if mode is ScanMode.IN_BLOCK_COMMENT:
            if ch == "*" and nxt == "/":
                state.mode = ScanMode.NORMAL
                return i + 2
            return i + 1

        if mode is ScanMode.IN_LINE_COMMENT:
            if ch == "\n":
                state.mode = ScanMode.NORMAL
                return i
            return i + 1

        if mode is ScanMode.IN_STRING:
            if ch == "\\":
                return min(i + 2, len(source))
            if ch == state.quote_char:
                state.mode = ScanMode.NORMAL
                state.quote_char = None
            return i + 1

        if mode is ScanMode.IN_TEMPLATE:
            if ch == "\\":
                return min(i + 2, len(source))
            if ch == "`":
                state.mode = ScanMode.NORMAL
                return i + 1
            if ch == "$" and nxt == "{":
                state.interpolation_braces.append(0)
                state.mode = ScanMode.NORMAL
                return i + 2
            return i + 1

        # NORMAL, either top level or inside a ${ } expression
        if ch == "/" and nxt == "*":
            state.mode = ScanMode.IN_BLOCK_COMMENT
            return i + 2
        if self.line_comments and ch == "/" and nxt == "/":
            state.mode = ScanMode.IN_LINE_COMMENT
            return i + 2
        if ch in "\"'":
            state.mode = ScanMode.IN_STRING
            state.quote_char = ch
            return i + 1
        if self.templates and ch == "`":
            state.mode = ScanMode.IN_TEMPLATE
            return i + 1
        if state.interpolation_braces:
            if ch == "{":
                state.interpolation_braces[-1] += 1
            elif ch == "}":
                if state.interpolation_braces[-1] == 0:
                    state.interpolation_braces.pop()
                    state.mode = ScanMode.IN_TEMPLATE
                else:
                    state.interpolation_braces[-1] -= 1
        return i + 1
