"""Script reflow and style polish."""

from __future__ import annotations

from dataclasses import dataclass

from .config import FormatConfig, normalize_config, validate_config
from .constants import (
    ARROW_PATTERN,
    ASSIGNMENT_PATTERN,
    BARE_KEYWORD_PATTERN,
    BRACE_CONTINUATION_PATTERN,
    CONTINUATION_PATTERN,
    CONTROL_HEADER_PATTERN,
    DO_HEAD_PATTERN,
    INCREMENT_TAIL_PATTERN,
    LABEL_HEAD_PATTERN,
    NO_TERMINATOR_ENDINGS,
    OBJECT_LITERAL_PREFIX_PATTERN,
    OPERATOR_TAIL_PATTERN,
)
from .models import ScanState, SegmentKind
from .scanner import LexicalScanner

Piece = tuple[SegmentKind, str]


@dataclass
class ScriptLine:
    """One logical line produced by the reflow phase.

    Attributes:
        depth: Indentation level of the line.
        pieces: Code and literal spans making up the line, in order.
        in_object: True when the line sits directly inside an object literal.
    """

    depth: int
    pieces: list[Piece]
    in_object: bool = False

    @property
    def code(self) -> str:
        """Line text without comments, stripped."""
        return "".join(text for kind, text in self.pieces if not kind.is_comment).strip()


class _LineBuffer:
    """Pending pieces of the current line; texts live in `ScanState.pending`."""

    def __init__(self, texts: list[str]):
        self.texts = texts
        self.kinds: list[SegmentKind] = []

    def add(self, kind: SegmentKind, text: str) -> None:
        if kind is SegmentKind.CODE and self.kinds and self.kinds[-1] is SegmentKind.CODE:
            self.texts[-1] += text
            return
        self.kinds.append(kind)
        self.texts.append(text)

    def rstrip(self) -> None:
        while self.kinds and self.kinds[-1] is SegmentKind.CODE:
            stripped = self.texts[-1].rstrip()
            if stripped:
                self.texts[-1] = stripped
                return
            self.kinds.pop()
            self.texts.pop()

    def add_soft_space(self) -> None:
        """Add a space standing in for a newline, unless one is redundant."""
        if self.is_blank():
            return
        if self.kinds[-1] is SegmentKind.CODE and self.texts[-1][-1] in " \t([":
            return
        self.add(SegmentKind.CODE, " ")

    def head(self) -> str:
        return "".join(
            text for kind, text in zip(self.kinds, self.texts) if not kind.is_comment
        ).strip()

    def is_blank(self) -> bool:
        return not "".join(self.texts).strip()

    def take(self) -> list[Piece]:
        pieces = list(zip(self.kinds, self.texts))
        self.kinds.clear()
        self.texts.clear()
        return pieces


def _comment_ends_line(rest: str) -> bool:
    """True when `rest` opens a comment that is the last thing on its line."""
    if rest.startswith("//"):
        return True
    if not rest.startswith("/*"):
        return False
    close = rest.find("*/", 2)
    if close == -1:
        return True
    return not rest[close + 2 :].split("\n", 1)[0].strip()


def reflow_script(raw: str) -> list[ScriptLine]:
    """Split script text into logical lines with brace-driven depth.

    `;` ends a line outside parentheses and brackets; ``{`` ends a line and
    opens a level; ``}`` closes a level on a line of its own unless a closer such
    as ``)``, ``;`` or ``else`` follows it. Newlines inside parentheses or
    brackets collapse to a space, elsewhere they end the line. Blank lines are
    dropped.

    Raises:
        UnterminatedTemplateError: If a template literal never closes.
    """
    state = ScanState()
    scanner = LexicalScanner(state=state)
    buffer = _LineBuffer(state.pending)
    lines: list[ScriptLine] = []

    # Open ( and [ at the current brace level; saved per brace.
    group_depth = 0
    group_stack: list[int] = []
    object_stack: list[bool] = []
    do_stack: list[bool] = []

    def flush() -> None:
        if buffer.is_blank():
            buffer.take()
            return
        in_object = bool(object_stack) and object_stack[-1]
        lines.append(ScriptLine(state.indent_level, buffer.take(), in_object))

    for segment in scanner.segments(raw):
        kind = segment.kind
        if kind is SegmentKind.LINE_COMMENT:
            buffer.rstrip()
            if not buffer.is_blank():
                buffer.add(SegmentKind.CODE, " ")
            buffer.add(kind, segment.text)
            flush()
            continue
        if kind is not SegmentKind.CODE:
            buffer.add(kind, segment.text)
            continue

        ch = segment.text
        if ch == "{":
            head = buffer.head()
            buffer.rstrip()
            buffer.add(SegmentKind.CODE, "{" if not head or head[-1] in "([" else " {")
            flush()
            in_object = bool(object_stack) and object_stack[-1]
            object_stack.append(
                bool(OBJECT_LITERAL_PREFIX_PATTERN.search(head))
                and (in_object or not LABEL_HEAD_PATTERN.match(head))
            )
            do_stack.append(bool(DO_HEAD_PATTERN.search(head)))
            group_stack.append(group_depth)
            group_depth = 0
            state.indent_level += 1
        elif ch == "}":
            flush()
            if object_stack:
                object_stack.pop()
            opened_by_do = do_stack.pop() if do_stack else False
            group_depth = group_stack.pop() if group_stack else 0
            state.dedent()
            rest = raw[segment.end :].lstrip(" \t")
            continuation = BRACE_CONTINUATION_PATTERN.match(rest)
            # Only the tail of a do-while stays on the closing brace's line.
            if continuation and (continuation.group() != "while" or opened_by_do):
                buffer.add(SegmentKind.CODE, "} " if rest[:1].isalpha() else "}")
            else:
                buffer.add(SegmentKind.CODE, "}")
                flush()
        elif ch == ";":
            buffer.add(SegmentKind.CODE, ";")
            if group_depth == 0 and not _comment_ends_line(raw[segment.end :].lstrip(" \t")):
                flush()
        elif ch in "([":
            group_depth += 1
            buffer.add(SegmentKind.CODE, ch)
        elif ch in ")]":
            group_depth = max(0, group_depth - 1)
            buffer.rstrip()
            buffer.add(SegmentKind.CODE, ch)
        elif ch in "\r\n":
            if group_depth:
                buffer.add_soft_space()
            else:
                flush()
        elif ch.isspace():
            buffer.add_soft_space()
        else:
            buffer.add(SegmentKind.CODE, ch)

    flush()
    return lines


def _normalize_operators(code: str) -> str:
    code = ARROW_PATTERN.sub(" => ", code)
    return ASSIGNMENT_PATTERN.sub(" = ", code)


def needs_terminator(line: ScriptLine, next_line: ScriptLine | None) -> bool:
    """Decide whether a polished line should get a trailing ``;``."""
    code = line.code
    if not code or line.in_object:
        return False
    if code.endswith(NO_TERMINATOR_ENDINGS):
        return False
    if OPERATOR_TAIL_PATTERN.search(code) and not INCREMENT_TAIL_PATTERN.search(code):
        return False
    if CONTROL_HEADER_PATTERN.match(code) or BARE_KEYWORD_PATTERN.match(code):
        return False
    if next_line is not None:
        next_code = next_line.code
        if code.endswith(")") and next_code.startswith("{"):
            return False
        if CONTINUATION_PATTERN.match(next_code):
            return False
    return True


def polish_line(line: ScriptLine, next_line: ScriptLine | None) -> str:
    """Normalize operator spacing and statement termination of one line."""
    pieces = [
        (kind, _normalize_operators(text) if kind is SegmentKind.CODE else text)
        for kind, text in line.pieces
    ]
    polished = ScriptLine(line.depth, pieces, line.in_object)

    if not needs_terminator(polished, next_line):
        return "".join(text for _, text in pieces).strip()

    last_code = max(
        index
        for index, (kind, text) in enumerate(pieces)
        if not kind.is_comment and text.strip()
    )
    head = "".join(text for _, text in pieces[: last_code + 1]).strip()
    tail = "".join(text for _, text in pieces[last_code + 1 :]).strip()
    return f"{head}; {tail}" if tail else f"{head};"


def format_script(raw: str, config: FormatConfig | None = None) -> str:
    """Reflow script text into one statement per line and polish its style.

    The polish pass puts one space around ``=>`` and plain ``=`` (comparison and
    compound operators are left alone) and appends ``;`` to lines that end a
    statement. Strings, template literals and comments are never touched.

    Args:
        raw: Script source.
        config: Indentation settings. Defaults to a new `FormatConfig`.

    Returns:
        str: Formatted script ending in a newline, or ``""`` for blank input.

    Raises:
        ConfigError: If the configuration fails validation.
        UnterminatedTemplateError: If a template literal never closes.

    Examples:
        format_script("if(x){y=1}")  # "if(x) {\\n  y = 1;\\n}\\n"
    """
    config = normalize_config(config or FormatConfig())
    validate_config(config)

    lines = reflow_script(raw)

    # Next line carrying code, skipping comment-only lines.
    next_lines: list[ScriptLine | None] = [None] * len(lines)
    upcoming = None
    for index in range(len(lines) - 1, -1, -1):
        next_lines[index] = upcoming
        if lines[index].code:
            upcoming = lines[index]

    rendered = [
        f"{config.indent_chars * line.depth}{polish_line(line, next_line)}"
        for line, next_line in zip(lines, next_lines)
    ]

    return "\n".join(rendered) + "\n" if rendered else ""
