"""Stylesheet reflow: one selector or declaration per line."""

from __future__ import annotations

from .config import FormatConfig, normalize_config, validate_config
from .constants import PROPERTY_NAME_PATTERN
from .models import ScanState, SegmentKind
from .scanner import LexicalScanner


class _PendingDeclaration:
    """Text collected since the last structural character.

    Remembers where the first structural colon went so the declaration can be
    rendered as ``property: value`` without touching colons inside strings.
    """

    def __init__(self, parts: list[str]):
        self.parts = parts
        self.colon_at: int | None = None

    def append(self, text: str) -> None:
        self.parts.append(text)

    def append_colon(self) -> None:
        if self.colon_at is None:
            self.colon_at = len(self.parts)
        self.parts.append(":")

    def append_space(self) -> None:
        if self.parts and not self.parts[-1].endswith(" "):
            self.parts.append(" ")

    def is_blank(self) -> bool:
        return not "".join(self.parts).strip()

    def text(self) -> str:
        return "".join(self.parts).strip()

    def declaration(self) -> str:
        """Render as a declaration, normalizing ``property: value`` spacing."""
        if self.colon_at is not None:
            name = "".join(self.parts[: self.colon_at]).strip()
            value = "".join(self.parts[self.colon_at + 1 :]).strip()
            if PROPERTY_NAME_PATTERN.match(name):
                return f"{name}: {value}" if value else f"{name}:"
        return self.text()

    def clear(self) -> None:
        self.parts.clear()
        self.colon_at = None


def format_stylesheet(raw: str, config: FormatConfig | None = None) -> str:
    """Reflow stylesheet text with brace-based indentation.

    Each selector is followed by `` {``, every declaration gets its own line
    ending in ``;`` and each closing brace sits on its own line at the outer
    indent. Strings and comments are copied unmodified; raw newlines elsewhere
    collapse to a space.

    Args:
        raw: Stylesheet source.
        config: Indentation settings. Defaults to a new `FormatConfig`.

    Returns:
        str: Formatted stylesheet ending in a newline, or ``""`` for blank input.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        format_stylesheet("a{color:red;margin:0}")
        # "a {\\n  color: red;\\n  margin: 0;\\n}\\n"
    """
    config = normalize_config(config or FormatConfig())
    validate_config(config)
    indent_unit = config.indent_chars

    state = ScanState()
    scanner = LexicalScanner(line_comments=False, templates=False, state=state)
    pending = _PendingDeclaration(state.pending)
    lines: list[str] = []

    def emit(text: str) -> None:
        lines.append(f"{indent_unit * state.indent_level}{text}")

    def flush_declaration() -> None:
        if not pending.is_blank():
            declaration = pending.declaration()
            emit(declaration if declaration.endswith(";") else f"{declaration};")
        pending.clear()

    for segment in scanner.segments(raw):
        if segment.kind is SegmentKind.BLOCK_COMMENT and pending.is_blank():
            pending.clear()
            emit(segment.text)
            continue
        if segment.kind is not SegmentKind.CODE:
            pending.append(segment.text)
            continue

        ch = segment.text
        if ch == "{":
            selector = pending.text()
            emit(f"{selector} {{" if selector else "{")
            pending.clear()
            state.indent_level += 1
        elif ch == "}":
            flush_declaration()
            state.dedent()
            emit("}")
        elif ch == ";":
            flush_declaration()
        elif ch == ":":
            pending.append_colon()
        elif ch in "\r\n":
            pending.append_space()
        else:
            pending.append(ch)

    if not pending.is_blank():
        # Trailing text outside any block (e.g. a lone @import without ';').
        emit(pending.declaration() if state.indent_level else pending.text())

    return "\n".join(lines) + "\n" if lines else ""
