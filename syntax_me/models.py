"""Data models for syntax-me."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class SourceKind(Enum):
    """Kinds of source text the formatter recognizes.

    Attributes:
        MARKUP: HTML-like markup.
        STYLESHEET: CSS rules.
        SCRIPT: JavaScript-like code.
        UNKNOWN: Text the heuristics could not classify.
    """

    MARKUP = "markup"
    STYLESHEET = "stylesheet"
    SCRIPT = "script"
    UNKNOWN = "unknown"

    @property
    def extension(self) -> str:
        """File extension used when exporting text of this kind."""
        return _EXTENSIONS[self]


_EXTENSIONS = {
    SourceKind.MARKUP: "html",
    SourceKind.STYLESHEET: "css",
    SourceKind.SCRIPT: "js",
    SourceKind.UNKNOWN: "txt",
}


class ScanMode(Enum):
    """Lexical modes used while scanning stylesheet and script text.

    Attributes:
        NORMAL: Structural code, where braces and semicolons matter.
        IN_STRING: Inside a single- or double-quoted string.
        IN_LINE_COMMENT: Inside a ``//`` comment.
        IN_BLOCK_COMMENT: Inside a ``/* */`` comment.
        IN_TEMPLATE: Inside the text part of a backtick template literal.
    """

    NORMAL = auto()
    IN_STRING = auto()
    IN_LINE_COMMENT = auto()
    IN_BLOCK_COMMENT = auto()
    IN_TEMPLATE = auto()


@dataclass
class ScanState:
    """Per-call scanning state.

    The lexical fields are driven by `LexicalScanner`; `indent_level` and
    `pending` belong to the formatter consuming the segments.

    Attributes:
        mode: Current lexical mode. Only one literal mode is active at a time.
        quote_char: Quote that opened the active string, if any.
        interpolation_braces: One open-brace counter per active ``${`` expression.
        indent_level: Current brace nesting, never negative.
        pending: Text collected for the current logical line.
    """

    mode: ScanMode = ScanMode.NORMAL
    quote_char: str | None = None
    interpolation_braces: list[int] = field(default_factory=list)
    indent_level: int = 0
    pending: list[str] = field(default_factory=list)

    @property
    def interpolation_depth(self) -> int:
        return len(self.interpolation_braces)

    @property
    def is_top_level(self) -> bool:
        """True when the scanner sits in plain code outside every literal."""
        return self.mode is ScanMode.NORMAL and not self.interpolation_braces

    def dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)


class SegmentKind(Enum):
    """Kinds of text spans produced by the scanner."""

    CODE = auto()
    STRING = auto()
    TEMPLATE = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()

    @property
    def is_comment(self) -> bool:
        return self in (SegmentKind.LINE_COMMENT, SegmentKind.BLOCK_COMMENT)


@dataclass(frozen=True)
class Segment:
    """A span of scanned source.

    Attributes:
        kind: Lexical kind of the span.
        text: Source text, verbatim.
        start: Zero-based offset of the span in the scanned source.
    """

    kind: SegmentKind
    text: str
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)


@dataclass(frozen=True)
class FormatResult:
    """Outcome of formatting a piece of text.

    Attributes:
        detected_kind: Kind the text was formatted as.
        formatted_text: Reformatted text, or the input unchanged on failure.
    """

    detected_kind: SourceKind
    formatted_text: str


@dataclass
class TextNode:
    """Character data inside markup, entities kept as written."""

    text: str


@dataclass
class CommentNode:
    """A ``<!-- -->`` comment; `data` excludes the delimiters."""

    data: str

    def render(self) -> str:
        return f"<!--{self.data}-->"


@dataclass
class RawNode:
    """Markup passed through verbatim: doctypes, processing instructions, stray tags."""

    text: str


@dataclass
class ElementNode:
    """A markup element.

    Attributes:
        tag_name: Lower-cased tag name.
        attributes: Attribute values in source order; valueless attributes map to None.
        children: Child nodes in source order.
        is_void: True for void elements and explicitly self-closed tags.
        start_tag: Opening tag exactly as written.
        closed: True when the source contained the matching end tag.
    """

    tag_name: str
    attributes: dict[str, str | None] = field(default_factory=dict)
    children: list[ElementNode | TextNode | CommentNode | RawNode] = field(default_factory=list)
    is_void: bool = False
    start_tag: str = ""
    closed: bool = False

    @property
    def end_tag(self) -> str:
        return f"</{self.tag_name}>" if self.closed else ""
