"""Markup parsing into an element tree and indented serialization."""

from __future__ import annotations

import re
import textwrap
from html.parser import HTMLParser

from .config import FormatConfig, normalize_config, validate_config
from .constants import (
    INLINE_ELEMENTS,
    NEVER_INLINE_ELEMENTS,
    PRESERVE_ELEMENTS,
    SCRIPT_TYPES,
    VOID_ELEMENTS,
)
from .exceptions import FormatError
from .logging import get_logger
from .models import CommentNode, ElementNode, RawNode, TextNode
from .script import format_script
from .stylesheet import format_stylesheet

logger = get_logger("markup")

WHITESPACE_PATTERN = re.compile(r"\s+")

Node = ElementNode | TextNode | CommentNode | RawNode


class TreeBuilder(HTMLParser):
    """Forgiving parser that builds an `ElementNode` tree.

    End tags close the nearest open element with the same name, implicitly
    closing anything opened inside it. End tags with no open counterpart are
    kept as `RawNode`s. Character and entity references are kept as written.

    Examples:
        root = TreeBuilder().build("<p>Hello <b>world</b></p>")
        root.children[0].tag_name  # "p"
    """

    def __init__(self):
        super().__init__(convert_charrefs=False)
        self.root = ElementNode("#document", closed=True)
        self.stack: list[ElementNode] = [self.root]

    def build(self, source: str) -> ElementNode:
        self.feed(source)
        self.close()
        # Text the parser could not tokenize, e.g. an unclosed "<" at the end.
        if self.rawdata:
            self._append_text(self.rawdata)
            self.rawdata = ""
        return self.root

    @property
    def current(self) -> ElementNode:
        return self.stack[-1]

    def _append_text(self, text: str) -> None:
        children = self.current.children
        if children and isinstance(children[-1], TextNode):
            children[-1].text += text
        else:
            children.append(TextNode(text))

    def _open(self, tag: str, attrs: list[tuple[str, str | None]], self_closing: bool) -> None:
        node = ElementNode(
            tag_name=tag,
            attributes=dict(attrs),
            is_void=self_closing or tag in VOID_ELEMENTS,
            start_tag=(self.get_starttag_text() or f"<{tag}>").strip(),
        )
        self.current.children.append(node)
        if not node.is_void:
            self.stack.append(node)

    def handle_starttag(self, tag, attrs):
        self._open(tag, attrs, self_closing=False)

    def handle_startendtag(self, tag, attrs):
        self._open(tag, attrs, self_closing=True)

    def handle_endtag(self, tag):
        for depth in range(len(self.stack) - 1, 0, -1):
            if self.stack[depth].tag_name == tag:
                self.stack[depth].closed = True
                del self.stack[depth:]
                return
        if tag not in VOID_ELEMENTS:
            self.current.children.append(RawNode(f"</{tag}>"))

    def handle_data(self, data):
        self._append_text(data)

    def handle_entityref(self, name):
        self._append_text(f"&{name};")

    def handle_charref(self, name):
        self._append_text(f"&#{name};")

    def handle_comment(self, data):
        self.current.children.append(CommentNode(data))

    def handle_decl(self, decl):
        self.current.children.append(RawNode(f"<!{decl}>"))

    def handle_pi(self, data):
        self.current.children.append(RawNode(f"<?{data}>"))

    def unknown_decl(self, data):
        self.current.children.append(RawNode(f"<![{data}]>"))


def parse_markup(raw: str) -> ElementNode:
    """Parse markup into a synthetic ``#document`` root element."""
    return TreeBuilder().build(raw)


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text)


def _preserves_whitespace(node: ElementNode) -> bool:
    return node.tag_name in PRESERVE_ELEMENTS or node.attributes.get("xml:space") == "preserve"


def _is_inline_content(node: Node) -> bool:
    if isinstance(node, TextNode):
        return True
    if not isinstance(node, ElementNode) or node.tag_name not in INLINE_ELEMENTS:
        return False
    return all(_is_inline_content(child) for child in node.children)


def _has_text(node: Node) -> bool:
    if isinstance(node, TextNode):
        return bool(node.text.strip())
    if isinstance(node, ElementNode):
        return any(_has_text(child) for child in node.children)
    return False


def can_inline(node: ElementNode) -> bool:
    """True when `node` can render on a single line.

    Requires inline-only children with some non-blank text. Never true for
    ``<head>``, ``<script>``/``<style>`` or whitespace-preserving elements.
    """
    if node.is_void or node.tag_name in NEVER_INLINE_ELEMENTS or _preserves_whitespace(node):
        return False
    if not node.children or not all(_is_inline_content(child) for child in node.children):
        return False
    return any(_has_text(child) for child in node.children)


def render_inline(node: Node) -> str:
    if isinstance(node, TextNode):
        return collapse_whitespace(node.text)
    if node.is_void:
        return node.start_tag
    inner = "".join(render_inline(child) for child in node.children)
    return f"{node.start_tag}{inner}{node.end_tag}"


def render_verbatim(node: Node) -> str:
    """Serialize a subtree as written (apart from end-tag case)."""
    if isinstance(node, TextNode):
        return node.text
    if isinstance(node, CommentNode):
        return node.render()
    if isinstance(node, RawNode):
        return node.text
    if node.is_void:
        return node.start_tag
    inner = "".join(render_verbatim(child) for child in node.children)
    return f"{node.start_tag}{inner}{node.end_tag}"


def _embedded_source(node: ElementNode) -> str:
    return "".join(child.text for child in node.children if isinstance(child, TextNode))


def _format_embedded(node: ElementNode, config: FormatConfig) -> list[str]:
    """Format the body of a ``<style>`` or ``<script>`` element into lines."""
    source = _embedded_source(node)
    if not source.strip():
        return []

    script_type = (node.attributes.get("type") or "").strip().lower()
    if node.tag_name == "script" and script_type not in SCRIPT_TYPES:
        return textwrap.dedent(source).strip("\n").splitlines()

    formatter = format_stylesheet if node.tag_name == "style" else format_script
    try:
        formatted = formatter(source, config)
    except FormatError as error:
        logger.warning("Leaving <%s> body unformatted: %s", node.tag_name, error)
        return textwrap.dedent(source).strip("\n").splitlines()
    return formatted.splitlines()


class MarkupSerializer:
    """Render an element tree as indented lines.

    Args:
        config: Indentation settings.
    """

    def __init__(self, config: FormatConfig):
        self.config = config
        self.lines: list[str] = []

    def indent(self, level: int) -> str:
        return self.config.indent_chars * level

    def emit(self, level: int, text: str) -> None:
        self.lines.append(f"{self.indent(level)}{text}")

    def render(self, root: ElementNode) -> list[str]:
        for child in root.children:
            self.render_node(child, 0)
        return self.lines

    def render_node(self, node: Node, level: int) -> None:
        if isinstance(node, TextNode):
            text = collapse_whitespace(node.text).strip()
            if text:
                self.emit(level, text)
        elif isinstance(node, CommentNode):
            self.emit(level, node.render())
        elif isinstance(node, RawNode):
            self.emit(level, node.text.strip())
        else:
            self.render_element(node, level)

    def render_element(self, node: ElementNode, level: int) -> None:
        if node.is_void:
            self.emit(level, node.start_tag)
            return

        if node.tag_name in ("style", "script"):
            self.emit(level, node.start_tag)
            for line in _format_embedded(node, self.config):
                self.lines.append(f"{self.indent(level + 1)}{line}" if line.strip() else "")
            if node.closed:
                self.emit(level, node.end_tag)
            return

        if _preserves_whitespace(node):
            self.emit(level, render_verbatim(node))
            return

        if can_inline(node):
            inner = "".join(render_inline(child) for child in node.children).strip()
            self.emit(level, f"{node.start_tag}{inner}{node.end_tag}")
            return

        self.emit(level, node.start_tag)
        for child in node.children:
            self.render_node(child, level + 1)
        if node.closed:
            self.emit(level, node.end_tag)


def collapse_blank_lines(lines: list[str]) -> list[str]:
    """Reduce every run of two or more blank lines to a single blank line."""
    collapsed: list[str] = []
    blank_run = 0
    for line in lines:
        blank_run = blank_run + 1 if not line.strip() else 0
        if blank_run < 2:
            collapsed.append(line)
    return collapsed


def format_markup(raw: str, config: FormatConfig | None = None) -> str:
    """Serialize markup as an indented element tree.

    Void elements render as a single line and never get a closing tag.
    ``<style>`` and ``<script>`` bodies are reformatted by the stylesheet and
    script formatters one level deeper than their tags. Elements holding only
    inline content render on one line, except ``<head>`` and elements that
    preserve whitespace such as ``<pre>``, which render as written.

    Args:
        raw: Markup source.
        config: Indentation settings. Defaults to a new `FormatConfig`.

    Returns:
        str: Formatted markup ending in a newline, or ``""`` for blank input.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        format_markup("<ul><li>One</li><li>Two</li></ul>")
        # "<ul>\\n  <li>One</li>\\n  <li>Two</li>\\n</ul>\\n"
    """
    config = normalize_config(config or FormatConfig())
    validate_config(config)

    root = parse_markup(raw)
    lines = collapse_blank_lines(MarkupSerializer(config).render(root))
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines) + "\n" if lines else ""
