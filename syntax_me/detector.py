"""Source kind detection using an ordered table of named rules."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from .models import SourceKind

TAG_OPENING_PATTERN = re.compile(r"<[A-Za-z!/]")
BLOCK_COMMENT_PATTERN = re.compile(r"/\*.*?(?:\*/|\Z)", re.DOTALL)
# "//" starts a comment only at line start or after whitespace, ";", "{" or "}",
# so "url(//host)" and "scheme://host" survive.
LINE_COMMENT_PATTERN = re.compile(r"(?<![^\s;{}])//[^\n]*")
RULE_BODY_PATTERN = re.compile(r"\{([^{}]*)\}")
DECLARATION_KEYWORD_PATTERN = re.compile(r"\b(?:function|const|let|var)\b")
SCRIPT_KEYWORD_PATTERN = re.compile(
    r"\b(?:const|let|var|function|class|import|export|return|if|for|while|switch|try)\b|=>"
)
SCRIPT_PUNCTUATION = frozenset("{}();")


@dataclass(frozen=True)
class DetectionRule:
    """A named detection predicate and the kind it assigns.

    Attributes:
        name: Identifier used in logs and tests.
        kind: Kind returned when the predicate matches.
        predicate: Callable receiving the raw text.
    """

    name: str
    kind: SourceKind
    predicate: Callable[[str], bool]


def strip_comments(text: str) -> str:
    """Remove block and line comments, leaving URLs alone."""
    text = BLOCK_COMMENT_PATTERN.sub(" ", text)
    return LINE_COMMENT_PATTERN.sub(" ", text)


def is_blank(text: str) -> bool:
    return not text.strip()


def has_tag_opening(text: str) -> bool:
    return TAG_OPENING_PATTERN.search(text) is not None


def has_declaration_block(text: str) -> bool:
    """True when a ``{...}`` body looks like ``property: value`` pairs.

    The text is rejected outright when it declares functions or variables or uses
    the arrow operator, since script object literals share the same shape.
    """
    remainder = strip_comments(text)
    if DECLARATION_KEYWORD_PATTERN.search(remainder) or "=>" in remainder:
        return False
    return any(":" in body.group(1) for body in RULE_BODY_PATTERN.finditer(remainder))


def has_script_tokens(text: str) -> bool:
    if SCRIPT_KEYWORD_PATTERN.search(text):
        return True
    return any(ch in SCRIPT_PUNCTUATION for ch in text)


# Markup is checked first so braces inside attributes or text are never read
# as a stylesheet.
DETECTION_RULES: tuple[DetectionRule, ...] = (
    DetectionRule("blank", SourceKind.UNKNOWN, is_blank),
    DetectionRule("tag-opening", SourceKind.MARKUP, has_tag_opening),
    DetectionRule("declaration-block", SourceKind.STYLESHEET, has_declaration_block),
    DetectionRule("script-tokens", SourceKind.SCRIPT, has_script_tokens),
)


def match_rule(raw: str) -> DetectionRule | None:
    """Return the first rule in `DETECTION_RULES` matching `raw`, if any."""
    for rule in DETECTION_RULES:
        if rule.predicate(raw):
            return rule
    return None


def detect_kind(raw: str) -> SourceKind:
    """Classify raw text as markup, stylesheet, script, or unknown.

    Args:
        raw: Text to classify.

    Returns:
        SourceKind: Kind assigned by the first matching rule, or
            `SourceKind.UNKNOWN` when none matches.

    Examples:
        detect_kind("<div>hi</div>")  # SourceKind.MARKUP
        detect_kind(".a { color: red; }")  # SourceKind.STYLESHEET
        detect_kind("const x = 1;")  # SourceKind.SCRIPT
        detect_kind("")  # SourceKind.UNKNOWN
    """
    rule = match_rule(raw)
    return rule.kind if rule is not None else SourceKind.UNKNOWN
