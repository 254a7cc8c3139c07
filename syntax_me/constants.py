"""Constants used across the syntax-me package."""

from __future__ import annotations

import re

from .config import FormatConfig

DEFAULT_CONFIG = FormatConfig()
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size

# Markup
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)
INLINE_ELEMENTS = frozenset(
    {
        "a",
        "abbr",
        "b",
        "bdi",
        "bdo",
        "br",
        "button",
        "cite",
        "code",
        "data",
        "dfn",
        "em",
        "i",
        "img",
        "input",
        "kbd",
        "label",
        "mark",
        "q",
        "s",
        "samp",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "time",
        "u",
        "var",
        "wbr",
    }
)
PRESERVE_ELEMENTS = frozenset({"pre", "textarea"})
NEVER_INLINE_ELEMENTS = frozenset({"head", "html", "script", "style"})
SCRIPT_TYPES = frozenset(
    {
        "",
        "text/javascript",
        "application/javascript",
        "application/ecmascript",
        "text/ecmascript",
        "module",
    }
)

# Script
CONTROL_HEADER_PATTERN = re.compile(
    r"^(?:if|for|while|switch|with|catch|try|finally|do|else|class|function)\b"
)
BARE_KEYWORD_PATTERN = re.compile(r"^(?:return|throw|yield|continue|break)$")
ARROW_PATTERN = re.compile(r"\s*=>\s*")
ASSIGNMENT_PATTERN = re.compile(r"\s*(?<![=!<>+\-*/%&|^~?:])=(?![>=])\s*")
OPERATOR_TAIL_PATTERN = re.compile(r"(?:[-+*/%=&|^!~?<>(\[.]|&&|\|\|)$")
INCREMENT_TAIL_PATTERN = re.compile(r"(?:\+\+|--)$")
CONTINUATION_PATTERN = re.compile(r"^(?:\?\.|\.(?!\.\.)|&&|\|\||\?\?|\?|:|=(?!=))")
OBJECT_LITERAL_PREFIX_PATTERN = re.compile(r"(?:[=(,:\[?]|\breturn)$")
# Heads of blocks that follow a colon without opening an object literal.
LABEL_HEAD_PATTERN = re.compile(r"^(?:case\b.*|default|[A-Za-z_$][\w$]*)\s*:$")
DO_HEAD_PATTERN = re.compile(r"(?:^|[;}\s])do$")
BRACE_CONTINUATION_PATTERN = re.compile(r"^(?:[);,.\]]|(?:else|catch|finally|while)\b)")
NO_TERMINATOR_ENDINGS = (";", "{", "}", ":", ",")

# Stylesheet
PROPERTY_NAME_PATTERN = re.compile(r"^[-*_]?[-\w]+$")
