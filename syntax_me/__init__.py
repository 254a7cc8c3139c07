"""
syntax-me: best-effort formatter for markup, stylesheets and scripts.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    syntax-me index.html

Library Usage:
    from syntax_me import format_text

    result = format_text("a{color:red;margin:0}")
    result.detected_kind  # SourceKind.STYLESHEET
    print(result.formatted_text, end="")
"""

from .config import ConfigError, FormatConfig
from .detector import DETECTION_RULES, detect_kind, match_rule
from .exceptions import FormatError, InputTooLargeError, UnterminatedTemplateError
from .markup import format_markup
from .models import FormatResult, SourceKind
from .orchestrator import format_text
from .script import format_script
from .stylesheet import format_stylesheet

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "format_text",
    "detect_kind",
    "format_markup",
    "format_script",
    "format_stylesheet",
    # Data models
    "FormatResult",
    "SourceKind",
    "FormatConfig",
    # Utilities
    "DETECTION_RULES",
    "match_rule",
    # Exceptions
    "ConfigError",
    "FormatError",
    "InputTooLargeError",
    "UnterminatedTemplateError",
    # Version
    "__version__",
]
