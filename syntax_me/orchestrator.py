"""Detect the kind of a text and dispatch it to the matching formatter."""

from __future__ import annotations

from collections.abc import Callable

from .config import FormatConfig
from .detector import detect_kind
from .logging import get_logger
from .markup import format_markup
from .models import FormatResult, SourceKind
from .script import format_script
from .stylesheet import format_stylesheet

logger = get_logger("orchestrator")

Formatter = Callable[[str, FormatConfig | None], str]

FORMATTERS: dict[SourceKind, Formatter] = {
    SourceKind.MARKUP: format_markup,
    SourceKind.STYLESHEET: format_stylesheet,
    SourceKind.SCRIPT: format_script,
}


def format_text(
    raw: str, config: FormatConfig | None = None, kind: SourceKind | None = None
) -> FormatResult:
    """Detect what `raw` is and reformat it.

    Never raises: when the formatter fails, the input is returned unchanged
    together with the detected kind. `SourceKind.UNKNOWN` text is echoed as is.

    Args:
        raw: Text to format.
        config: Indentation settings passed to the formatter.
        kind: Kind to format as, skipping detection.

    Returns:
        FormatResult: Detected kind and formatted (or original) text.

    Examples:
        format_text("a{color:red}")
        # FormatResult(detected_kind=SourceKind.STYLESHEET, formatted_text="a {\\n  color: red;\\n}\\n")
    """
    detected = kind if kind is not None else detect_kind(raw)
    logger.debug("Formatting %d characters as %s", len(raw), detected.value)

    formatter = FORMATTERS.get(detected)
    if formatter is None:
        return FormatResult(detected_kind=detected, formatted_text=raw)

    try:
        formatted = formatter(raw, config)
    except Exception as error:
        logger.warning(
            "%s formatter failed, returning input unchanged: %s", detected.value, error
        )
        formatted = raw

    return FormatResult(detected_kind=detected, formatted_text=formatted)
