"""Package-specific exception types."""

from __future__ import annotations


class FormatError(ValueError):
    """Base class for formatter failures.

    Raised when a formatter meets input it cannot resolve. `format_text`
    catches these and returns the input unchanged.
    """


class UnterminatedTemplateError(FormatError):
    """Raised when a template literal is still open at the end of the input.

    Args:
        position: Zero-based offset of the opening backtick.
        interpolation_depth: Number of ``${`` expressions left open.
    """

    def __init__(self, position: int, interpolation_depth: int = 0):
        self.position = position
        self.interpolation_depth = interpolation_depth
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        message = f"Template literal opened at offset {self.position} is never closed"
        if self.interpolation_depth:
            message += f" ({self.interpolation_depth} open interpolation(s))"
        return message


class InputTooLargeError(ValueError):
    """Raised when input exceeds the configured size limit.

    Args:
        source: Label of the input, such as a file path.
        size: Size of the input in bytes.
        limit: Maximum allowed size in bytes.
    """

    def __init__(self, source: str, size: int, limit: int):
        self.source = source
        self.size = size
        self.limit = limit
        super().__init__(
            f"{self.source} exceeds the maximum allowed size of {self.limit} bytes "
            f"({self.size} bytes)."
        )
