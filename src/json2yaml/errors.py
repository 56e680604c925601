"""Errors raised while converting JSON to YAML."""

from typing import Optional


class ConversionError(Exception):
    """Base class for conversion failures."""

    pass


class TruncatedInput(ConversionError):
    """Input ended while an object or array was still open."""

    def __init__(self, message: str = "unexpected end of input"):
        super().__init__(message)


class MalformedInput(ConversionError):
    """The JSON input is not well formed."""

    def __init__(self, message: str, offset: Optional[int] = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (offset {offset})"
        super().__init__(message)


class OutputFailure(ConversionError):
    """Writing to the output stream failed."""

    pass


__all__ = [
    "ConversionError",
    "MalformedInput",
    "OutputFailure",
    "TruncatedInput",
]
