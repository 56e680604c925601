"""json2yaml: stream JSON values into YAML documents."""

from typing import IO, Optional, TextIO

from .context import Settings, resolve_settings
from .converter import Converter, convert_string
from .errors import (
    ConversionError,
    MalformedInput,
    OutputFailure,
    TruncatedInput,
)
from .lexer import Tokenizer

__version__ = "0.1.4"


def convert(
    input_stream: IO, output_stream: TextIO, *, settings: Optional[Settings] = None
) -> None:
    """Read JSON from ``input_stream`` and write YAML to ``output_stream``.

    The input may hold any number of concatenated JSON values; each one
    becomes a YAML document, separated by ``---`` lines. Empty input
    produces no output. Neither stream is closed.

    Args:
        input_stream: Text or binary stream of JSON
        output_stream: Writable text stream
        settings: Read/write buffering (default: resolved from environment)

    Raises:
        ConversionError: TruncatedInput, MalformedInput or OutputFailure
    """
    settings = settings or resolve_settings()
    tokenizer = Tokenizer(input_stream, chunk_size=settings.chunk_size)
    Converter(output_stream, buffer_size=settings.buffer_size).convert(tokenizer)


__all__ = [
    "ConversionError",
    "Converter",
    "MalformedInput",
    "OutputFailure",
    "Settings",
    "Tokenizer",
    "TruncatedInput",
    "__version__",
    "convert",
    "convert_string",
]
