"""Streaming JSON to YAML conversion.

The converter consumes one token at a time from a ``Tokenizer`` and writes
YAML block structure as it goes. The only state kept is a stack of
contexts, one per open container, and the current indentation, so memory
use does not grow with the size of the input.

Example:
    >>> convert_string('{"foo": [1, {"bar": null}], "baz": "qux"}')
    'foo:\\n  - 1\\n  - bar: null\\nbaz: qux\\n'
"""

import io
from enum import Enum, auto
from typing import List, Optional, TextIO

from . import quoting
from .errors import ConversionError, OutputFailure, TruncatedInput
from .lexer import Tokenizer
from .tokens import Token, TokenKind

DEFAULT_BUFFER_SIZE = 8 * 1024

INDENT_WIDTH = 2

# Longest key, in characters, that may be written as "key: value"
MAX_IMPLICIT_KEY = 1024


class Context(Enum):
    """Position of the converter inside the JSON structure."""

    ROOT = auto()
    AWAITING_KEY = auto()
    AWAITING_VALUE = auto()
    ARRAY_ELEMENT = auto()


class Converter:
    """Write the YAML form of a JSON token stream to ``output``.

    Args:
        output: Writable text stream. It is flushed into but never closed.
        buffer_size: Characters collected before they are written out.

    A converter may be used for several token streams in turn, but not
    concurrently; create one per thread.
    """

    def __init__(self, output: TextIO, buffer_size: int = DEFAULT_BUFFER_SIZE):
        self._output = output
        self._buffer_size = buffer_size
        self._pending: List[str] = []
        self._pending_size = 0
        self._last = ""
        self._stack: List[Context] = [Context.ROOT]
        self._indent = 0

    def convert(self, tokens: Tokenizer) -> None:
        """Convert every JSON value in ``tokens``.

        Successive top-level values become YAML documents separated by
        ``---`` lines. Whatever was converted before an error is still
        written out.

        Raises:
            TruncatedInput: If the input ends inside an object or array
            MalformedInput: If the tokenizer rejects the input
            OutputFailure: If writing to the output fails
        """
        self._stack = [Context.ROOT]
        self._indent = 0
        try:
            self._convert(tokens)
        except OutputFailure:
            raise
        except ConversionError:
            self._finish()
            raise
        self._finish()

    def _convert(self, tokens: Tokenizer) -> None:
        stack = self._stack
        while True:
            token = tokens.next_token()
            if token is None:
                if len(stack) > 1:
                    raise TruncatedInput()
                return

            if token.opens_container:
                if len(stack) > 1:
                    self._indent += INDENT_WIDTH
                if token.kind is TokenKind.BEGIN_OBJECT:
                    stack.append(Context.AWAITING_KEY)
                else:
                    stack.append(Context.ARRAY_ELEMENT)
                if tokens.has_more():
                    if stack[-2] is Context.AWAITING_VALUE:
                        self._write("\n")
                        self._write_indent()
                    if stack[-1] is Context.ARRAY_ELEMENT:
                        self._write("- ")
                else:
                    if stack[-2] is Context.AWAITING_VALUE:
                        self._write(" ")
                    if token.kind is TokenKind.BEGIN_OBJECT:
                        self._write("{}\n")
                    else:
                        self._write("[]\n")
                continue

            if token.is_delimiter:
                stack.pop()
                if len(stack) > 1:
                    self._indent -= INDENT_WIDTH
            elif stack[-1] is Context.AWAITING_KEY:
                self._write_scalar(token)
                self._write(":")
                stack[-1] = Context.AWAITING_VALUE
                continue
            else:
                if stack[-1] is Context.AWAITING_VALUE:
                    self._write(" ")
                self._write_scalar(token)
                self._write("\n")

            if stack[-1] is Context.AWAITING_VALUE:
                stack[-1] = Context.AWAITING_KEY
            if tokens.has_more():
                if stack[-1] is Context.ROOT:
                    self._write("---\n")
                else:
                    self._write_indent()
                    if stack[-1] is Context.ARRAY_ELEMENT:
                        self._write("- ")

    def _write_scalar(self, token: Token) -> None:
        kind = token.kind
        if kind is TokenKind.STRING:
            self._write_string(token.value)
        elif kind is TokenKind.NUMBER:
            self._write(token.value)
        elif kind is TokenKind.TRUE:
            self._write("true")
        elif kind is TokenKind.FALSE:
            self._write("false")
        else:
            self._write("null")

    def _write_string(self, s: str) -> None:
        if "\n" in s:
            if not quoting.needs_quotes_multiline(s):
                self._write_block_string(s)
                return
            s = quoting.double_quote(s)
        elif quoting.needs_quotes(s):
            s = quoting.double_quote(s)

        # Implicit keys are limited in length; longer ones need "? key"
        if self._stack[-1] is Context.AWAITING_KEY and len(s) > MAX_IMPLICIT_KEY:
            self._write("? ")
            self._write(s)
            self._write("\n")
            self._write_indent()
        else:
            self._write(s)

    def _write_block_string(self, s: str) -> None:
        is_key = self._stack[-1] is Context.AWAITING_KEY
        if is_key:
            self._write("? ")
        self._write("|")
        if not s.endswith("\n"):
            self._write("-")
        elif s.endswith("\n\n"):
            self._write("+")
        self._indent += INDENT_WIDTH
        lines = s.split("\n")
        if s.endswith("\n"):
            lines.pop()
        for line in lines:
            self._write("\n")
            if line:
                self._write_indent()
                self._write(line)
        self._indent -= INDENT_WIDTH
        if is_key:
            self._write("\n")
            self._write_indent()

    def _write_indent(self) -> None:
        if self._indent:
            self._write(" " * self._indent)

    def _write(self, s: str) -> None:
        self._pending.append(s)
        self._pending_size += len(s)
        if self._pending_size >= self._buffer_size:
            self._flush()

    def _flush(self) -> None:
        if not self._pending:
            return
        data = "".join(self._pending)
        self._pending.clear()
        self._pending_size = 0
        self._last = data[-1]
        try:
            self._output.write(data)
        except OSError as e:
            raise OutputFailure(str(e)) from e

    def _finish(self) -> None:
        """Write out what is buffered, ending on a line break."""
        self._flush()
        if self._last and self._last != "\n":
            self._write("\n")
            self._flush()
        try:
            self._output.flush()
        except OSError as e:
            raise OutputFailure(str(e)) from e


def convert_string(
    text: str, buffer_size: int = DEFAULT_BUFFER_SIZE, chunk_size: Optional[int] = None
) -> str:
    """Convert JSON text held in memory and return the YAML text."""
    output = io.StringIO()
    if chunk_size is None:
        tokenizer = Tokenizer(io.StringIO(text))
    else:
        tokenizer = Tokenizer(io.StringIO(text), chunk_size=chunk_size)
    Converter(output, buffer_size=buffer_size).convert(tokenizer)
    return output.getvalue()


__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "Context",
    "Converter",
    "convert_string",
]
