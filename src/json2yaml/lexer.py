"""Incremental JSON tokenizer.

The tokenizer pulls text from a stream one chunk at a time and hands out
tokens one by one, validating the JSON grammar as it goes. Memory use is
bounded by the chunk size plus twice the longest single string or number in
the input, so arbitrarily large documents can be converted.

Concatenated top-level values are accepted, with or without whitespace
between objects and arrays:

    {"a": 1} {"b": 2}
    [1][2]
    1 2 "three"

Usage:
    tokenizer = Tokenizer(open("data.json", "rb"))
    while (token := tokenizer.next_token()) is not None:
        ...
"""

import codecs
import json
import re
from enum import Enum, auto
from json.decoder import scanstring
from typing import IO, Iterator, List, NoReturn, Optional

from .errors import MalformedInput
from .tokens import (
    BEGIN_ARRAY,
    BEGIN_OBJECT,
    END_ARRAY,
    END_OBJECT,
    FALSE,
    NULL,
    TRUE,
    Token,
    TokenKind,
)

DEFAULT_CHUNK_SIZE = 64 * 1024

_SKIP_WHITESPACE = re.compile(r"[ \t\r\n]*")
_NUMBER_RUN = re.compile(r"[-+.0-9eE]*")
_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][-+]?[0-9]+)?")
_WHITESPACE = " \t\r\n"
_LITERALS = {"t": ("true", TRUE), "f": ("false", FALSE), "n": ("null", NULL)}


class _State(Enum):
    TOP = auto()
    ARRAY_START = auto()
    ARRAY_VALUE = auto()
    ARRAY_COMMA = auto()
    OBJECT_START = auto()
    OBJECT_KEY = auto()
    OBJECT_COLON = auto()
    OBJECT_VALUE = auto()
    OBJECT_COMMA = auto()


# State to move to once a value has been read in the given state
_AFTER_VALUE = {
    _State.TOP: _State.TOP,
    _State.ARRAY_START: _State.ARRAY_COMMA,
    _State.ARRAY_VALUE: _State.ARRAY_COMMA,
    _State.OBJECT_VALUE: _State.OBJECT_COMMA,
}


class Tokenizer:
    """Pull-based JSON tokenizer with one token of lookahead.

    Args:
        stream: Text or binary stream to read from. Bytes are decoded as
            UTF-8, invalid sequences are replaced with U+FFFD.
        chunk_size: Number of characters (or bytes) read per refill.

    The tokenizer never closes the stream.
    """

    def __init__(self, stream: IO, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._stream = stream
        self._chunk_size = chunk_size
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buf = ""
        self._pos = 0
        # Start of the token being scanned; text before it may be dropped
        self._start = 0
        # Absolute offset of self._buf[0] in the input
        self._offset = 0
        self._eof = False
        self._state = _State.TOP
        self._saved: List[_State] = []

    @property
    def offset(self) -> int:
        """Absolute character offset of the read position."""
        return self._offset + self._pos

    @property
    def depth(self) -> int:
        """Number of containers currently open."""
        return len(self._saved)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token is None:
                return
            yield token

    def has_more(self) -> bool:
        """Check whether another element follows in the current container.

        At top level this reports whether any further value follows.
        """
        c = self._peek()
        return c is not None and c not in "]}"

    def next_token(self) -> Optional[Token]:
        """Return the next token, or None once the input is exhausted.

        End of input is reported the same way whether or not containers
        are still open; callers decide whether that is an error.

        Raises:
            MalformedInput: If the input violates the JSON grammar
        """
        c = self._peek()
        if c is None:
            return None

        state = self._state
        if state is _State.ARRAY_COMMA:
            if c == "]":
                return self._close(END_ARRAY)
            if c != ",":
                self._fail(c, "after array element")
            self._pos += 1
            state = self._state = _State.ARRAY_VALUE
            c = self._peek()
        elif state is _State.OBJECT_COMMA:
            if c == "}":
                return self._close(END_OBJECT)
            if c != ",":
                self._fail(c, "after object key:value pair")
            self._pos += 1
            state = self._state = _State.OBJECT_KEY
            c = self._peek()
        elif state is _State.OBJECT_COLON:
            if c != ":":
                self._fail(c, "after object key")
            self._pos += 1
            state = self._state = _State.OBJECT_VALUE
            c = self._peek()
        if c is None:
            return None

        if state is _State.ARRAY_START and c == "]":
            return self._close(END_ARRAY)
        if state is _State.OBJECT_START and c == "}":
            return self._close(END_OBJECT)
        if state in (_State.OBJECT_START, _State.OBJECT_KEY):
            if c != '"':
                self._fail(c, "looking for beginning of object key string")
            key = self._read_string()
            self._state = _State.OBJECT_COLON
            return Token(TokenKind.STRING, key)

        if c == "{":
            return self._open(BEGIN_OBJECT, _State.OBJECT_START)
        if c == "[":
            return self._open(BEGIN_ARRAY, _State.ARRAY_START)

        if c == '"':
            token = Token(TokenKind.STRING, self._read_string())
        elif c in _LITERALS:
            token = self._read_literal(c)
        elif c == "-" or "0" <= c <= "9":
            token = Token(TokenKind.NUMBER, self._read_number())
        else:
            self._fail(c, "looking for beginning of value")

        if state is _State.TOP:
            self._check_top_level_end()
        self._state = _AFTER_VALUE[state]
        return token

    def _open(self, token: Token, state: _State) -> Token:
        self._pos += 1
        self._saved.append(_AFTER_VALUE[self._state])
        self._state = state
        return token

    def _close(self, token: Token) -> Token:
        self._pos += 1
        self._state = self._saved.pop()
        return token

    def _fail(self, c: str, context: str) -> NoReturn:
        raise MalformedInput(f"invalid character {c!r} {context}", self.offset)

    def _fill(self) -> bool:
        """Append the next chunk of input to the buffer.

        Returns:
            False if the stream is exhausted and nothing was added
        """
        while not self._eof:
            # Reads grow with the token being scanned, so a long string or
            # number is copied a logarithmic number of times
            retained = len(self._buf) - min(self._start, self._pos)
            data = self._stream.read(max(self._chunk_size, retained))
            if isinstance(data, (bytes, bytearray)):
                text = self._decoder.decode(data, final=not data)
            else:
                text = data
            if not data:
                self._eof = True
            if text:
                drop = min(self._start, self._pos)
                self._buf = self._buf[drop:] + text
                self._pos -= drop
                self._start -= drop
                self._offset += drop
                return True
        return False

    def _peek(self) -> Optional[str]:
        """Skip whitespace and return the next character without consuming it."""
        while True:
            self._pos = _SKIP_WHITESPACE.match(self._buf, self._pos).end()
            if self._pos < len(self._buf):
                self._start = self._pos
                return self._buf[self._pos]
            self._start = self._pos
            if not self._fill():
                return None

    def _check_top_level_end(self) -> None:
        # Scalars at top level must be followed by whitespace or end of input
        if self._pos >= len(self._buf) and not self._fill():
            return
        c = self._buf[self._pos]
        if c not in _WHITESPACE:
            self._fail(c, "after top-level value")

    def _read_string(self) -> str:
        start = self._start = self._pos
        search = start + 1
        while True:
            end = self._buf.find('"', search)
            if end < 0:
                relative = len(self._buf) - self._start
                if not self._fill():
                    raise MalformedInput(
                        "unexpected end of input in string literal",
                        self._offset + self._start,
                    )
                search = self._start + relative
                continue
            escapes = 0
            while self._buf[end - 1 - escapes] == "\\":
                escapes += 1
            if escapes % 2 == 0:
                break
            search = end + 1

        start = self._start
        try:
            value, self._pos = scanstring(self._buf, start + 1, True)
        except json.JSONDecodeError as e:
            raise MalformedInput(e.msg, self._offset + e.pos) from None
        return value

    def _read_number(self) -> str:
        self._start = self._pos
        while True:
            run_end = _NUMBER_RUN.match(self._buf, self._start).end()
            if run_end < len(self._buf) or not self._fill():
                break
        start = self._start
        match = _NUMBER.match(self._buf, start)
        if match is None or match.end() != run_end:
            raise MalformedInput(
                f"invalid number literal {self._buf[start:run_end]!r}",
                self._offset + start,
            )
        self._pos = run_end
        return match.group()

    def _read_literal(self, c: str) -> Token:
        word, token = _LITERALS[c]
        self._start = self._pos
        while len(self._buf) - self._start < len(word) and self._fill():
            pass
        start = self._start
        if not self._buf.startswith(word, start):
            found = self._buf[start : start + len(word)]
            if len(found) < len(word) and word.startswith(found):
                raise MalformedInput(
                    "unexpected end of input in literal", self._offset + start
                )
            raise MalformedInput(
                f"invalid literal {found!r} (expected {word!r})",
                self._offset + start,
            )
        self._pos = start + len(word)
        return token


__all__ = ["DEFAULT_CHUNK_SIZE", "Tokenizer"]
