"""Token types produced by the JSON tokenizer."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TokenKind(Enum):
    BEGIN_OBJECT = "{"
    END_OBJECT = "}"
    BEGIN_ARRAY = "["
    END_ARRAY = "]"
    NULL = "null"
    TRUE = "true"
    FALSE = "false"
    NUMBER = "number"
    STRING = "string"


_DELIMITERS = frozenset(
    {
        TokenKind.BEGIN_OBJECT,
        TokenKind.END_OBJECT,
        TokenKind.BEGIN_ARRAY,
        TokenKind.END_ARRAY,
    }
)


@dataclass(frozen=True)
class Token:
    """A single JSON token.

    Scalars are never reinterpreted: numbers keep the exact text found in
    the input and strings hold their decoded value.
    """

    kind: TokenKind
    """Which token this is."""

    value: Optional[str] = None
    """Number text for NUMBER, decoded text for STRING, otherwise None."""

    @property
    def is_delimiter(self) -> bool:
        return self.kind in _DELIMITERS

    @property
    def opens_container(self) -> bool:
        return self.kind in (TokenKind.BEGIN_OBJECT, TokenKind.BEGIN_ARRAY)


BEGIN_OBJECT = Token(TokenKind.BEGIN_OBJECT)
END_OBJECT = Token(TokenKind.END_OBJECT)
BEGIN_ARRAY = Token(TokenKind.BEGIN_ARRAY)
END_ARRAY = Token(TokenKind.END_ARRAY)
NULL = Token(TokenKind.NULL)
TRUE = Token(TokenKind.TRUE)
FALSE = Token(TokenKind.FALSE)


__all__ = [
    "BEGIN_ARRAY",
    "BEGIN_OBJECT",
    "END_ARRAY",
    "END_OBJECT",
    "FALSE",
    "NULL",
    "TRUE",
    "Token",
    "TokenKind",
]
