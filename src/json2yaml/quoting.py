"""Decide how a JSON string is written as a YAML scalar.

A string is written plain (unquoted) unless a YAML reader could take it
for something else: null, a boolean, a number, a timestamp, or structure
such as a sequence entry, mapping key or comment. Each of those hazards
is a separate predicate below; ``needs_quotes`` combines them.

These patterns match more than the YAML specifications require. Quoting a
string that could have been plain is harmless, emitting a plain string
that some parser reads as another type is not.
"""

import re

_RESERVED_WORDS = frozenset(
    {
        "",
        "~",
        "null",
        "true",
        "false",
        "y",
        "yes",
        "n",
        "no",
        "on",
        "off",
        ".inf",
        "+.inf",
        "-.inf",
        ".nan",
        "+.nan",
        "-.nan",
        # YAML 1.1 merge and value keys
        "<<",
        "=",
    }
)

_NUMBER = re.compile(
    r"[-+]?(?:"
    r"0b[01_]+"
    r"|0o?[0-7_]+"
    r"|0x[0-9a-fA-F_]+"
    r"|[0-9_]+"
    r"|\.?[0-9][0-9_]*(?::[0-5]?[0-9])*(?:\.[0-9_]*)?(?:[eE][-+]?[0-9]+)?"
    r"|\.[0-9_]+(?:[eE][-+]?[0-9]+)?"
    r")"
)

_TIMESTAMP = re.compile(
    r"[0-9]{4}-[0-9]{1,2}-[0-9]{1,2}"
    r"(?:(?:[Tt]|[ \t]+)[0-9]{1,2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]*)?"
    r"(?:[ \t]*(?:Z|[-+][0-9]{1,2}(?::[0-9]{2})?))?)?"
)

_INDICATOR_PREFIX = re.compile(
    r"[ \t!\"#%&'*,>@\[\]`{|}]"
    r"|[-?:](?:[ \t]|$)"
    r"|(?:---|\.\.\.)(?:[ \t]|$)"
)

_EMBEDDED_INDICATOR = re.compile(r":(?:[ \t]|$)|[ \t]#|[ \t]$")

# C0 controls except TAB and LF, DEL, the YAML 1.1 line breaks NEL, LS
# and PS, BOM, noncharacters and lone surrogates
_UNPRINTABLE = (
    r"\x00-\x08\x0b-\x1f\x7f\x85\u2028\u2029\ufeff"
    r"\ufdd0-\ufdef\ufffe\uffff\ud800-\udfff"
)
_SPECIAL_CHARACTERS = re.compile(r"[\t" + _UNPRINTABLE + r"]")
_BLOCK_UNSAFE_CHARACTERS = re.compile(r"[" + _UNPRINTABLE + r"]")

# Only line feeds, or a first content line starting with a blank
_BLOCK_UNSAFE_START = re.compile(r"\n*(?:[ \t]|\Z)")


def is_reserved_word(s: str) -> bool:
    """Null, boolean, infinity and NaN spellings, in any letter case."""
    return s.lower() in _RESERVED_WORDS


def is_number_like(s: str) -> bool:
    """Integer or float in any YAML 1.1 / 1.2 notation."""
    return _NUMBER.fullmatch(s) is not None


def is_timestamp_like(s: str) -> bool:
    return _TIMESTAMP.fullmatch(s) is not None


def has_indicator_prefix(s: str) -> bool:
    """Leading character that starts YAML structure or a quoted scalar."""
    return _INDICATOR_PREFIX.match(s) is not None


def has_embedded_indicator(s: str) -> bool:
    """Mapping value indicator, comment or trailing blank anywhere in ``s``."""
    return _EMBEDDED_INDICATOR.search(s) is not None


def has_special_characters(s: str) -> bool:
    """Control, line break and non-printable characters."""
    return _SPECIAL_CHARACTERS.search(s) is not None


_SINGLE_LINE_CHECKS = (
    is_reserved_word,
    is_number_like,
    is_timestamp_like,
    has_indicator_prefix,
    has_embedded_indicator,
    has_special_characters,
)


def needs_quotes(s: str) -> bool:
    """Check whether a single-line string must be double-quoted."""
    return any(check(s) for check in _SINGLE_LINE_CHECKS)


def needs_quotes_multiline(s: str) -> bool:
    """Check whether a string with line feeds cannot be a block literal.

    Block literals detect their indentation from the first non-empty line,
    so that line may not start with a blank, and a string made only of
    line feeds has no content to detect it from. Tabs are fine inside a
    block literal.
    """
    return (
        _BLOCK_UNSAFE_START.match(s) is not None
        or _BLOCK_UNSAFE_CHARACTERS.search(s) is not None
    )


_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}

_NEEDS_ESCAPE = re.compile(r'["\\\t\n' + _UNPRINTABLE + r"]")


def _escape(match: "re.Match[str]") -> str:
    c = match.group()
    return _ESCAPES.get(c) or f"\\u{ord(c):04x}"


def double_quote(s: str) -> str:
    """Render ``s`` as a double-quoted scalar.

    Uses JSON escapes, which are a subset of YAML's double-quoted escapes.
    Everything else, including non-ASCII text, is copied as is.
    """
    return '"' + _NEEDS_ESCAPE.sub(_escape, s) + '"'


__all__ = [
    "double_quote",
    "has_embedded_indicator",
    "has_indicator_prefix",
    "has_special_characters",
    "is_number_like",
    "is_reserved_word",
    "is_timestamp_like",
    "needs_quotes",
    "needs_quotes_multiline",
]
