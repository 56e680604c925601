"""Tests for the incremental JSON tokenizer."""

import io
import re

import pytest

from json2yaml.errors import MalformedInput
from json2yaml.lexer import Tokenizer
from json2yaml.tokens import Token, TokenKind


def tokens(text, chunk_size=64):
    return list(Tokenizer(io.StringIO(text), chunk_size=chunk_size))


def kinds(text, chunk_size=64):
    return [t.kind for t in tokens(text, chunk_size)]


class TestTokens:
    def test_object(self):
        assert tokens('{"a": [1, true, false, null, "x"]}') == [
            Token(TokenKind.BEGIN_OBJECT),
            Token(TokenKind.STRING, "a"),
            Token(TokenKind.BEGIN_ARRAY),
            Token(TokenKind.NUMBER, "1"),
            Token(TokenKind.TRUE),
            Token(TokenKind.FALSE),
            Token(TokenKind.NULL),
            Token(TokenKind.STRING, "x"),
            Token(TokenKind.END_ARRAY),
            Token(TokenKind.END_OBJECT),
        ]

    def test_number_text_is_preserved(self):
        values = [t.value for t in tokens("[0, -0, 1.50, 2e10, 3E-2, 12345678901234567890]")
                  if t.kind is TokenKind.NUMBER]
        assert values == ["0", "-0", "1.50", "2e10", "3E-2", "12345678901234567890"]

    def test_string_escapes(self):
        (token,) = tokens(r'"a\"b\\c\/d\né😀"')
        assert token.value == 'a"b\\c/d\né😀'

    def test_lone_surrogate_is_kept(self):
        (token,) = tokens(r'"\ud800"')
        assert token.value == "\ud800"

    def test_concatenated_values(self):
        assert kinds('{}[]1 "a"\nnull') == [
            TokenKind.BEGIN_OBJECT,
            TokenKind.END_OBJECT,
            TokenKind.BEGIN_ARRAY,
            TokenKind.END_ARRAY,
            TokenKind.NUMBER,
            TokenKind.STRING,
            TokenKind.NULL,
        ]

    def test_empty_input(self):
        assert tokens("") == []
        assert tokens("  \n") == []

    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 5])
    def test_values_across_chunk_boundaries(self, chunk_size):
        text = '{"long key with \\"escapes\\\\": [12345.678e-9, true, "\\u00e9"]}'
        assert tokens(text, chunk_size) == tokens(text, 4096)

    def test_backslash_before_chunk_boundary(self):
        assert tokens('"ab\\\\" "c"', chunk_size=4) == [
            Token(TokenKind.STRING, "ab\\"),
            Token(TokenKind.STRING, "c"),
        ]

    @pytest.mark.parametrize("literal", ['"' + "x" * 100_000 + '"', "1" * 100_000])
    def test_long_token_reads_grow(self, literal):
        sizes = []

        class RecordingStream(io.StringIO):
            def read(self, size=-1):
                sizes.append(size)
                return super().read(size)

        (token,) = Tokenizer(RecordingStream(literal), chunk_size=16)
        assert len(token.value) == 100_000
        assert len(sizes) < 20
        assert max(sizes) >= 50_000

    def test_bytes_input(self):
        tokenizer = Tokenizer(io.BytesIO('["é", "😀"]'.encode("utf-8")), chunk_size=1)
        assert [t.value for t in tokenizer if t.kind is TokenKind.STRING] == ["é", "😀"]

    def test_invalid_utf8_is_replaced(self):
        tokenizer = Tokenizer(io.BytesIO(b'"a\xffb"'))
        assert tokenizer.next_token().value == "a\ufffdb"

    def test_rejects_bad_chunk_size(self):
        with pytest.raises(ValueError):
            Tokenizer(io.StringIO(""), chunk_size=0)


class TestLookahead:
    def test_has_more_in_array(self):
        tokenizer = Tokenizer(io.StringIO("[1, 2]"))
        tokenizer.next_token()
        assert tokenizer.has_more()
        tokenizer.next_token()
        assert tokenizer.has_more()
        tokenizer.next_token()
        assert not tokenizer.has_more()

    def test_has_more_empty_containers(self):
        tokenizer = Tokenizer(io.StringIO("{ }"))
        tokenizer.next_token()
        assert not tokenizer.has_more()

    def test_has_more_at_top_level(self):
        tokenizer = Tokenizer(io.StringIO("{} \n {}  "))
        tokenizer.next_token()
        tokenizer.next_token()
        assert tokenizer.has_more()
        tokenizer.next_token()
        tokenizer.next_token()
        assert not tokenizer.has_more()

    def test_has_more_does_not_consume(self):
        tokenizer = Tokenizer(io.StringIO("[7]"))
        tokenizer.next_token()
        assert tokenizer.has_more()
        assert tokenizer.has_more()
        assert tokenizer.next_token() == Token(TokenKind.NUMBER, "7")

    def test_depth(self):
        tokenizer = Tokenizer(io.StringIO('{"a": [[]]}'))
        depths = []
        for _ in tokenizer:
            depths.append(tokenizer.depth)
        assert depths == [1, 1, 2, 3, 2, 1, 0]


class TestEndOfInput:
    @pytest.mark.parametrize("text", ["{", "[", '{"a"', '{"a":', "[1,", "[1"])
    def test_open_containers_end_quietly(self, text):
        tokenizer = Tokenizer(io.StringIO(text))
        list(tokenizer)
        assert tokenizer.depth > 0

    def test_unterminated_string(self):
        with pytest.raises(MalformedInput, match="unexpected end of input in string"):
            tokens('["abc', chunk_size=2)

    def test_unterminated_literal(self):
        with pytest.raises(MalformedInput, match="unexpected end of input in literal"):
            tokens("[tru")


class TestMalformed:
    @pytest.mark.parametrize(
        "text, message",
        [
            ("}", "invalid character '}' looking for beginning of value"),
            ("[1 2]", "invalid character '2' after array element"),
            ("[1,]", "invalid character ']' looking for beginning of value"),
            ('{"a" 1}', "invalid character '1' after object key"),
            ('{"a": 1 "b": 2}', "invalid character '\"' after object key:value pair"),
            ("{1: 2}", "invalid character '1' looking for beginning of object key string"),
            ('{"a": 1,}', "invalid character '}' looking for beginning of object key string"),
            ("[1}", "invalid character '}' after array element"),
            ("nul", "unexpected end of input in literal"),
            ("[nulL]", "invalid literal 'nulL'"),
            ("01", "invalid number literal '01'"),
            ("[1.]", "invalid number literal '1.'"),
            ("[-]", "invalid number literal '-'"),
            ("[+1]", "invalid character '+' looking for beginning of value"),
            ("1x", "invalid character 'x' after top-level value"),
            ('"a""b"', "invalid character '\"' after top-level value"),
            ("truefalse", "invalid character 'f' after top-level value"),
            ('["a\tb"]', "Invalid control character"),
            ('["\\x"]', "Invalid \\escape"),
        ],
    )
    def test_errors(self, text, message):
        with pytest.raises(MalformedInput, match=re.escape(message)):
            tokens(text)

    def test_error_offset(self):
        with pytest.raises(MalformedInput) as excinfo:
            tokens('{"a": 1,\n "b" 2}', chunk_size=3)
        assert excinfo.value.offset == 14
        assert "offset 14" in str(excinfo.value)
