"""Unit tests for rcl.lexer: Lexer, tokenize, LexError."""
from __future__ import annotations

import pytest

from rcl.grammar.tokens import TokenType
from rcl.lexer import LexError, Lexer, UnterminatedString, tokenize


def _types(source: str) -> list[TokenType]:
    return [t.type for t in tokenize(source)]


def _values(source: str) -> list[str]:
    return [t.value for t in tokenize(source) if t.type is not TokenType.EOF]


# ---------------------------------------------------------------------------
# Basic scanning
# ---------------------------------------------------------------------------


class TestLexerBasics:
    def test_empty_source_yields_only_eof(self) -> None:
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type is TokenType.EOF

    def test_eof_offset_is_source_length(self) -> None:
        tokens = tokenize("x  ")
        assert tokens[-1].offset == 3
        assert tokens[-1].end == 3

    def test_whitespace_only_single_newline_yields_eof(self) -> None:
        assert _types("  \n  ") == [TokenType.EOF]

    def test_tokens_end_with_eof(self) -> None:
        assert tokenize("let x = 1; x")[-1].type is TokenType.EOF

    def test_let_statement(self) -> None:
        assert _types("let x = 1; x") == [
            TokenType.LET,
            TokenType.IDENT,
            TokenType.ASSIGN,
            TokenType.NUMBER,
            TokenType.SEMICOLON,
            TokenType.IDENT,
            TokenType.EOF,
        ]

    def test_lexer_class_and_function_agree(self) -> None:
        source = "{ a = 1, b: [2] }"
        assert Lexer(source).tokenize() == tokenize(source)


# ---------------------------------------------------------------------------
# Keywords and identifiers
# ---------------------------------------------------------------------------


class TestKeywordsAndIdentifiers:
    @pytest.mark.parametrize("word, expected", [
        ("let", TokenType.LET),
        ("for", TokenType.FOR),
        ("in", TokenType.IN),
        ("if", TokenType.IF),
        ("and", TokenType.AND),
        ("or", TokenType.OR),
        ("not", TokenType.NOT),
    ])
    def test_keyword(self, word: str, expected: TokenType) -> None:
        assert _types(word) == [expected, TokenType.EOF]

    @pytest.mark.parametrize("word", ["letter", "inner", "iffy", "android", "order", "nothing", "format"])
    def test_keyword_prefix_is_identifier(self, word: str) -> None:
        tokens = tokenize(word)
        assert tokens[0].type is TokenType.IDENT
        assert tokens[0].value == word

    @pytest.mark.parametrize("word", ["foo-bar", "_private", "x1", "a-b-c", "snake_case", "A"])
    def test_identifier_shapes(self, word: str) -> None:
        tokens = tokenize(word)
        assert [t.type for t in tokens] == [TokenType.IDENT, TokenType.EOF]
        assert tokens[0].value == word

    def test_dash_after_space_is_operator(self) -> None:
        assert _types("foo - bar") == [TokenType.IDENT, TokenType.MINUS, TokenType.IDENT, TokenType.EOF]

    def test_trailing_dash_stays_in_identifier(self) -> None:
        assert _values("a- 1") == ["a-", "1"]


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


class TestNumbers:
    @pytest.mark.parametrize("literal", [
        "0",
        "42",
        "1_000",
        "3.14",
        "1e10",
        "1.5e-3",
        "2E+8",
        "0b1010",
        "0b1010_0101",
        "0xff",
        "0xDEAD_beef",
    ])
    def test_number_literal(self, literal: str) -> None:
        tokens = tokenize(literal)
        assert [t.type for t in tokens] == [TokenType.NUMBER, TokenType.EOF]
        assert tokens[0].value == literal

    def test_bare_binary_prefix_is_a_number(self) -> None:
        assert _values("0b") == ["0b"]

    def test_leading_zero_ends_decimal(self) -> None:
        assert _values("01") == ["0", "1"]

    def test_trailing_dot_is_field_access(self) -> None:
        assert _types("1.x") == [TokenType.NUMBER, TokenType.DOT, TokenType.IDENT, TokenType.EOF]

    def test_negative_number_is_unary_minus(self) -> None:
        assert _types("-1") == [TokenType.MINUS, TokenType.NUMBER, TokenType.EOF]


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


class TestStrings:
    def test_string_value_keeps_quotes(self) -> None:
        tokens = tokenize('"hello"')
        assert tokens[0].type is TokenType.STRING
        assert tokens[0].value == '"hello"'

    def test_empty_string(self) -> None:
        assert _values('""') == ['""']

    def test_backslash_is_literal(self) -> None:
        assert _values(r'"a\b"') == [r'"a\b"']

    def test_unterminated_string_raises(self) -> None:
        with pytest.raises(UnterminatedString) as exc_info:
            tokenize('x = "abc')
        assert exc_info.value.line == 1
        assert exc_info.value.col == 5
        assert exc_info.value.offset == 4

    def test_string_cannot_span_lines(self) -> None:
        with pytest.raises(UnterminatedString):
            tokenize('"abc\ndef"')

    def test_unterminated_string_is_a_lex_error(self) -> None:
        assert issubclass(UnterminatedString, LexError)


# ---------------------------------------------------------------------------
# Operators and punctuation
# ---------------------------------------------------------------------------


class TestSymbols:
    @pytest.mark.parametrize("text, expected", [
        ("<=", TokenType.LTE),
        (">=", TokenType.GTE),
        ("==", TokenType.EQ),
        ("!=", TokenType.NEQ),
        ("<", TokenType.LT),
        (">", TokenType.GT),
        ("|", TokenType.PIPE),
        ("*", TokenType.STAR),
        ("/", TokenType.SLASH),
        ("=", TokenType.ASSIGN),
        (":", TokenType.COLON),
        (";", TokenType.SEMICOLON),
    ])
    def test_symbol(self, text: str, expected: TokenType) -> None:
        assert _types(text) == [expected, TokenType.EOF]

    def test_longest_symbol_wins(self) -> None:
        assert _types("a<=b") == [TokenType.IDENT, TokenType.LTE, TokenType.IDENT, TokenType.EOF]

    def test_double_assign_is_equality(self) -> None:
        assert _types("===") == [TokenType.EQ, TokenType.ASSIGN, TokenType.EOF]

    def test_brackets(self) -> None:
        assert _types("{[()]}") == [
            TokenType.LBRACE,
            TokenType.LBRACKET,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.RBRACKET,
            TokenType.RBRACE,
            TokenType.EOF,
        ]

    @pytest.mark.parametrize("char", ["@", "#", "!", "$", "~", "'"])
    def test_unexpected_character_raises(self, char: str) -> None:
        with pytest.raises(LexError, match="Unexpected character"):
            tokenize(f"x {char} y")


# ---------------------------------------------------------------------------
# Trivia
# ---------------------------------------------------------------------------


class TestTrivia:
    def test_comment_includes_newline(self) -> None:
        tokens = tokenize("// note\nx")
        assert tokens[0].type is TokenType.COMMENT
        assert tokens[0].value == "// note\n"
        assert tokens[1].type is TokenType.IDENT
        assert tokens[1].line == 2

    def test_comment_at_end_of_file_without_newline(self) -> None:
        tokens = tokenize("x // done")
        assert [t.type for t in tokens] == [TokenType.IDENT, TokenType.COMMENT, TokenType.EOF]
        assert tokens[1].value == "// done"

    def test_slash_is_not_comment(self) -> None:
        assert _types("a / b") == [TokenType.IDENT, TokenType.SLASH, TokenType.IDENT, TokenType.EOF]

    def test_single_newline_is_skipped(self) -> None:
        assert _types("a\nb") == [TokenType.IDENT, TokenType.IDENT, TokenType.EOF]

    def test_two_newlines_make_a_blank(self) -> None:
        assert _types("a\n\nb") == [TokenType.IDENT, TokenType.BLANK, TokenType.IDENT, TokenType.EOF]

    def test_blank_spans_whole_whitespace_run(self) -> None:
        tokens = tokenize("a  \n \t\n\n  b")
        blank = tokens[1]
        assert blank.type is TokenType.BLANK
        assert blank.value == "  \n \t\n\n  "
        assert (blank.offset, blank.end) == (1, 10)

    def test_blank_with_carriage_returns(self) -> None:
        assert _types("a\r\n\r\nb") == [TokenType.IDENT, TokenType.BLANK, TokenType.IDENT, TokenType.EOF]

    def test_newline_after_comment_does_not_count_twice(self) -> None:
        # The comment owns its newline, so one more newline is not a blank.
        assert _types("// c\n\nx") == [TokenType.COMMENT, TokenType.IDENT, TokenType.EOF]

    def test_leading_blank(self) -> None:
        assert _types("\n\nx") == [TokenType.BLANK, TokenType.IDENT, TokenType.EOF]


# ---------------------------------------------------------------------------
# Positions and encodings
# ---------------------------------------------------------------------------


class TestPositions:
    def test_line_and_column(self) -> None:
        tokens = tokenize("let a = 1;\n  a")
        last = tokens[-2]
        assert last.value == "a"
        assert (last.line, last.col) == (2, 3)

    def test_offsets_are_byte_offsets(self) -> None:
        tokens = tokenize('"é" x')
        string, ident = tokens[0], tokens[1]
        assert (string.offset, string.end) == (0, 4)
        assert (ident.offset, ident.end) == (5, 6)

    def test_columns_count_characters(self) -> None:
        tokens = tokenize('"é" x')
        assert tokens[1].col == 5

    def test_bytes_and_str_input_agree(self) -> None:
        source = '{ name = "Zoë" }'
        assert tokenize(source) == tokenize(source.encode("utf-8"))

    def test_source_property_is_encoded(self) -> None:
        assert Lexer("é").source == "é".encode("utf-8")

    def test_next_token_is_positional(self) -> None:
        lexer = Lexer("a b")
        first, position = lexer.next_token(0)
        second, _ = lexer.next_token(position)
        assert (first.value, second.value) == ("a", "b")
        assert lexer.next_token(0) == (first, position)

    def test_location(self) -> None:
        lexer = Lexer("ab\ncd")
        assert lexer.location(0) == (1, 1)
        assert lexer.location(3) == (2, 1)
        assert lexer.location(4) == (2, 2)

    def test_invalid_utf8_bytes_raise(self) -> None:
        with pytest.raises(LexError, match="not valid utf-8") as exc_info:
            tokenize(b"x = \xff")
        assert exc_info.value.offset == 4

    def test_unencodable_text_raises(self) -> None:
        with pytest.raises(LexError, match="cannot be encoded"):
            tokenize('"é"', encoding="ascii")

    def test_alternate_encoding(self) -> None:
        tokens = tokenize('"é" x'.encode("latin-1"), encoding="latin-1")
        assert tokens[0].value == '"é"'
        assert tokens[1].offset == 4

    def test_error_message_includes_location(self) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize("a\n  @")
        assert str(exc_info.value).startswith("LexError at 2:3:")
        assert exc_info.value.lex_message == "Unexpected character '@'"
