"""RCL Lexer: converts raw source text into a flat list of tokens.

The lexer works on the encoded byte buffer, so every token offset is a
byte offset.  It records line and column numbers for every token so the
parser can produce precise error messages.

Whitespace handling:
    - A whitespace run with at most one newline is skipped and never
      becomes a token.
    - A whitespace run with two or more newlines (only spaces, tabs,
      carriage returns and form feeds between them) is a single ``BLANK``
      token spanning the whole run.

Comments run from ``//`` through the end of the line, including the
terminating newline when there is one.

String literals are double-quoted and captured raw: there are no escape
sequences, and the closing quote must be on the same line.

Numbers come in three shapes, tried in order: binary (``0b``),
hexadecimal (``0x``), and decimal with optional fraction and exponent.
A leading ``-`` is the unary operator, not part of the literal.

Identifiers follow the pattern ``[_A-Za-z][-_A-Za-z0-9]*`` and are
scanned with maximal munch before being checked against the keyword
table, so ``letter`` is an identifier and ``let`` is a keyword.
"""
from __future__ import annotations

import bisect
import logging
import re
from typing import Final

from rcl.grammar.tokens import KEYWORDS, SYMBOLS, Token, TokenType

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WHITESPACE: Final[re.Pattern[bytes]] = re.compile(rb"[ \t\r\n\f]+")
_IDENT: Final[re.Pattern[bytes]] = re.compile(rb"[_A-Za-z][-_A-Za-z0-9]*")
_NUM_BINARY: Final[re.Pattern[bytes]] = re.compile(rb"0b[01_]*")
_NUM_HEXADECIMAL: Final[re.Pattern[bytes]] = re.compile(rb"0x[0-9a-fA-F_]*")
_NUM_DECIMAL: Final[re.Pattern[bytes]] = re.compile(
    rb"(0|[1-9][0-9_]*)(\.[0-9][0-9_]*)?([eE][-+]?[0-9][0-9_]*)?"
)
_STRING: Final[re.Pattern[bytes]] = re.compile(rb'"[^"\n]*"')
_COMMENT: Final[re.Pattern[bytes]] = re.compile(rb"//[^\n]*\n?")
_SYMBOL: Final[re.Pattern[bytes]] = re.compile(
    b"|".join(re.escape(s.encode("ascii")) for s in sorted(SYMBOLS, key=len, reverse=True))
)

_DIGITS: Final[bytes] = b"0123456789"
_IDENT_START: Final[bytes] = b"_ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


class LexError(Exception):
    """Raised when the lexer encounters invalid input.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    line:
        1-based line number where the error occurred.
    col:
        1-based column number where the error occurred.
    offset:
        0-based byte offset in the source where the error occurred.
    """

    def __init__(self, message: str, line: int, col: int, offset: int) -> None:
        super().__init__(f"{type(self).__name__} at {line}:{col}: {message}")
        self.lex_message = message
        self.line = line
        self.col = col
        self.offset = offset


class UnterminatedString(LexError):
    """Raised when a string literal has no closing quote on its line."""


class Lexer:
    """Position-driven RCL lexer.

    ``next_token`` is a pure function of the position, so the lexer
    holds no cursor of its own; ``tokenize`` drives it over the whole
    buffer.

    Parameters
    ----------
    source:
        The complete RCL source, as text or as encoded bytes.
    encoding:
        Encoding used to turn text into bytes and token bytes into text.
    """

    __slots__ = ("_source", "_encoding", "_line_starts")

    def __init__(self, source: str | bytes, encoding: str = "utf-8") -> None:
        self._encoding: str = encoding
        if isinstance(source, str):
            self._source: bytes = _encode(source, encoding)
        else:
            self._source = bytes(source)
        self._line_starts: list[int] = [0]
        self._line_starts.extend(m.end() for m in re.finditer(rb"\n", self._source))
        if not isinstance(source, str):
            self._check_decodable()

    @property
    def source(self) -> bytes:
        """The encoded source buffer that offsets refer to."""
        return self._source

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tokenize(self) -> list[Token]:
        """Scan the entire source and return the complete token list.

        The list always ends with an ``EOF`` token.

        Returns
        -------
        list[Token]
            Ordered list of tokens, including COMMENT and BLANK tokens.

        Raises
        ------
        LexError
            On any character that cannot begin a valid token.
        """
        tokens: list[Token] = []
        position = 0
        while True:
            token, position = self.next_token(position)
            tokens.append(token)
            if token.type is TokenType.EOF:
                break
        logger.debug("Lexed %d tokens from %d bytes", len(tokens), len(self._source))
        return tokens

    def next_token(self, position: int) -> tuple[Token, int]:
        """Scan the token that starts at or after ``position``.

        Ordinary whitespace before the token is skipped.

        Returns
        -------
        tuple[Token, int]
            The token and the byte offset just past it.

        Raises
        ------
        LexError
            If no token pattern matches at the position.
        UnterminatedString
            If a string literal is not closed on its line.
        """
        src = self._source
        ws = _WHITESPACE.match(src, position)
        if ws is not None:
            if ws.group().count(b"\n") >= 2:
                return self._make_token(TokenType.BLANK, ws.start(), ws.end()), ws.end()
            position = ws.end()

        if position >= len(src):
            return self._make_token(TokenType.EOF, len(src), len(src)), len(src)

        ch = src[position:position + 1]

        if src.startswith(b"//", position):
            return self._scan(TokenType.COMMENT, _COMMENT, position)

        if ch == b'"':
            m = _STRING.match(src, position)
            if m is None:
                line, col = self.location(position)
                raise UnterminatedString(
                    "Unterminated string literal (no closing quote on this line)",
                    line,
                    col,
                    position,
                )
            return self._make_token(TokenType.STRING, m.start(), m.end()), m.end()

        if ch in _DIGITS:
            return self._scan_number(position)

        if ch in _IDENT_START:
            m = _IDENT.match(src, position)
            assert m is not None
            word = m.group().decode("ascii")
            token_type = KEYWORDS.get(word, TokenType.IDENT)
            return self._make_token(token_type, m.start(), m.end()), m.end()

        m = _SYMBOL.match(src, position)
        if m is not None:
            token_type = SYMBOLS[m.group().decode("ascii")]
            return self._make_token(token_type, m.start(), m.end()), m.end()

        line, col = self.location(position)
        raise LexError(f"Unexpected character {self._char_at(position)!r}", line, col, position)

    def location(self, offset: int) -> tuple[int, int]:
        """Return the 1-based ``(line, column)`` of a byte offset.

        The column counts characters, not bytes.
        """
        index = bisect.bisect_right(self._line_starts, offset) - 1
        line_start = self._line_starts[index]
        prefix = self._source[line_start:offset].decode(self._encoding, errors="replace")
        return index + 1, len(prefix) + 1

    # ------------------------------------------------------------------
    # Internal scanner
    # ------------------------------------------------------------------

    def _scan(self, token_type: TokenType, pattern: re.Pattern[bytes], position: int) -> tuple[Token, int]:
        m = pattern.match(self._source, position)
        assert m is not None
        return self._make_token(token_type, m.start(), m.end()), m.end()

    def _scan_number(self, position: int) -> tuple[Token, int]:
        """Consume a binary, hexadecimal or decimal literal, in that priority order."""
        m = (
            _NUM_BINARY.match(self._source, position)
            or _NUM_HEXADECIMAL.match(self._source, position)
            or _NUM_DECIMAL.match(self._source, position)
        )
        # The decimal pattern matches any leading digit.
        assert m is not None
        return self._make_token(TokenType.NUMBER, m.start(), m.end()), m.end()

    def _make_token(self, token_type: TokenType, start: int, end: int) -> Token:
        line, col = self.location(start)
        return Token(
            type=token_type,
            value=self._source[start:end].decode(self._encoding),
            offset=start,
            end=end,
            line=line,
            col=col,
        )

    def _char_at(self, position: int) -> str:
        # Decode a few bytes so that a multi-byte character is reported whole.
        return self._source[position:position + 4].decode(self._encoding, errors="ignore")[:1] or "?"

    def _check_decodable(self) -> None:
        try:
            self._source.decode(self._encoding)
        except UnicodeDecodeError as exc:
            line, col = self.location(exc.start)
            raise LexError(f"Source is not valid {self._encoding}: {exc.reason}", line, col, exc.start) from exc


def _encode(text: str, encoding: str) -> bytes:
    try:
        return text.encode(encoding)
    except UnicodeEncodeError as exc:
        before = text[:exc.start]
        line = before.count("\n") + 1
        col = exc.start - (before.rfind("\n") + 1) + 1
        offset = len(before.encode(encoding))
        raise LexError(
            f"Character {text[exc.start]!r} cannot be encoded as {encoding}", line, col, offset
        ) from exc


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def tokenize(source: str | bytes, encoding: str = "utf-8") -> list[Token]:
    """Tokenize an RCL source buffer and return the complete token list.

    Parameters
    ----------
    source:
        RCL source text or encoded bytes.
    encoding:
        Source encoding.

    Returns
    -------
    list[Token]
        All tokens including COMMENT and BLANK tokens, terminated by EOF.

    Raises
    ------
    LexError
        If the source contains invalid characters or unterminated literals.

    Example
    -------
    ::

        from rcl.lexer import tokenize
        tokens = tokenize('let x = 1; x + x')
    """
    return Lexer(source, encoding).tokenize()
