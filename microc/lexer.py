from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .chars import is_digit, is_expected, is_identifier_continue, is_identifier_start, is_whitespace
from .errors import LexError

logger = logging.getLogger(__name__)

INT_MAX = 2**31 - 1


class TokenType(Enum):
    BEGIN = "begin"
    END = "end"
    READ = "read"
    WRITE = "write"
    IDENTIFIER = "Identifier"
    INT_LITERAL = "IntLiteral"
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    SEMICOLON = ";"
    COMMA = ","
    ASSIGN = ":="
    PLUS = "+"
    MINUS = "-"
    WHITESPACE = "Whitespace"
    LINE_COMMENT = "LineComment"
    UNKNOWN = "Unknown"
    EOF = "EOF"


KEYWORDS = {
    "begin": TokenType.BEGIN,
    "end": TokenType.END,
    "read": TokenType.READ,
    "write": TokenType.WRITE,
}

SINGLE_CHAR = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    "+": TokenType.PLUS,
}

TRIVIA = (TokenType.WHITESPACE, TokenType.LINE_COMMENT)


@dataclass(frozen=True)
class Token:
    kind: TokenType
    value: str | int | None
    line: int
    col: int
    length: int

    def describe(self) -> str:
        if self.kind is TokenType.IDENTIFIER:
            return f"Identifier({self.value})"
        if self.kind is TokenType.INT_LITERAL:
            return f"IntLiteral({self.value})"
        if self.kind is TokenType.EOF:
            return "end of input"
        return repr(self.kind.value)


class Lexer:
    """Produces tokens from source text one at a time.

    ``next_token`` returns every token, trivia included, and keeps returning
    an EOF token once the text is exhausted. Iterating a lexer yields only
    significant tokens and stops before EOF.
    """

    def __init__(self, src: str):
        self.src = src
        self.i = 0
        self.line = 1
        self.col = 1

    def _peek(self, ahead: int = 0) -> str:
        j = self.i + ahead
        return self.src[j] if j < len(self.src) else ""

    def _advance(self, n: int = 1):
        for _ in range(n):
            if self.src[self.i] == "\n":
                self.line += 1
                self.col = 1
            else:
                self.col += 1
            self.i += 1

    def _scan_while(self, pred) -> str:
        start = self.i
        while self.i < len(self.src) and pred(self.src[self.i]):
            self._advance()
        return self.src[start : self.i]

    def _error(self, message: str, line: int, col: int, length: int = 1):
        raise LexError(message, self.src, line, col, length)

    def next_token(self) -> Token:
        line, col = self.line, self.col

        def emit(kind: TokenType, text: str, value: str | int | None = None) -> Token:
            return Token(kind, value, line, col, len(text))

        ch = self._peek()
        if not ch:
            return Token(TokenType.EOF, None, line, col, 0)
        if is_whitespace(ch):
            return emit(TokenType.WHITESPACE, self._scan_while(is_whitespace))
        if ch == "-":
            if self._peek(1) == "-":
                # comment till EOL
                return emit(TokenType.LINE_COMMENT, self._scan_while(lambda c: c != "\n"))
            self._advance()
            return emit(TokenType.MINUS, ch)
        if is_identifier_start(ch):
            text = self._scan_while(is_identifier_continue)
            kind = KEYWORDS.get(text)
            if kind is not None:
                return emit(kind, text)
            return emit(TokenType.IDENTIFIER, text, text)
        if is_digit(ch):
            text = self._scan_while(is_digit)
            # more than ten significant digits never fits in 32 bits
            if len(text.lstrip("0")) > 10 or int(text) > INT_MAX:
                self._error("integer literal out of range", line, col, len(text))
            return emit(TokenType.INT_LITERAL, text, int(text))
        if ch in SINGLE_CHAR:
            self._advance()
            return emit(SINGLE_CHAR[ch], ch)
        if ch == ":":
            if self._peek(1) != "=":
                self._error("expected '=' after ':'", line, col)
            self._advance(2)
            return emit(TokenType.ASSIGN, ":=")
        # unknown: take everything up to the next character we could lex
        j = self.i + 1
        while j < len(self.src) and not is_expected(self.src[j]):
            j += 1
        bad = emit(TokenType.UNKNOWN, self.src[self.i : j], self.src[self.i : j])
        raise LexError(f"unexpected {bad.value!r}", self.src, line, col, bad.length, token=bad)

    def __iter__(self) -> Iterator[Token]:
        count = 0
        while True:
            tok = self.next_token()
            if tok.kind is TokenType.EOF:
                break
            if tok.kind in TRIVIA:
                continue
            count += 1
            yield tok
        logger.debug("lexed %d tokens, %d lines", count, self.line)


def tokenize(src: str) -> Iterator[Token]:
    return iter(Lexer(src))
