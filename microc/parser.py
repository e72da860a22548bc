from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .errors import ParseError
from .lexer import Token, TokenType, tokenize

logger = logging.getLogger(__name__)


class BinOpKind(Enum):
    ADD = "+"
    SUB = "-"


class SyscallKind(Enum):
    READ = "read"
    WRITE = "write"


# AST
class Expr:  # marker
    pass


@dataclass
class IntLit(Expr):
    value: int


@dataclass
class Var(Expr):
    name: str


@dataclass
class BinOp(Expr):
    op: BinOpKind
    lhs: Expr
    rhs: Expr


@dataclass
class Syscall(Expr):
    kind: SyscallKind
    args: list[Expr]


@dataclass
class Assign(Expr):
    var: Var
    value: Expr


@dataclass
class Program:
    statements: list[Expr]


BIN_OPS = {TokenType.PLUS: BinOpKind.ADD, TokenType.MINUS: BinOpKind.SUB}
SYSCALLS = {TokenType.READ: SyscallKind.READ, TokenType.WRITE: SyscallKind.WRITE}

# parenthesis and call-argument nesting
MAX_NESTING = 200


class TokenCursor:
    """One token of lookahead over a lazy token stream."""

    def __init__(self, tokens: Iterator[Token]):
        self._tokens = iter(tokens)
        self._last: Token | None = None
        self._cur = self._pull()

    def _pull(self) -> Token:
        tok = next(self._tokens, None)
        if tok is not None:
            self._last = tok
            return tok
        # EOF sits right after the last real token
        if self._last is None:
            return Token(TokenType.EOF, None, 1, 1, 0)
        return Token(TokenType.EOF, None, self._last.line, self._last.col + self._last.length, 0)

    def current(self) -> Token:
        return self._cur

    def advance(self) -> Token:
        tok = self._cur
        self._cur = self._pull()
        return tok


class Parser:
    def __init__(self, tokens: Iterator[Token]):
        self.cursor = TokenCursor(tokens)
        self.depth = 0

    def cur(self) -> Token:
        return self.cursor.current()

    def match(self, kind: TokenType) -> bool:
        return self.cur().kind is kind

    def eat(self, kind: TokenType, what: str | None = None) -> Token:
        t = self.cur()
        if t.kind is not kind:
            raise ParseError(f"expected {what or repr(kind.value)}", t)
        return self.cursor.advance()

    def parse(self) -> Program:
        skipped = 0
        while not self.match(TokenType.BEGIN):
            if self.match(TokenType.EOF):
                logger.warning("no 'begin' found, nothing to compile")
                return Program([])
            self.cursor.advance()
            skipped += 1
        if skipped:
            logger.debug("skipped %d tokens before 'begin'", skipped)
        self.eat(TokenType.BEGIN)

        statements: list[Expr] = []
        while not self.match(TokenType.END):
            if self.match(TokenType.EOF):
                logger.warning("input ended before 'end'")
                return Program(statements)
            if self.match(TokenType.SEMICOLON):
                self.cursor.advance()
                continue
            statements.append(self.parse_statement())
        # whatever follows 'end' is never looked at
        logger.debug("parsed %d statements", len(statements))
        return Program(statements)

    def parse_statement(self) -> Expr:
        if self.match(TokenType.IDENTIFIER):
            return self.parse_assign()
        start = self.cur()
        e = self.parse_expression()
        if not isinstance(e, Syscall):
            raise ParseError("expected an assignment or a read/write call", start)
        return e

    def parse_assign(self) -> Assign:
        name = self.eat(TokenType.IDENTIFIER, "identifier").value
        self.eat(TokenType.ASSIGN)
        return Assign(Var(name), self.parse_expression())

    def parse_expression(self) -> Expr:
        if self.depth >= MAX_NESTING:
            raise ParseError(f"expression nested deeper than {MAX_NESTING} levels", self.cur())
        self.depth += 1
        try:
            return self.parse_bin_op_rhs(self.parse_primary())
        finally:
            self.depth -= 1

    def parse_bin_op_rhs(self, lhs: Expr) -> Expr:
        # single precedence tier, left associative
        while self.cur().kind in BIN_OPS:
            op = BIN_OPS[self.cursor.advance().kind]
            lhs = BinOp(op, lhs, self.parse_primary())
        return lhs

    def parse_primary(self) -> Expr:
        t = self.cur()
        if t.kind is TokenType.IDENTIFIER:
            self.cursor.advance()
            if self.match(TokenType.LEFT_PAREN):
                raise ParseError(f"unknown syscall {t.value!r}", t)
            return Var(t.value)
        if t.kind in SYSCALLS:
            self.cursor.advance()
            self.eat(TokenType.LEFT_PAREN)
            return Syscall(SYSCALLS[t.kind], self.parse_args())
        if t.kind is TokenType.INT_LITERAL:
            self.cursor.advance()
            return IntLit(t.value)
        if t.kind is TokenType.LEFT_PAREN:
            self.cursor.advance()
            e = self.parse_expression()
            self.eat(TokenType.RIGHT_PAREN, "')'")
            return e
        raise ParseError("expected an expression", t)

    def parse_args(self) -> list[Expr]:
        args: list[Expr] = []
        if self.match(TokenType.RIGHT_PAREN):
            self.cursor.advance()
            return args
        while True:
            args.append(self.parse_expression())
            if self.match(TokenType.RIGHT_PAREN):
                self.cursor.advance()
                return args
            self.eat(TokenType.COMMA, "',' or ')'")


def parse_source(src: str) -> Program:
    return Parser(tokenize(src)).parse()
