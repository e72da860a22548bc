"""Character classes used by the lexer."""

from __future__ import annotations

# White_Space code points above ASCII, hard-coded.
_UNICODE_WHITESPACE = frozenset(
    [0x85, 0xA0, 0x1680, 0x2028, 0x2029, 0x202F, 0x205F, 0x3000] + list(range(0x2000, 0x200B))
)

PUNCTUATION = frozenset("=+-();,")


def is_whitespace(c: str) -> bool:
    if c == " " or "\x09" <= c <= "\x0d":
        return True
    return c > "\x7f" and ord(c) in _UNICODE_WHITESPACE


def is_identifier_continue(c: str) -> bool:
    return "0" <= c <= "9" or "A" <= c <= "Z" or "a" <= c <= "z"


def is_identifier_start(c: str) -> bool:
    return "A" <= c <= "Z" or "a" <= c <= "z"


def is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def is_expected(c: str) -> bool:
    return is_identifier_continue(c) or is_whitespace(c) or c in PUNCTUATION
