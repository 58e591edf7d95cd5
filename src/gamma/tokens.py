"""Token kinds and token representation for the Gamma lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gamma.source import Span


class TokenKind(Enum):
    SEMICOLON = auto()
    DOLLAR = auto()
    RIGHT_ARROW = auto()
    PERIOD = auto()
    ASSIGN = auto()
    LAMBDA = auto()
    LET = auto()
    LPAREN = auto()
    RPAREN = auto()
    IDENTIFIER = auto()

    # Unrecognised input
    ERROR = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    span: Span
    literal: str


KEYWORDS: dict[str, TokenKind] = {
    "let": TokenKind.LET,
    "lambda": TokenKind.LAMBDA,
}

SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    ";": TokenKind.SEMICOLON,
    "$": TokenKind.DOLLAR,
    ".": TokenKind.PERIOD,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "\\": TokenKind.LAMBDA,
    "λ": TokenKind.LAMBDA,
}

WHITESPACE = frozenset(" \t\n\r\f")
