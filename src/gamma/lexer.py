"""Lexer for the Gamma language.

Produces a lazy stream of tokens from source text. Whitespace is skipped;
everything else, including input that matches no lexical class, becomes a
token so that span accounting never drifts.
"""

from __future__ import annotations

from collections.abc import Iterator

from gamma.source import Span
from gamma.tokens import KEYWORDS, SINGLE_CHAR_TOKENS, WHITESPACE, Token, TokenKind


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


def _starts_token(ch: str) -> bool:
    return ch in WHITESPACE or ch in SINGLE_CHAR_TOKENS or ch == "=" or _is_ident_char(ch)


def _width(text: str) -> int:
    """Number of UTF-8 bytes in ``text``."""
    return len(text.encode("utf-8"))


class Lexer:
    """Tokenizes Gamma source code.

    Each call to :meth:`tokens` starts an independent pass; the cursor lives
    in the generator, so several passes over one lexer may run side by side.
    """

    def __init__(self, source: str) -> None:
        self.source = source

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list."""
        return list(self.tokens())

    def tokens(self) -> Iterator[Token]:
        """Yield tokens one at a time, starting from the top of the source."""
        source = self.source
        pos = 0
        offset = 0
        while pos < len(source):
            ch = source[pos]
            if ch in WHITESPACE:
                pos += 1
                offset += _width(ch)
                continue
            start_pos = pos
            if ch == "=":
                pos += 1
                if source.startswith(">", pos):
                    pos += 1
                    kind = TokenKind.RIGHT_ARROW
                else:
                    kind = TokenKind.ASSIGN
            elif ch in SINGLE_CHAR_TOKENS:
                pos += 1
                kind = SINGLE_CHAR_TOKENS[ch]
            elif _is_ident_char(ch):
                while pos < len(source) and _is_ident_char(source[pos]):
                    pos += 1
                kind = KEYWORDS.get(source[start_pos:pos], TokenKind.IDENTIFIER)
            else:
                while pos < len(source) and not _starts_token(source[pos]):
                    pos += 1
                kind = TokenKind.ERROR
            literal = source[start_pos:pos]
            start = offset
            offset += _width(literal)
            yield Token(kind, Span(start, offset), literal)


def lex(source: str) -> Iterator[Token]:
    """Return a lazy token stream over ``source``."""
    return iter(Lexer(source))
