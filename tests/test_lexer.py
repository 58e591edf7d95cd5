"""Tests for the Gamma lexer."""

from __future__ import annotations

from gamma.lexer import Lexer, lex
from gamma.source import Span
from gamma.tokens import TokenKind


def tokens(source: str) -> list[tuple[TokenKind, str]]:
    """Helper: lex source and return (kind, literal) pairs."""
    return [(t.kind, t.literal) for t in Lexer(source).lex()]


def kinds(source: str) -> list[TokenKind]:
    """Helper: lex source and return just the token kinds."""
    return [t.kind for t in Lexer(source).lex()]


class TestLexerBasic:
    def test_empty_source(self):
        assert Lexer("").lex() == []

    def test_whitespace_only(self):
        assert Lexer(" \t\n\r\f ").lex() == []

    def test_identifier(self):
        assert tokens("hello") == [(TokenKind.IDENTIFIER, "hello")]

    def test_identifier_with_digits_and_underscores(self):
        assert tokens("0abc_9") == [(TokenKind.IDENTIFIER, "0abc_9")]

    def test_punctuation(self):
        assert kinds("; $ . = ( )") == [
            TokenKind.SEMICOLON,
            TokenKind.DOLLAR,
            TokenKind.PERIOD,
            TokenKind.ASSIGN,
            TokenKind.LPAREN,
            TokenKind.RPAREN,
        ]

    def test_right_arrow_is_longest_match(self):
        assert kinds("= =>") == [TokenKind.ASSIGN, TokenKind.RIGHT_ARROW]

    def test_right_arrow_without_spaces(self):
        assert tokens("x=>y") == [
            (TokenKind.IDENTIFIER, "x"),
            (TokenKind.RIGHT_ARROW, "=>"),
            (TokenKind.IDENTIFIER, "y"),
        ]

    def test_let_keyword(self):
        assert kinds("let") == [TokenKind.LET]

    def test_keyword_prefix_is_identifier(self):
        assert tokens("letter lambdax") == [
            (TokenKind.IDENTIFIER, "letter"),
            (TokenKind.IDENTIFIER, "lambdax"),
        ]

    def test_lambda_markers(self):
        for marker in ["lambda", "\\", "λ"]:
            assert tokens(marker) == [(TokenKind.LAMBDA, marker)]


class TestLexerSpans:
    def test_let_statement_spans(self):
        spans = [t.span for t in Lexer("let a = x;").lex()]
        assert spans == [Span(0, 3), Span(4, 5), Span(6, 7), Span(8, 9), Span(9, 10)]

    def test_spans_are_byte_offsets(self):
        toks = Lexer("λx").lex()
        assert toks[0].span == Span(0, 2)
        assert toks[1].span == Span(2, 3)

    def test_spans_across_lines(self):
        toks = Lexer("a\n  b").lex()
        assert toks[1].span == Span(4, 5)


class TestLexerErrors:
    def test_unknown_character(self):
        toks = Lexer("a # b").lex()
        assert [t.kind for t in toks] == [
            TokenKind.IDENTIFIER, TokenKind.ERROR, TokenKind.IDENTIFIER,
        ]
        assert toks[1].span == Span(2, 3)
        assert toks[1].literal == "#"

    def test_error_run_is_one_token(self):
        toks = Lexer("a@#!b").lex()
        assert [(t.kind, t.literal) for t in toks] == [
            (TokenKind.IDENTIFIER, "a"),
            (TokenKind.ERROR, "@#!"),
            (TokenKind.IDENTIFIER, "b"),
        ]
        assert toks[1].span == Span(1, 4)
        assert toks[2].span == Span(4, 5)

    def test_non_ascii_letter_is_error(self):
        toks = Lexer("é").lex()
        assert toks[0].kind == TokenKind.ERROR
        assert toks[0].span == Span(0, 2)
        assert toks[0].literal == "é"

    def test_vertical_tab_is_not_whitespace(self):
        assert kinds("\v") == [TokenKind.ERROR]

    def test_error_run_stops_at_known_token(self):
        assert kinds("%%;") == [TokenKind.ERROR, TokenKind.SEMICOLON]


class TestLexerStream:
    def test_stream_is_lazy(self):
        stream = lex("x y")
        first = next(stream)
        assert first.literal == "x"
        assert next(stream).literal == "y"
        assert next(stream, None) is None

    def test_fresh_iteration_restarts(self):
        lexer = Lexer("a b")
        assert [t.literal for t in lexer] == ["a", "b"]
        assert [t.literal for t in lexer] == ["a", "b"]

    def test_interleaved_passes_are_independent(self):
        lexer = Lexer("λa b c")
        first = lexer.tokens()
        second = lexer.tokens()
        assert next(first).span == Span(0, 2)
        assert next(first).span == Span(2, 3)
        assert next(second).literal == "λ"
        assert next(first).span == Span(4, 5)
        assert [t.span for t in second] == [Span(2, 3), Span(4, 5), Span(6, 7)]
