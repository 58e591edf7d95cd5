"""Parser for the Gamma language.

Transforms the lazy token stream into a list of statements using recursive
descent with a single token of lookahead. Sub-parsers return ``None`` when
they fail; by then the failure has been reported as a diagnostic and the
caller abandons the current statement.
"""

from __future__ import annotations

from gamma.ast_nodes import (
    Abstraction,
    Apply,
    Expression,
    ExpressionStmt,
    LetStmt,
    Paren,
    Statement,
    Var,
)
from gamma.errors import (
    DEPRECATED_SYNTAX,
    SYNTAX_ERROR,
    Diagnostic,
    DiagnosticEmitter,
    DiagnosticLabel,
    Severity,
    has_errors,
)
from gamma.lexer import lex
from gamma.source import SourceMap, Span
from gamma.tokens import Token, TokenKind

# An expression together with the span its parent records for it
ParsedExpression = tuple[Expression, Span]

_ATOM_STARTS = frozenset({TokenKind.IDENTIFIER, TokenKind.LPAREN})

# A stray ')' goes through application parsing so that `()` reports an
# empty expression rather than a bad expression start.
_APPLICATION_STARTS = _ATOM_STARTS | {TokenKind.RPAREN}

# Nested lambdas and parentheses are parsed recursively
MAX_NESTING = 200


class _NestingTooDeep(Exception):
    pass


class Parser:
    """Parses Gamma source text into a list of statements."""

    def __init__(
        self,
        source: str,
        filename: str = "<stdin>",
        source_map: SourceMap | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
        resync: bool = False,
    ) -> None:
        self.source_map = source_map if source_map is not None else SourceMap()
        self.filename = filename
        self.file = self.source_map.add_file(filename, source)
        self.emitter = emitter
        self.resync = resync
        self._depth = 0
        self.diagnostics: list[Diagnostic] = []
        self.token: Token | None = None
        self.previous_token: Token | None = None
        self._tokens = lex(source)
        self._advance()

    @property
    def previous_token_span(self) -> Span | None:
        if self.previous_token is None:
            return None
        return self.previous_token.span

    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    # ── Token access ─────────────────────────────────────────────

    def _advance(self) -> None:
        self.previous_token = self.token
        self.token = next(self._tokens, None)

    def _at(self, kind: TokenKind) -> bool:
        return self.token is not None and self.token.kind == kind

    def _check_token(self, expected: TokenKind, message: str) -> bool:
        """Report and skip the lookahead unless it is ``expected``.

        On success nothing is consumed; the caller advances explicitly.
        """
        if self.token is None:
            self._unexpected_eof()
            return False
        if self.token.kind != expected:
            self._unexpected_token(message)
            self._advance()
            return False
        return True

    def _synchronize(self) -> None:
        """Skip tokens until just past the next ';'."""
        while self.token is not None:
            if self.previous_token is not None and self.previous_token.kind == TokenKind.SEMICOLON:
                return
            self._advance()

    # ── Diagnostics ──────────────────────────────────────────────

    def _report(self, diag: Diagnostic) -> None:
        self.diagnostics.append(diag)
        if self.emitter is not None:
            self.emitter.emit([diag])

    def _error(self, label: str, span: Span) -> None:
        self._report(
            Diagnostic(
                severity=Severity.ERROR,
                code=SYNTAX_ERROR,
                message="parsing error found",
                labels=[DiagnosticLabel(span=span, message=label)],
                file=self.filename,
            )
        )

    def _unexpected_eof(self) -> None:
        span = self.previous_token_span
        if span is None:
            span = Span(0, min(1, len(self.file.data)))
        self._error("unexpected end of file/input", span)

    def _unexpected_token(self, message: str) -> None:
        assert self.token is not None
        self._error(message, self.token.span)

    def _too_deep(self) -> None:
        """Report an over-nested expression and skip past its statement."""
        if self.token is None:
            self._unexpected_eof()
            return
        self._error("expression is nested too deeply", self.token.span)
        self._synchronize()

    def _warn_legacy_separator(self) -> None:
        assert self.token is not None
        self._report(
            Diagnostic(
                severity=Severity.WARNING,
                code=DEPRECATED_SYNTAX,
                message="deprecated syntax",
                labels=[
                    DiagnosticLabel(
                        span=self.token.span,
                        message="help: consider using '=>' instead of '.'",
                    )
                ],
                file=self.filename,
            )
        )

    # ── Statements ───────────────────────────────────────────────

    def parse(self) -> list[Statement]:
        """Parse every statement; failed statements are dropped."""
        statements: list[Statement] = []
        while self.token is not None:
            statement = self.parse_statement()
            if statement is not None:
                statements.append(statement)
            elif self.resync:
                self._synchronize()
        return statements

    def parse_statement(self) -> Statement | None:
        if self.token is None:
            self._unexpected_eof()
            return None
        try:
            if self.token.kind == TokenKind.LET:
                return self._parse_let_statement()
            return self._parse_expression_statement()
        except (_NestingTooDeep, RecursionError):
            self._too_deep()
            return None

    def _parse_let_statement(self) -> LetStmt | None:
        assert self.token is not None
        start = self.token.span.start
        self._advance()  # 'let'

        if not self._check_token(
            TokenKind.IDENTIFIER, "expected name of variable in let statement"
        ):
            return None
        name_token = self.token
        self._advance()

        if not self._check_token(
            TokenKind.ASSIGN, "help: consider adding '=' in the let statement"
        ):
            return None
        self._advance()

        parsed = self._parse_expression()
        if parsed is None:
            return None
        expression, expression_span = parsed

        if not self._check_token(
            TokenKind.SEMICOLON, "help: consider adding ';' at the end of the let statement"
        ):
            return None
        end = self.token.span.end
        self._advance()

        return LetStmt(
            name=name_token.literal,
            name_span=name_token.span,
            expression=expression,
            expression_span=expression_span,
            span=Span(start, end),
        )

    def _parse_expression_statement(self) -> ExpressionStmt | None:
        parsed = self._parse_expression()
        if parsed is None:
            return None
        expression, expression_span = parsed

        if not self._check_token(
            TokenKind.SEMICOLON, "help: consider adding ';' at the end of expression statement"
        ):
            return None
        end = self.token.span.end
        self._advance()

        return ExpressionStmt(
            expression=expression,
            expression_span=expression_span,
            span=Span(expression_span.start, end),
        )

    # ── Expressions ──────────────────────────────────────────────

    def _parse_expression(self) -> ParsedExpression | None:
        if self.token is None:
            self._unexpected_eof()
            return None
        if self._depth >= MAX_NESTING:
            raise _NestingTooDeep
        self._depth += 1
        try:
            if self.token.kind == TokenKind.LAMBDA:
                return self._parse_abstraction()
            if self.token.kind in _APPLICATION_STARTS:
                return self._parse_application()
        finally:
            self._depth -= 1

        self._unexpected_token("expression must start with identifier, 'lambda', '\\' or '('")
        self._advance()
        return None

    def _parse_abstraction(self) -> ParsedExpression | None:
        assert self.token is not None
        start = self.token.span.start
        self._advance()  # lambda marker

        if not self._check_token(TokenKind.IDENTIFIER, "expected argument name"):
            return None
        name_token = self.token
        self._advance()

        if self._at(TokenKind.PERIOD):
            self._warn_legacy_separator()
        elif not self._check_token(TokenKind.RIGHT_ARROW, "help: consider adding '=>'"):
            return None
        self._advance()

        parsed = self._parse_expression()
        if parsed is None:
            return None
        expression, expression_span = parsed

        # The abstraction ends where the next token starts
        if self.token is None:
            self._unexpected_eof()
            return None
        end = self.token.span.start

        return (
            Abstraction(
                name=name_token.literal,
                name_span=name_token.span,
                expression=expression,
                expression_span=expression_span,
            ),
            Span(start, end),
        )

    def _parse_application(self) -> ParsedExpression | None:
        """Parse a run of atoms, folding two or more into left-nested Apply."""
        atoms: list[ParsedExpression] = []
        while self.token is not None and self.token.kind in _ATOM_STARTS:
            if self.token.kind == TokenKind.IDENTIFIER:
                atoms.append(self._parse_var())
                continue
            parsed = self._parse_paren()
            if parsed is None:
                return None
            atoms.append(parsed)

        if not atoms:
            if self.token is None:
                self._unexpected_eof()
            else:
                self._unexpected_token("do not write empty expressions")
                self._advance()
            return None

        expression, span = atoms[0]
        for rhs, rhs_span in atoms[1:]:
            expression = Apply(lhs=expression, lhs_span=span, rhs=rhs, rhs_span=rhs_span)
            span = span.merge(rhs_span)
        return expression, span

    def _parse_var(self) -> ParsedExpression:
        assert self.token is not None
        token = self.token
        self._advance()
        return Var(name=token.literal, name_span=token.span), token.span

    def _parse_paren(self) -> ParsedExpression | None:
        assert self.token is not None
        start = self.token.span.start
        self._advance()  # '('

        parsed = self._parse_expression()
        if parsed is None:
            return None
        expression, expression_span = parsed

        if not self._check_token(
            TokenKind.RPAREN, "help: consider adding ')' at the end of parenthesised expression"
        ):
            return None
        self._advance()

        # The group ends where the next token starts, so one must exist
        if self.token is None:
            self._unexpected_eof()
            return None
        end = self.token.span.start

        return Paren(expression=expression, expression_span=expression_span), Span(start, end)
