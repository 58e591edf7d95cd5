"""Binding evaluator for parsed Gamma programs.

No reduction happens here: ``let`` statements are entered into a binding
table in program order and redefinitions are reported.
"""

from __future__ import annotations

from dataclasses import dataclass

from gamma.ast_nodes import Expression, LetStmt, Statement
from gamma.errors import (
    DUPLICATE_BINDING,
    DUPLICATE_BINDING_NOTE,
    Diagnostic,
    DiagnosticEmitter,
    DiagnosticLabel,
    Severity,
    has_errors,
)
from gamma.source import Span


@dataclass(frozen=True)
class Binding:
    name_span: Span
    expression: Expression
    expression_span: Span


class Evaluator:
    """Walks statements and maintains the top-level binding table."""

    def __init__(
        self,
        statements: list[Statement],
        filename: str = "<stdin>",
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.statements = statements
        self.filename = filename
        self.emitter = emitter
        self.context: dict[str, Binding] = {}
        self.diagnostics: list[Diagnostic] = []

    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    def eval(self) -> dict[str, Binding]:
        for statement in self.statements:
            if isinstance(statement, LetStmt):
                self._eval_let(statement)
        return self.context

    def _eval_let(self, stmt: LetStmt) -> None:
        previous = self.context.get(stmt.name)
        if previous is not None:
            self._redefinition(stmt, previous)
        self.context[stmt.name] = Binding(stmt.name_span, stmt.expression, stmt.expression_span)

    def _redefinition(self, stmt: LetStmt, previous: Binding) -> None:
        diags = [
            Diagnostic(
                severity=Severity.ERROR,
                code=DUPLICATE_BINDING,
                message="trying to redefine existing variable",
                labels=[
                    DiagnosticLabel(stmt.name_span, f"trying to overwrite `{stmt.name}`"),
                    DiagnosticLabel(stmt.expression_span, "new value", style="secondary"),
                ],
                file=self.filename,
            ),
            Diagnostic(
                severity=Severity.NOTE,
                code=DUPLICATE_BINDING_NOTE,
                message=f"variable `{stmt.name}` was firstly defined here",
                labels=[DiagnosticLabel(previous.expression_span, "previous value")],
                file=self.filename,
            ),
        ]
        self.diagnostics.extend(diags)
        if self.emitter is not None:
            self.emitter.emit(diags)
