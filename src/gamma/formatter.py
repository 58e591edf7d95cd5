"""AST-walking pretty-printer for Gamma source code.

Produces canonical text: one statement per line, ``\\`` as the lambda
marker and ``=>`` as the separator. Parenthesised groups are kept exactly
where the user wrote them, since ``Paren`` nodes survive parsing.
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


class GammaFormatter:
    """Format parsed Gamma statements back to canonical source text."""

    def format(self, statements: list[Statement]) -> str:
        return "".join(f"{self._format_statement(stmt)}\n" for stmt in statements)

    def _format_statement(self, stmt: Statement) -> str:
        if isinstance(stmt, LetStmt):
            return f"let {stmt.name} = {self.format_expression(stmt.expression)};"
        if isinstance(stmt, ExpressionStmt):
            return f"{self.format_expression(stmt.expression)};"
        raise TypeError(f"not a statement: {stmt!r}")

    def format_expression(self, expr: Expression) -> str:
        if isinstance(expr, Var):
            return expr.name
        if isinstance(expr, Apply):
            return f"{self.format_expression(expr.lhs)} {self.format_expression(expr.rhs)}"
        if isinstance(expr, Paren):
            return f"({self.format_expression(expr.expression)})"
        if isinstance(expr, Abstraction):
            return f"\\{expr.name} => {self.format_expression(expr.expression)}"
        raise TypeError(f"not an expression: {expr!r}")
