"""AST node definitions for the Gamma language.

An expression node does not store its own overall span; the parent records
it alongside the child (``lhs_span``, ``expression_span``, ...).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from gamma.source import Span

# ── Expressions ──────────────────────────────────────────────────


@dataclass(frozen=True)
class Var:
    name: str
    name_span: Span


@dataclass(frozen=True)
class Apply:
    lhs: Expression
    lhs_span: Span
    rhs: Expression
    rhs_span: Span


@dataclass(frozen=True)
class Paren:
    expression: Expression
    expression_span: Span


@dataclass(frozen=True)
class Abstraction:
    name: str
    name_span: Span
    expression: Expression
    expression_span: Span


Expression = Union[Var, Apply, Paren, Abstraction]


# ── Statements ───────────────────────────────────────────────────


@dataclass(frozen=True)
class ExpressionStmt:
    expression: Expression
    expression_span: Span
    span: Span


@dataclass(frozen=True)
class LetStmt:
    name: str
    name_span: Span
    expression: Expression
    expression_span: Span
    span: Span


Statement = Union[ExpressionStmt, LetStmt]

AST = list[Statement]
