"""Shared test helpers for the Gamma test suite."""

from __future__ import annotations

from gamma.ast_nodes import Statement
from gamma.errors import Diagnostic, Severity
from gamma.parser import Parser


def parse_all(source: str, *, resync: bool = False) -> tuple[list[Statement], list[Diagnostic]]:
    """Parse source, return (statements, diagnostics)."""
    parser = Parser(source, "<test>", resync=resync)
    statements = parser.parse()
    return statements, parser.diagnostics


def parse(source: str) -> list[Statement]:
    """Parse source, asserting no errors. Returns the statements."""
    statements, diagnostics = parse_all(source)
    errors = [d for d in diagnostics if d.severity == Severity.ERROR]
    assert not errors, f"Unexpected errors: {[d.labels[0].message for d in errors]}"
    return statements


def parse_fails(source: str, label: str) -> list[Diagnostic]:
    """Parse source, asserting an error whose label contains ``label``."""
    __, diagnostics = parse_all(source)
    matching = [
        d for d in diagnostics
        if d.severity == Severity.ERROR and any(label in lb.message for lb in d.labels)
    ]
    assert matching, (
        f"Expected error {label!r} but got: "
        f"{[lb.message for d in diagnostics for lb in d.labels] or 'no diagnostics'}"
    )
    return matching
