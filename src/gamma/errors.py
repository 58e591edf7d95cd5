"""Rust-style colored diagnostic rendering."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, TextIO

import click

if TYPE_CHECKING:
    from gamma.source import SourceMap, Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# Stable diagnostic codes
SYNTAX_ERROR = "E001"
DUPLICATE_BINDING = "E003"
DEPRECATED_SYNTAX = "W002"
DUPLICATE_BINDING_NOTE = "N003"

# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"

_UNDERLINE = {"primary": "^", "secondary": "-"}


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str
    style: str = "primary"  # "primary" or "secondary"


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    file: str = "<stdin>"

    @property
    def primary_label(self) -> DiagnosticLabel | None:
        for label in self.labels:
            if label.style == "primary":
                return label
        return self.labels[0] if self.labels else None


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, source_map: SourceMap | None = None, *, color: bool = True) -> None:
        self.source_map = source_map
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[E001]: message
        lines.append(
            f"{self._c(color)}{sev.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        source_file = None
        if self.source_map is not None and diag.file in self.source_map:
            source_file = self.source_map.get(diag.file)

        for label in diag.labels:
            span = label.span
            if source_file is None:
                lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {diag.file}@{span}")
                if label.message:
                    lines.append(
                        f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                        f"{self._c(color)}{label.message}{self._c(_RESET)}"
                    )
                continue

            start_line, start_col = source_file.location(span.start)
            end_line, end_col = source_file.location(span.end)
            lines.append(
                f"  {self._c(_BLUE)}-->{self._c(_RESET)} {diag.file}:{start_line}:{start_col}"
            )
            gutter = f"{start_line:>4}"
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = source_file.line_at(start_line)
            lines.append(f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}")

            # Multi-line spans are underlined to the end of their first line
            if end_line != start_line:
                end_col = len(source_line) + 1
            caret_len = max(1, end_col - start_col)
            padding = " " * (start_col - 1)
            underline = _UNDERLINE.get(label.style, "^") * caret_len
            lines.append(
                f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                f"{padding}{self._c(color)}{underline}{self._c(_RESET)}"
                + (f" {self._c(color)}{label.message}{self._c(_RESET)}" if label.message else "")
            )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


class DiagnosticEmitter:
    """Writes rendered diagnostics to a stream, stderr by default."""

    def __init__(
        self,
        source_map: SourceMap | None = None,
        stream: TextIO | None = None,
        *,
        color: bool = True,
        warnings: bool = True,
    ) -> None:
        self.renderer = DiagnosticRenderer(source_map, color=color)
        self.stream = stream
        self.warnings = warnings

    def emit(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diag in diagnostics:
            if diag.severity == Severity.WARNING and not self.warnings:
                continue
            click.echo(
                self.renderer.render(diag),
                file=self.stream,
                err=True,
                color=self.renderer.color,
            )


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.severity == Severity.ERROR for d in diagnostics)
