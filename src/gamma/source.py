"""Source text registry and span tracking for diagnostics.

Spans are half-open ``[start, end)`` ranges of UTF-8 byte offsets into the
original source. Line/column positions are only computed on demand, when a
diagnostic is rendered or handed to an editor.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """A half-open byte range within a source file."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.start > self.end:
            raise ValueError(f"invalid span {self.start}..{self.end}")

    def merge(self, other: Span) -> Span:
        """Return the smallest span covering both spans."""
        return Span(min(self.start, other.start), max(self.end, other.end))

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"


class SourceFile:
    """A registered source text with byte-offset to line/column mapping."""

    def __init__(self, name: str, content: str) -> None:
        self.name = name
        self.content = content
        self.data = content.encode("utf-8")
        self._line_starts = [0]
        for i, byte in enumerate(self.data):
            if byte == 0x0A:
                self._line_starts.append(i + 1)

    def location(self, offset: int) -> tuple[int, int]:
        """Return the 1-indexed (line, column) of a byte offset.

        Columns count characters, not bytes. Offsets past the end clamp to
        the end of the file.
        """
        offset = max(0, min(offset, len(self.data)))
        index = bisect_right(self._line_starts, offset) - 1
        line_start = self._line_starts[index]
        prefix = self.data[line_start:offset].decode("utf-8", errors="replace")
        return index + 1, len(prefix) + 1

    def offset(self, line: int, column: int) -> int:
        """Return the byte offset of a 1-indexed (line, column) position."""
        if line < 1:
            return 0
        if line > len(self._line_starts):
            return len(self.data)
        start = self._line_starts[line - 1]
        text = self._line_text(line)
        return start + len(text[: max(0, column - 1)].encode("utf-8"))

    def line_at(self, n: int) -> str:
        """Return the 1-indexed line, or empty string if out of range."""
        if 1 <= n <= len(self._line_starts):
            return self._line_text(n).rstrip("\r")
        return ""

    def _line_text(self, n: int) -> str:
        start = self._line_starts[n - 1]
        if n < len(self._line_starts):
            end = self._line_starts[n] - 1
        else:
            end = len(self.data)
        return self.data[start:end].decode("utf-8", errors="replace")


class SourceMap:
    """Registry of source texts, keyed by file name."""

    def __init__(self) -> None:
        self._files: dict[str, SourceFile] = {}

    def add_file(self, name: str, content: str) -> SourceFile:
        """Register ``content`` under ``name``, replacing any previous text."""
        source_file = SourceFile(name, content)
        self._files[name] = source_file
        return source_file

    def get(self, name: str) -> SourceFile:
        return self._files[name]

    def __contains__(self, name: object) -> bool:
        return name in self._files
