"""Gamma Language Server: pygls-based LSP for .gm files.

Provides diagnostics, document symbols and go-to-definition for ``let``
bindings via stdio transport.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from gamma import __version__
from gamma.ast_nodes import LetStmt, Statement
from gamma.errors import Diagnostic, Severity
from gamma.eval import Evaluator
from gamma.formatter import GammaFormatter
from gamma.lexer import Lexer
from gamma.parser import Parser
from gamma.source import SourceFile, SourceMap, Span
from gamma.tokens import Token, TokenKind

# ── Conversion helpers ────────────────────────────────────────────

_SEVERITY_MAP = {
    Severity.ERROR: lsp.DiagnosticSeverity.Error,
    Severity.WARNING: lsp.DiagnosticSeverity.Warning,
    Severity.NOTE: lsp.DiagnosticSeverity.Information,
}


def _utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def offset_to_position(offset: int, source_file: SourceFile) -> lsp.Position:
    """Convert a byte offset to an LSP Position counted in UTF-16 units."""
    offset = max(0, min(offset, len(source_file.data)))
    line, __ = source_file.location(offset)
    line_start = source_file.offset(line, 1)
    prefix = source_file.data[line_start:offset].decode("utf-8", errors="replace")
    return lsp.Position(line=line - 1, character=_utf16_len(prefix))


def position_to_offset(position: lsp.Position, source_file: SourceFile) -> int:
    """Convert an LSP Position back to a byte offset, clamped to its line."""
    text = source_file.line_at(position.line + 1)
    units = 0
    column = 0
    for ch in text:
        if units >= position.character:
            break
        units += _utf16_len(ch)
        column += 1
    return source_file.offset(position.line + 1, column + 1)


def span_to_range(span: Span, source_file: SourceFile) -> lsp.Range:
    """Convert a byte-offset Span to a 0-indexed LSP Range."""
    return lsp.Range(
        start=offset_to_position(span.start, source_file),
        end=offset_to_position(span.end, source_file),
    )


def _compile_diag(d: Diagnostic, source_file: SourceFile) -> lsp.Diagnostic:
    """Convert a gamma Diagnostic to an LSP Diagnostic."""
    label = d.primary_label
    span_range = lsp.Range(start=lsp.Position(0, 0), end=lsp.Position(0, 0))
    msg = f"[{d.code}] {d.message}"
    if label is not None:
        span_range = span_to_range(label.span, source_file)
        if label.message:
            msg += f": {label.message}"
    return lsp.Diagnostic(
        range=span_range,
        severity=_SEVERITY_MAP[d.severity],
        source="gamma",
        code=d.code,
        message=msg,
    )


# ── Per-document state ────────────────────────────────────────────


@dataclass
class DocumentState:
    """Cached analysis results for a single open document."""

    source: str = ""
    file: SourceFile | None = None
    tokens: list[Token] = field(default_factory=list)
    statements: list[Statement] = field(default_factory=list)
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)


# ── Server ────────────────────────────────────────────────────────

server = LanguageServer(
    "gamma-lsp", __version__,
    text_document_sync_kind=lsp.TextDocumentSyncKind.Full,
)
_state: dict[str, DocumentState] = {}


def _analyze(uri: str, source: str) -> DocumentState:
    """Run Parser → Evaluator, cache results, return state."""
    ds = DocumentState(source=source)
    parser = Parser(source, uri, SourceMap())
    ds.file = parser.file
    ds.statements = parser.parse()
    ds.tokens = Lexer(source).lex()

    evaluator = Evaluator(ds.statements, uri)
    evaluator.eval()

    ds.diagnostics = [
        _compile_diag(d, ds.file)
        for d in parser.diagnostics + evaluator.diagnostics
    ]
    _state[uri] = ds
    return ds


def _token_at(ds: DocumentState, offset: int) -> Token | None:
    """Return the identifier token under, or just before, a byte offset."""
    for tok in ds.tokens:
        if tok.kind == TokenKind.IDENTIFIER and tok.span.start <= offset <= tok.span.end:
            return tok
    return None


def _find_binding(statements: list[Statement], name: str, offset: int) -> LetStmt | None:
    """Return the latest binding of ``name`` before ``offset``, else the first one."""
    bindings = [s for s in statements if isinstance(s, LetStmt) and s.name == name]
    before = [s for s in bindings if s.span.start <= offset]
    if before:
        return before[-1]
    return bindings[0] if bindings else None


# ── LSP Feature Handlers ─────────────────────────────────────────


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: lsp.DidOpenTextDocumentParams) -> None:
    uri = params.text_document.uri
    ds = _analyze(uri, params.text_document.text)
    server.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(
        uri=uri,
        diagnostics=ds.diagnostics,
    ))


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: lsp.DidChangeTextDocumentParams) -> None:
    uri = params.text_document.uri
    # Full sync, take the last content change
    source = params.content_changes[-1].text if params.content_changes else ""
    ds = _analyze(uri, source)
    server.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(
        uri=uri,
        diagnostics=ds.diagnostics,
    ))


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: lsp.DidCloseTextDocumentParams) -> None:
    _state.pop(params.text_document.uri, None)


@server.feature(lsp.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(params: lsp.DocumentSymbolParams) -> list[lsp.DocumentSymbol]:
    ds = _state.get(params.text_document.uri)
    if ds is None or ds.file is None:
        return []
    formatter = GammaFormatter()
    symbols: list[lsp.DocumentSymbol] = []
    for stmt in ds.statements:
        if not isinstance(stmt, LetStmt):
            continue
        symbols.append(lsp.DocumentSymbol(
            name=stmt.name,
            kind=lsp.SymbolKind.Variable,
            range=span_to_range(stmt.span, ds.file),
            selection_range=span_to_range(stmt.name_span, ds.file),
            detail=formatter.format_expression(stmt.expression),
        ))
    return symbols


@server.feature(lsp.TEXT_DOCUMENT_DEFINITION)
def definition(params: lsp.DefinitionParams) -> lsp.Location | None:
    uri = params.text_document.uri
    ds = _state.get(uri)
    if ds is None or ds.file is None:
        return None
    pos = params.position
    offset = position_to_offset(pos, ds.file)
    tok = _token_at(ds, offset)
    if tok is None:
        return None
    binding = _find_binding(ds.statements, tok.literal, offset)
    if binding is None:
        return None
    return lsp.Location(uri=uri, range=span_to_range(binding.name_span, ds.file))


# ── Entry point ──────────────────────────────────────────────────


def main() -> None:
    """Start the Gamma language server on stdio."""
    server.start_io()
