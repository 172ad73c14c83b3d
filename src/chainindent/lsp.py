"""Minimal LSP server for chainindent: diagnostics and whole-document formatting."""

from __future__ import annotations

from pathlib import Path

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_FORMATTING,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentFormattingParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
    TextEdit,
)
from pygls.lsp.server import LanguageServer
from pygls.uris import to_fs_path

from chainindent.buffer import TokenBuffer
from chainindent.config import FixerConfig, config_from_mapping, load_config_file
from chainindent.errors import ConfigError, LexError, StructureError
from chainindent.fixer import Adjustment, MethodChainingIndentationFixer
from chainindent.lexer import tokenize

server = LanguageServer("chainindent-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)


def _config_for(uri: str) -> FixerConfig:
    """Pick up chainindent.toml next to the document, if there is one."""
    path = to_fs_path(uri)
    if not path:
        return FixerConfig()
    return config_from_mapping(load_config_file(None, Path(path).parent))


def _fix(source: str, uri: str) -> tuple[TokenBuffer, list[Adjustment]]:
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    tokens = TokenBuffer(tokenize(source, filename), source)
    fixer = MethodChainingIndentationFixer(_config_for(uri))
    if not fixer.is_candidate(tokens):
        return tokens, []
    return tokens, fixer.fix(tokens)


def _point(line: int, column: int) -> Position:
    # 1-based source positions -> 0-based LSP positions
    return Position(line=line - 1, character=column - 1)


def _adjustment_diagnostic(adj: Adjustment) -> Diagnostic | None:
    if adj.span is None:
        return None
    if adj.observed is None:
        message = "method chain link should start on its own line"
    else:
        message = f"method chain link indented {len(adj.observed)} columns, expected {len(adj.expected)}"
    return Diagnostic(
        range=Range(
            start=_point(adj.span.start.line, adj.span.start.column),
            end=_point(adj.span.end.line, adj.span.end.column),
        ),
        message=message,
        severity=DiagnosticSeverity.Warning,
        source="chainindent",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the fixer on the document and publish one diagnostic per re-indented link."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics: list[Diagnostic] = []

    try:
        _, adjustments = _fix(doc.source, uri)
    except LexError as exc:
        start = _point(exc.position.line, exc.position.column)
        diagnostics.append(
            Diagnostic(
                range=Range(start=start, end=Position(line=start.line, character=start.character + 1)),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="chainindent",
            )
        )
    except StructureError as exc:
        if exc.span is not None:
            rng = Range(
                start=_point(exc.span.start.line, exc.span.start.column),
                end=_point(exc.span.end.line, exc.span.end.column),
            )
        else:
            rng = Range(start=Position(line=0, character=0), end=Position(line=0, character=0))
        diagnostics.append(
            Diagnostic(range=rng, message=exc.message, severity=DiagnosticSeverity.Error, source="chainindent")
        )
    except ConfigError as exc:
        diagnostics.append(
            Diagnostic(
                range=Range(start=Position(line=0, character=0), end=Position(line=0, character=0)),
                message=str(exc),
                severity=DiagnosticSeverity.Error,
                source="chainindent",
            )
        )
    else:
        for adj in adjustments:
            diag = _adjustment_diagnostic(adj)
            if diag is not None:
                diagnostics.append(diag)

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def _document_end(source: str) -> Position:
    lines = source.splitlines(keepends=True)
    if not lines:
        return Position(line=0, character=0)
    if lines[-1].endswith(("\n", "\r")):
        return Position(line=len(lines), character=0)
    return Position(line=len(lines) - 1, character=len(lines[-1]))


def _format(ls: LanguageServer, uri: str) -> list[TextEdit]:
    """Return a single whole-document edit, or no edits when nothing changes."""
    source = ls.workspace.get_text_document(uri).source
    try:
        tokens, _ = _fix(source, uri)
    except (LexError, StructureError, ConfigError):
        # Diagnostics already report these; formatting just declines
        return []

    fixed = tokens.generate_code()
    if fixed == source:
        return []
    return [
        TextEdit(
            range=Range(start=Position(line=0, character=0), end=_document_end(source)),
            new_text=fixed,
        )
    ]


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_FORMATTING)
def formatting(ls: LanguageServer, params: DocumentFormattingParams) -> list[TextEdit]:
    return _format(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
