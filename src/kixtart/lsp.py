"""Minimal LSP server for KiXtart: macro diagnostics, formatting and symbols."""

from __future__ import annotations

import logging

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_FORMATTING,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentFormattingParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    SymbolKind,
    TextDocumentSyncKind,
    TextEdit,
)
from pygls.lsp.server import LanguageServer

from kixtart.buffer import Buffer
from kixtart.errors import ConfigError, collect_warnings
from kixtart.index import IndexEntry, build_index
from kixtart.indent import DEFAULT_INDENT_OFFSET, reindent

logger = logging.getLogger(__name__)

server = LanguageServer("kixtart-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)


def _position(buffer: Buffer, offset: int) -> Position:
    line = buffer.line_of(offset)
    return Position(line=line, character=offset - buffer.line_start(line))


def _validate(ls: LanguageServer, uri: str) -> None:
    """Check the document for malformed macros and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics: list[Diagnostic] = []

    for warning in collect_warnings(Buffer(doc.source)):
        line = warning.line - 1
        col = warning.column - 1
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + warning.length),
                ),
                message=warning.message,
                severity=DiagnosticSeverity.Warning,
                source="kixtart",
            )
        )

    logger.debug("publishing %d diagnostics for %s", len(diagnostics), uri)
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def _format(ls: LanguageServer, params: DocumentFormattingParams) -> list[TextEdit]:
    """Reindent the whole document with the client's tab size as the offset."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    source = doc.source
    try:
        formatted = reindent(source, params.options.tab_size)
    except ConfigError as exc:
        logger.warning("tab size rejected (%s), using %d", exc.message, DEFAULT_INDENT_OFFSET)
        formatted = reindent(source, DEFAULT_INDENT_OFFSET)
    if formatted == source:
        return []
    buffer = Buffer(source)
    return [
        TextEdit(
            range=Range(start=Position(line=0, character=0), end=_position(buffer, len(source))),
            new_text=formatted,
        )
    ]


def _symbol(buffer: Buffer, entry: IndexEntry, kind: SymbolKind, length: int) -> DocumentSymbol:
    line = buffer.line_of(entry.position)
    start = _position(buffer, entry.position)
    line_range = Range(
        start=Position(line=line, character=0),
        end=Position(line=line, character=buffer.line_end(line) - buffer.line_start(line)),
    )
    return DocumentSymbol(
        name=entry.name,
        kind=kind,
        range=line_range,
        selection_range=Range(
            start=start,
            end=Position(line=start.line, character=start.character + length),
        ),
    )


def _symbols(ls: LanguageServer, uri: str) -> list[DocumentSymbol]:
    """Return the function declarations and labels of the document."""
    doc = ls.workspace.get_text_document(uri)
    buffer = Buffer(doc.source)
    index = build_index(buffer)
    symbols = [_symbol(buffer, e, SymbolKind.Function, len(e.name)) for e in index.functions]
    symbols.extend(_symbol(buffer, e, SymbolKind.Key, len(e.name) + 1) for e in index.labels)
    symbols.sort(key=lambda s: (s.range.start.line, s.selection_range.start.character))
    return symbols


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_FORMATTING)
def formatting(ls: LanguageServer, params: DocumentFormattingParams) -> list[TextEdit]:
    return _format(ls, params)


@server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(ls: LanguageServer, params: DocumentSymbolParams) -> list[DocumentSymbol]:
    return _symbols(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
