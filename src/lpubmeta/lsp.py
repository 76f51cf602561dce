"""Minimal LSP server for LPub meta-commands: diagnostics and keyword completion."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from lpubmeta import __version__
from lpubmeta.cli import scan
from lpubmeta.errors import Diagnostic as MetaDiagnostic
from lpubmeta.meta import Meta
from lpubmeta.tokens import Rc

server = LanguageServer(
    "lpubmeta-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)

# Keyword lookup only; never parses, so its values stay at their defaults
_keywords = Meta()


def _to_lsp(diag: MetaDiagnostic) -> Diagnostic:
    line = diag.where.line - 1
    text = diag.line.rstrip("\r\n")
    start = len(text) - len(text.lstrip())
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=start),
            end=Position(line=line, character=len(text)),
        ),
        message=diag.reason,
        severity=(
            DiagnosticSeverity.Warning if diag.rc == Rc.RANGE_ERROR else DiagnosticSeverity.Error
        ),
        source="lpubmeta",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run every meta-command through a fresh Meta and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    found: list[MetaDiagnostic] = []
    meta = Meta(reporter=found.append)
    for _ in scan(doc.source.splitlines(), filename, meta):
        pass

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=[_to_lsp(d) for d in found])
    )


def _complete(ls: LanguageServer, params: CompletionParams) -> CompletionList:
    """Keywords valid at the cursor of a type-0 line."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    lines = doc.source.splitlines()
    row = params.position.line
    line = lines[row][: params.position.character] if row < len(lines) else ""
    if line.split(maxsplit=1)[:1] != ["0"]:
        return CompletionList(is_incomplete=False, items=[])
    items = [
        CompletionItem(label=keyword, kind=CompletionItemKind.Keyword)
        for keyword in _keywords.complete(line)
    ]
    return CompletionList(is_incomplete=False, items=items)


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=[" "]))
def completion(ls: LanguageServer, params: CompletionParams) -> CompletionList:
    return _complete(ls, params)


def main() -> None:
    server.start_io()
