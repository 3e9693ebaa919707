"""Minimal LSP server for codemorph: marks code added since a baseline.

The text a document has when it is opened (or last saved) is its baseline.
On every change the baseline is diffed against the current text, and each
run of added tokens is published as an Information diagnostic.
"""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from codemorph import __version__
from codemorph.diff import diff_tokens
from codemorph.languages import resolve_language
from codemorph.lexer import tokenize
from codemorph.tokens import DiffStatus, DiffToken, TokenType

server = LanguageServer(
    "codemorph-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)

# uri -> baseline text
_baselines: dict[str, str] = {}

_PREVIEW_LEN = 40


def _added_runs(tokens: list[DiffToken]) -> list[list[DiffToken]]:
    """Group consecutive added tokens; runs of pure whitespace are dropped."""
    runs: list[list[DiffToken]] = []
    current: list[DiffToken] = []
    for tok in tokens:
        if tok.status == DiffStatus.ADDED:
            current.append(tok)
            continue
        if current:
            runs.append(current)
            current = []
    if current:
        runs.append(current)
    return [run for run in runs if any(t.type != TokenType.WHITESPACE for t in run)]


def _to_diagnostic(run: list[DiffToken]) -> Diagnostic:
    start = run[0].span.start
    end = run[-1].span.end
    text = "".join(t.content for t in run).strip()
    if len(text) > _PREVIEW_LEN:
        text = text[: _PREVIEW_LEN - 3] + "..."
    return Diagnostic(
        range=Range(
            start=Position(line=start.line - 1, character=start.column - 1),
            end=Position(line=end.line - 1, character=end.column - 1),
        ),
        message=f"added since baseline: {text}",
        severity=DiagnosticSeverity.Information,
        source="codemorph",
    )


def _record_baseline(ls: LanguageServer, uri: str) -> None:
    """Make the document's current text its baseline and clear diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    _baselines[uri] = doc.source
    ls.text_document_publish_diagnostics(PublishDiagnosticsParams(uri=uri, diagnostics=[]))


def _publish_changes(ls: LanguageServer, uri: str) -> None:
    """Diff the baseline against the current text and publish the additions."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    baseline = _baselines.setdefault(uri, source)

    language = resolve_language(doc.language_id, source)
    tokens = diff_tokens(tokenize(baseline, language), tokenize(source, language))
    diagnostics = [_to_diagnostic(run) for run in _added_runs(tokens)]

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _record_baseline(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _publish_changes(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_SAVE)
def did_save(ls: LanguageServer, params: DidSaveTextDocumentParams) -> None:
    _record_baseline(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LanguageServer, params: DidCloseTextDocumentParams) -> None:
    _baselines.pop(params.text_document.uri, None)


def main() -> None:
    server.start_io()
