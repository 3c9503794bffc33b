from typing import List

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    Diagnostic,
    DiagnosticSeverity,
    Position,
    Range,
)
from pygls.server import LanguageServer

from basm.compiler import run_pipeline
from basm.config.config import BASM_VERSION, KEYWORDS, PUNCTUATORS

server = LanguageServer("blockasm-server", f"v{BASM_VERSION}")


def _collect_diagnostics(source: str) -> List[Diagnostic]:
    """Runs the front end and converts the failing stage's diagnostics to LSP errors."""
    result = run_pipeline(source)
    diagnostics = []
    for d in result.diagnostics:
        line = d.line - 1 if d.line and d.line > 0 else 0
        diagnostics.append(
            Diagnostic(
                range=Range(start=Position(line=line, character=0), end=Position(line=line, character=100)),
                message=d.message,
                severity=DiagnosticSeverity.Error,
                source="basm",
            )
        )
    return diagnostics


def _validate(ls, params):
    text_doc = ls.workspace.get_document(params.text_document.uri)
    ls.publish_diagnostics(params.text_document.uri, _collect_diagnostics(text_doc.source))


@server.feature(TEXT_DOCUMENT_DID_OPEN)
async def did_open(ls, params):
    _validate(ls, params)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls, params):
    _validate(ls, params)


def _keyword_completions() -> List[CompletionItem]:
    items = [CompletionItem(label=keyword, kind=CompletionItemKind.Keyword) for keyword in sorted(KEYWORDS)]
    items.extend(CompletionItem(label=punctuator, kind=CompletionItemKind.Operator) for punctuator in sorted(PUNCTUATORS))
    return items


@server.feature(TEXT_DOCUMENT_COMPLETION)
def completions(params):
    return CompletionList(items=_keyword_completions(), is_incomplete=False)


def start_server():
    server.start_io()


if __name__ == "__main__":
    start_server()
