"""
A minimal pygls-based Language Server for lispwalk.

Features:
- Text synchronization and document store
- Diagnostics: reader errors, unmatched parens, unmatched string quotes
- Hover: builtin signatures and locally defined symbols
- Completion: special forms, builtins, locals, imported module aliases
- Signature Help: for known builtins
- Document Symbols: from indexer

Note: We avoid evaluating the buffer. We build a static index per document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_SIGNATURE_HELP,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    ParameterInformation,
    Position,
    Range,
    SignatureHelp,
    SignatureHelpOptions,
    SignatureHelpParams,
    SignatureInformation,
    SymbolKind,
)
from pygls.server import LanguageServer

from lispwalk import __version__
from lispwalk_lsp.indexer import (
    BUILTIN_SIGNATURES,
    SPECIAL_FORM_NAMES,
    DocumentIndex,
    build_index,
)

logger = logging.getLogger(__name__)

SOURCE = "lispwalk-ls"
DELIMITERS = " \t()\n\r'`,\""


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class LispwalkLanguageServer(LanguageServer):
    CMD_NAME = "lispwalk-ls"

    def __init__(self):
        super().__init__(self.CMD_NAME, __version__)
        self.documents: Dict[str, DocumentState] = {}

    def update_document(self, uri: str, text: str) -> DocumentState:
        state = DocumentState(text=text, index=build_index(text))
        self.documents[uri] = state
        return state


ls = LispwalkLanguageServer()


# --- Text sync ---
@ls.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(server: LispwalkLanguageServer, params: DidOpenTextDocumentParams):
    uri = params.text_document.uri
    state = server.update_document(uri, params.text_document.text or "")
    server.publish_diagnostics(uri, collect_diagnostics(state))


@ls.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(server: LispwalkLanguageServer, params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    # Full-document sync: the last change carries the whole text
    document = server.workspace.get_text_document(uri)
    state = server.update_document(uri, document.source)
    server.publish_diagnostics(uri, collect_diagnostics(state))


@ls.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(server: LispwalkLanguageServer, params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    server.documents.pop(uri, None)
    server.publish_diagnostics(uri, [])


# --- Diagnostics ---
def _mk_range(line: int, col: int, length: int = 1) -> Range:
    return Range(start=Position(line=line, character=col), end=Position(line=line, character=col + length))


def collect_diagnostics(state: DocumentState) -> List[Diagnostic]:
    idx = state.index
    diags: List[Diagnostic] = []

    if idx.error is not None:
        diags.append(
            Diagnostic(
                range=_mk_range(idx.error.line, idx.error.col),
                message=idx.error.message,
                severity=DiagnosticSeverity.Error,
                source=SOURCE,
            )
        )

    if idx.paren_balance != 0:
        which = "unclosed '('" if idx.paren_balance > 0 else "extra ')'"
        diags.append(
            Diagnostic(
                range=_mk_range(0, 0),
                message=f"Unmatched parentheses detected ({abs(idx.paren_balance)} {which})",
                severity=DiagnosticSeverity.Warning,
                source=SOURCE,
            )
        )

    if idx.has_unmatched_quote:
        diags.append(
            Diagnostic(
                range=_mk_range(0, 0),
                message="Unmatched string quote detected",
                severity=DiagnosticSeverity.Warning,
                source=SOURCE,
            )
        )
    return diags


# --- Hover ---
@ls.feature(TEXT_DOCUMENT_HOVER)
def on_hover(server: LispwalkLanguageServer, params: HoverParams) -> Optional[Hover]:
    state = server.documents.get(params.text_document.uri)
    if not state:
        return None
    word = extract_word_at(state.text, params.position)
    contents = hover_text(state.index, word) if word else None
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


def hover_text(idx: DocumentIndex, word: str) -> Optional[str]:
    if word in BUILTIN_SIGNATURES:
        return BUILTIN_SIGNATURES[word]
    if word in idx.symbols:
        sdef = idx.symbols[word]
        return f"{word}: {sdef.kind} defined at {sdef.line + 1}:{sdef.col + 1}"
    if ":" in word:
        alias = word.split(":", 1)[0]
        for imp in idx.imports:
            if imp.alias == alias:
                return f"{word}: attribute of Python module {imp.module}"
    return None


# --- Completion ---
@ls.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=["("]))
def on_completion(server: LispwalkLanguageServer, params: CompletionParams) -> CompletionList:
    state = server.documents.get(params.text_document.uri)
    return CompletionList(is_incomplete=False, items=completion_items(state.index if state else None))


def completion_items(idx: Optional[DocumentIndex]) -> List[CompletionItem]:
    items = [CompletionItem(label=name, kind=CompletionItemKind.Keyword) for name in SPECIAL_FORM_NAMES]
    for name, sig in BUILTIN_SIGNATURES.items():
        if name not in SPECIAL_FORM_NAMES:
            items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=sig))
    if idx is not None:
        for name, sdef in idx.symbols.items():
            kind = CompletionItemKind.Function if sdef.kind == "function" else CompletionItemKind.Variable
            items.append(CompletionItem(label=name, kind=kind))
        for imp in idx.imports:
            items.append(CompletionItem(label=imp.alias, kind=CompletionItemKind.Module, detail=imp.module))
    return items


# --- Signature Help ---
@ls.feature(TEXT_DOCUMENT_SIGNATURE_HELP, SignatureHelpOptions(trigger_characters=["(", " "]))
def on_signature_help(server: LispwalkLanguageServer, params: SignatureHelpParams) -> Optional[SignatureHelp]:
    state = server.documents.get(params.text_document.uri)
    if not state:
        return None
    callee = extract_callee_name(get_line_prefix(state.text, params.position))
    sig = BUILTIN_SIGNATURES.get(callee) if callee else None
    if not sig:
        return None
    # Parameters are the tokens after the name inside the first parenthesised group
    params_text = sig[sig.find("(") + 1:sig.find(")")]
    parameters = [ParameterInformation(label=p) for p in params_text.split()[1:]]
    return SignatureHelp(
        signatures=[SignatureInformation(label=sig, parameters=parameters)],
        active_signature=0,
        active_parameter=0,
    )


# --- Document Symbols ---
@ls.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def on_document_symbols(server: LispwalkLanguageServer, params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = server.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = _mk_range(sdef.line, sdef.col, len(name))
        symbols.append(
            DocumentSymbol(
                name=name,
                kind=SymbolKind.Function if sdef.kind == "function" else SymbolKind.Variable,
                range=rng,
                selection_range=rng,
            )
        )
    return symbols


# --- Helpers ---
def get_line_prefix(text: str, pos: Position) -> str:
    # Return the text from start of line up to pos
    lines = text.splitlines(True)
    if pos.line >= len(lines):
        return ""
    return lines[pos.line][: pos.character]


def extract_word_at(text: str, pos: Position) -> Optional[str]:
    lines = text.splitlines(True)
    if pos.line >= len(lines):
        return None
    line = lines[pos.line]
    start = end = min(pos.character, len(line))
    while start > 0 and line[start - 1] not in DELIMITERS:
        start -= 1
    while end < len(line) and line[end] not in DELIMITERS:
        end += 1
    return line[start:end] or None


def extract_callee_name(prefix: str) -> Optional[str]:
    # find last '(' and take the token right after it
    lp = prefix.rfind("(")
    if lp == -1:
        return None
    parts = prefix[lp + 1:].split()
    return parts[0] if parts else None


def main() -> None:
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
