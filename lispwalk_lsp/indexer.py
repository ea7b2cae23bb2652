"""
Lightweight indexer for lispwalk files without evaluating code.

We scan for top-level forms and build an index for:
- definitions: (define name ...) and (define (name args...) ...)
- imports: (import "module" [as alias]) to track Python module aliases
- the first reader error, located by line and column

The scanner is tolerant: it uses the reader's lexer and stops at the first
lexical error, so partial or incomplete buffers still produce an index.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from lispwalk.errors import LispSyntaxError
from lispwalk.reader.parser import lex, read_all
from lispwalk.evaluation.special_forms import SPECIAL_FORMS


@dataclass
class SymbolDef:
    name: str
    kind: str  # "var" | "function"
    line: int
    col: int


@dataclass
class ImportAlias:
    module: str
    alias: str


@dataclass
class ReaderProblem:
    message: str
    line: int
    col: int


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    imports: List[ImportAlias] = field(default_factory=list)
    paren_balance: int = 0
    has_unmatched_quote: bool = False
    error: Optional[ReaderProblem] = None


def position_from_offset(text: str, offset: int) -> Tuple[int, int]:
    # Return (line, col), 0-based
    line = text.count("\n", 0, offset)
    last_nl = text.rfind("\n", 0, offset)
    col = offset if last_nl == -1 else offset - last_nl - 1
    return line, col


def _scan_tokens(text: str, idx: DocumentIndex) -> List[Tuple[str, str, int]]:
    tokens = []
    try:
        for tok in lex(text):
            tokens.append(tok)
    except LispSyntaxError as ex:
        if "Unterminated string" in str(ex):
            idx.has_unmatched_quote = True
    return tokens


def _unquote(token: str) -> str:
    return token[1:-1] if token.startswith('"') and token.endswith('"') else token


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    tokens = _scan_tokens(text, idx)

    depth = 0
    for i, (kind, value, start) in enumerate(tokens):
        if kind == "rparen":
            # A stray ")" must not hide later top-level forms
            depth = max(depth - 1, 0)
            idx.paren_balance -= 1
            continue
        if kind != "lparen":
            continue
        idx.paren_balance += 1
        depth += 1
        # Only top-level forms introduce definitions and imports
        if depth != 1 or i + 1 >= len(tokens):
            continue
        head_kind, head, _ = tokens[i + 1]
        if head_kind != "symbol":
            continue
        rest = tokens[i + 2:i + 6]
        if head == "define" and rest:
            name_kind, name, name_pos = rest[0]
            def_kind = "var"
            if name_kind == "lparen" and len(rest) > 1 and rest[1][0] == "symbol":
                _, name, name_pos = rest[1]
                def_kind = "function"
            elif name_kind != "symbol":
                continue
            line, col = position_from_offset(text, name_pos)
            idx.symbols[name] = SymbolDef(name=name, kind=def_kind, line=line, col=col)
        elif head == "import" and rest and rest[0][0] in ("string", "symbol"):
            module = _unquote(rest[0][1])
            alias = module.rsplit(".", 1)[-1]
            if len(rest) >= 3 and rest[1][1] == "as" and rest[2][0] in ("string", "symbol"):
                alias = _unquote(rest[2][1])
            idx.imports.append(ImportAlias(module=module, alias=alias))

    try:
        for _ in read_all(text):
            pass
    except LispSyntaxError as ex:
        line, col = position_from_offset(text, ex.position or 0)
        idx.error = ReaderProblem(message=str(ex), line=line, col=col)

    return idx


# Signatures for quick hover/signature help without eval
BUILTIN_SIGNATURES: Dict[str, str] = {
    "+": "(+ num ...)",
    "-": "(- x y ...)",
    "*": "(* num ...)",
    "/": "(/ x y ...)",
    "quotient": "(quotient n d)",
    "remainder": "(remainder n d)",
    "modulo": "(modulo n d)",
    "=": "(= x y ...)",
    "<": "(< x y ...)",
    "cons": "(cons x xs)",
    "car": "(car pair)",
    "cdr": "(cdr pair)",
    "list": "(list x ...)",
    "length": "(length xs)",
    "append": "(append xs ...)",
    "apply": "(apply f arg ... args)",
    "map": "(map f xs ...)",
    "filter": "(filter pred xs)",
    "reduce": "(reduce f initial xs)",
    "equal?": "(equal? a b)",
    "eq?": "(eq? a b)",
    "display": "(display x)",
    "explain-import": "(explain-import module-name)",
    "define": "(define name value) | (define (name params) body ...)",
    "lambda": "(lambda (params) body ...)",
    "if": "(if test then else)",
    "set!": "(set! name value)",
    "let": "(let ((name value) ...) body ...)",
    "cond": "(cond (test expr ...) ... (else expr ...))",
    "quote": "(quote datum)",
    "import": "(import module as alias)",
}

SPECIAL_FORM_NAMES = sorted(str(s) for s in SPECIAL_FORMS)
