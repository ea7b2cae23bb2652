"""
  Lisp Reader: lexer and parser

- Streaming, lazy parsing
- Emits Python primitives instead of cons cells:

    - lists -> Python list
    - dotted lists -> (list_part, tail); a list tail is spliced into a proper list
    - symbols -> Symbol
    - strings -> str
    - numbers -> int/float
    - #t / #f -> True / False
    - quote forms -> [Symbol("quote"), expr], etc.

Every error raised here is a LispSyntaxError carrying the offset of the
offending token, so callers (REPL, editor diagnostics) can point at it.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from lispwalk import SExpression
from lispwalk.errors import LispSyntaxError
from lispwalk.types.symbol import Symbol, QUOTE, QUASIQUOTE, UNQUOTE, UNQUOTE_SPLICING
from lispwalk.types.dotted import make_dotted


TOKEN_RE = re.compile(
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<quote>[\'`])"  # ' and `
    r"|(?P<unquote>,@|,)"  # , and ,@
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r'|(?P<string>"(?:\\.|[^\\"])*")'  # double-quoted strings
    r'|(?P<unterminated>"(?:\\.|[^\\"])*\\?\Z)'  # string running to end of input
    r'|(?P<symbol>[^\s()\'"`,;]+)',  # fallback: atoms
    re.DOTALL,
)

WHITESPACE_RE = re.compile(r"\s+")
INT_RE = re.compile(r"[+-]?\d+\Z")
FLOAT_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?\Z")

QUOTE_FORMS: dict[str, Symbol] = {
    "'": QUOTE,
    "`": QUASIQUOTE,
    ",": UNQUOTE,
    ",@": UNQUOTE_SPLICING,
}

STRING_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
}

Token = tuple[str, str, int]


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields (token_type, token_value, offset) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        ws = WHITESPACE_RE.match(source, pos)
        if ws:
            pos = ws.end()
            continue
        m = TOKEN_RE.match(source, pos)
        if not m:
            raise LispSyntaxError(f"Unexpected character {source[pos]!r}", pos)
        kind = m.lastgroup
        if kind == "unterminated":
            raise LispSyntaxError("Unterminated string", pos, incomplete=True)
        if kind != "comment":
            yield kind, m.group(kind), pos
        pos = m.end()


def decode_string(token: str) -> str:
    """Strip the quotes from a string token and resolve backslash escapes."""
    body = token[1:-1]
    if "\\" not in body:
        return body
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            out.append(STRING_ESCAPES.get(nxt, nxt))
            i += 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def parse_atom(token: str) -> SExpression:
    if token == "#t":
        return True
    if token == "#f":
        return False
    if INT_RE.match(token):
        return int(token)
    if FLOAT_RE.match(token):
        return float(token)
    return Symbol(token)


class TokenStream:
    def __init__(self, token_iter: Iterator[Token]):
        self.tokens = iter(token_iter)
        self.buffer: list[Token] = []
        self.last_pos = 0

    def peek(self) -> tuple[Optional[str], Optional[str], int]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None, self.last_pos
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str], int]:
        tok = self.buffer.pop(0) if self.buffer else next(self.tokens, (None, None, self.last_pos))
        self.last_pos = tok[2]
        return tok

    def parse_expr(self) -> SExpression:
        """Parse one form, or return None at end of input."""
        tok_type, tok_val, pos = self.peek()
        if tok_type is None:
            return None

        if tok_type == "symbol":
            self.advance()
            if tok_val == ".":
                raise LispSyntaxError("Unexpected '.' outside of a list", pos)
            return parse_atom(tok_val)

        if tok_type == "string":
            self.advance()
            return decode_string(tok_val)

        # Quote forms
        if tok_type in ("quote", "unquote"):
            self.advance()
            nxt = self.peek()[0]
            if nxt in (None, "rparen"):
                raise LispSyntaxError(
                    f"Expected an expression after {tok_val!r}", pos, incomplete=nxt is None
                )
            return [QUOTE_FORMS[tok_val], self.parse_expr()]

        # List or dotted list
        if tok_type == "lparen":
            self.advance()
            return self._parse_list(pos)

        if tok_type == "rparen":
            raise LispSyntaxError("Unexpected ')'", pos)

        raise LispSyntaxError(f"Unknown token: {tok_type} {tok_val}", pos)

    def _parse_list(self, open_pos: int) -> SExpression:
        items: list[SExpression] = []
        while True:
            tok_type, tok_val, pos = self.peek()
            if tok_type is None:
                raise LispSyntaxError("Unmatched '('", open_pos, incomplete=True)
            if tok_type == "rparen":
                self.advance()
                return items
            if tok_type == "symbol" and tok_val == ".":
                if not items:
                    raise LispSyntaxError("Dotted list needs at least one leading element", pos)
                self.advance()
                nxt = self.peek()[0]
                if nxt in (None, "rparen"):
                    raise LispSyntaxError(
                        "Expected an expression after '.'", pos, incomplete=nxt is None
                    )
                cdr_expr = self.parse_expr()
                tok_type, _, end_pos = self.peek()
                if tok_type != "rparen":
                    raise LispSyntaxError(
                        "Expected ')' after dotted cdr", end_pos, incomplete=tok_type is None
                    )
                self.advance()
                return make_dotted(items, cdr_expr)
            items.append(self.parse_expr())

    def parse_all(self) -> Iterator[SExpression]:
        while self.peek()[0] is not None:
            yield self.parse_expr()


def read_all(source: str) -> Iterator[SExpression]:
    """Yield every form in `source`."""
    return TokenStream(lex(source)).parse_all()


def read(source: str) -> SExpression:
    """Return the first form in `source`; LispSyntaxError if there is none."""
    expr = TokenStream(lex(source)).parse_expr()
    if expr is None:
        raise LispSyntaxError("Unexpected end of input", len(source))
    return expr

