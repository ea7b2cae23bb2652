"""Render lispwalk values back into source syntax."""

from __future__ import annotations

from io import StringIO
from types import ModuleType

from lispwalk import LispValue
from lispwalk.types.procedure import Procedure
from lispwalk.types.symbol import Symbol, QUOTE, QUASIQUOTE, UNQUOTE, UNQUOTE_SPLICING

READER_PREFIXES = {
    QUOTE: "'",
    QUASIQUOTE: "`",
    UNQUOTE: ",",
    UNQUOTE_SPLICING: ",@",
}

STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


def _write_string(buffer: StringIO, s: str) -> None:
    buffer.write('"')
    buffer.write("".join(STRING_ESCAPES.get(ch, ch) for ch in s))
    buffer.write('"')


def _write(buffer: StringIO, value: LispValue) -> None:
    if value is True:
        buffer.write("#t")
    elif value is False:
        buffer.write("#f")
    elif value is None:
        pass
    elif isinstance(value, Symbol):
        buffer.write(value.id)
    elif isinstance(value, str):
        _write_string(buffer, value)
    elif isinstance(value, list):
        if len(value) == 2 and isinstance(value[0], Symbol) and value[0] in READER_PREFIXES:
            buffer.write(READER_PREFIXES[value[0]])
            _write(buffer, value[1])
            return
        buffer.write("(")
        for i, item in enumerate(value):
            if i:
                buffer.write(" ")
            _write(buffer, item)
        buffer.write(")")
    elif isinstance(value, tuple) and len(value) == 2 and isinstance(value[0], list):
        head, tail = value
        buffer.write("(")
        for item in head:
            _write(buffer, item)
            buffer.write(" ")
        buffer.write(". ")
        _write(buffer, tail)
        buffer.write(")")
    elif isinstance(value, Procedure):
        buffer.write(repr(value))
    elif callable(value) and getattr(value, "lisp_builtin", False):
        buffer.write(f"#<builtin {value.lisp_name}>")
    elif isinstance(value, ModuleType):
        buffer.write(f"#<module {value.__name__}>")
    else:
        buffer.write(str(value))


def to_lisp_string(value: LispValue) -> str:
    """Return the source-syntax rendering of `value` ('' for no value)."""
    with StringIO() as buffer:
        _write(buffer, value)
        return buffer.getvalue()


def to_display_string(value: LispValue) -> str:
    """Like to_lisp_string, but strings are shown raw (used by display)."""
    if isinstance(value, str):
        return value
    return to_lisp_string(value)
