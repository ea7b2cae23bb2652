from __future__ import annotations

import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, TextIO

# Per-thread (and per-task) so concurrent REPL clients never share a stream
_current_output: ContextVar[Optional[TextIO]] = ContextVar("lispwalk_output", default=None)


def get_output() -> TextIO:
    """Stream that display and newline write to; sys.stdout unless redirected."""
    return _current_output.get() or sys.stdout


@contextmanager
def output_to(stream: Optional[TextIO]) -> Iterator[Optional[TextIO]]:
    token = _current_output.set(stream)
    try:
        yield stream
    finally:
        _current_output.reset(token)
