"""Explain how the Python runtime resolves an import.

Usage::

    from lispwalk.imports import trace_import, render_text
    print(render_text(trace_import("json.decoder", use_cache=False)))
"""

from lispwalk.imports.trace import ImportTrace, TraceStep, trace_import
from lispwalk.imports.render import render_text, trace_to_dict

__all__ = ["ImportTrace", "TraceStep", "trace_import", "render_text", "trace_to_dict"]
