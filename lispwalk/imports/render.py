"""Human-readable and JSON-friendly renderings of an ImportTrace."""

from __future__ import annotations

from dataclasses import asdict
from io import StringIO
from typing import Any

from lispwalk.imports.trace import ImportTrace, TraceStep

OUTCOME_TEXT = {
    "hit": "hit",
    "miss": "miss",
    "blocked": "blocked",
    "skipped": "skipped",
    "declined": "declined",
    "found": "found it",
    "walking": "walking",
    "portion": "namespace portion",
    "accepted": "accepted",
    "cache-hit": "importer cache hit",
    "cache-miss": "importer cache miss",
    "no-finder": "no finder",
    "not-a-package": "not a package",
    "missing": "missing",
    "error": "raised",
}


def _step_line(number: int, step: TraceStep) -> str:
    indent = "   " * step.depth
    outcome = OUTCOME_TEXT.get(step.outcome, step.outcome)
    line = f"{indent}{number:>2}. [{step.kind}] {step.subject}: {outcome}"
    if step.detail:
        line += f" ({step.detail})"
    return line


def _summary(trace: ImportTrace) -> str:
    if trace.from_cache:
        return "result: already imported (sys.modules)"
    if not trace.found:
        return f"result: not found; import {trace.fullname} raises ModuleNotFoundError"
    kind = "namespace package" if trace.is_namespace else ("package" if trace.is_package else "module")
    origin = f", origin {trace.origin}" if trace.origin else ""
    return f"result: {kind} loaded by {trace.loader_name}{origin}"


def render_text(trace: ImportTrace) -> str:
    """Numbered walkthrough of every step, parent traces first."""
    with StringIO() as buffer:
        if trace.parent is not None:
            buffer.write(render_text(trace.parent))
            buffer.write("\n\n")
        buffer.write(f"import resolution for {trace.fullname!r}\n")
        for i, step in enumerate(trace.steps, 1):
            buffer.write(_step_line(i, step))
            buffer.write("\n")
        buffer.write(_summary(trace))
        return buffer.getvalue()


def trace_to_dict(trace: ImportTrace) -> dict[str, Any]:
    return {
        "name": trace.fullname,
        "found": trace.found,
        "from_cache": trace.from_cache,
        "loader": trace.loader_name,
        "origin": trace.origin,
        "is_package": trace.is_package,
        "is_namespace": trace.is_namespace,
        "search_path": trace.search_path,
        "steps": [asdict(step) for step in trace.steps],
        "parent": trace_to_dict(trace.parent) if trace.parent is not None else None,
    }
