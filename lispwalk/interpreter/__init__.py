from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Literal, TextIO

from lispwalk import SExpression, LispValue
from lispwalk.config import get_recursion_limit
from lispwalk.reader.parser import read_all
from lispwalk.runtime_context import output_to
from lispwalk.types.environment import Environment
from lispwalk.builtin.env_builtin import register
from lispwalk.evaluation.evaluator import evaluate

logger = logging.getLogger(__name__)


def ensure_recursion_limit() -> None:
    """Raise Python's recursion limit to LISPWALK_RECURSION_LIMIT (never lower it).

    Each non-tail Lisp call costs several Python frames, so the default limit
    of 1000 would stop ordinary recursion a little over a hundred calls deep.
    """
    limit = get_recursion_limit()
    if sys.getrecursionlimit() < limit:
        logger.debug("raising recursion limit from %d to %d", sys.getrecursionlimit(), limit)
        sys.setrecursionlimit(limit)


class Interpreter:
    """
    Orchestrates reading and evaluating lispwalk code.
    Maintains one global Environment across calls, so definitions persist.
    Output from display and newline goes to `output` (sys.stdout when None).
    """

    def __init__(
        self,
        prelude: str | None | Literal['auto'] = 'auto',
        eval_fn: Callable[[SExpression, Environment], LispValue] | None = None,
        output: TextIO | None = None,
    ):
        ensure_recursion_limit()
        self.eval_fn = eval_fn or evaluate
        self.output = output
        self.env: Environment = Environment()
        register(self.env)

        if prelude is None:
            pass  # explicit: no prelude
        elif prelude == 'auto':
            try:
                # Lazy import to avoid circular imports
                from lispwalk.modules.prelude_loader import load_prelude
                load_prelude(self)
            except FileNotFoundError:
                # Be permissive: no prelude found -> proceed
                logger.warning("standard prelude not found; continuing without it")
        elif prelude:
            self.eval_prelude(prelude)

    def evaluate(self, expr: SExpression) -> LispValue:
        """Evaluate one form in the global environment."""
        if self.output is None:
            # Keep whatever stream the caller (repl, server) has set
            return self.eval_fn(expr, self.env)
        with output_to(self.output):
            return self.eval_fn(expr, self.env)

    def eval_prelude(self, code: str) -> None:
        for expr in read_all(code):
            self.evaluate(expr)

    def eval(self, code: str) -> LispValue:
        """Evaluate every form in `code`.

        Returns None for no forms, the value for one form, or a list of values.
        """
        results: list[LispValue] = [self.evaluate(expr) for expr in read_all(code)]
        if not results:
            return None
        if len(results) == 1:
            return results[0]
        return results

    def load(self, path: str | Path) -> Path:
        """Evaluate a source file; returns the resolved path."""
        from lispwalk.modules.prelude_loader import load_source
        return load_source(self, path)
