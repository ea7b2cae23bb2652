"""Interactive read-eval-print loop.

Input is buffered line by line until it forms complete expressions, then
every form is evaluated and non-empty results are printed. Errors are
reported and the loop carries on; only EOF or (exit) stops it.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, TextIO

from lispwalk.config import get_prompt
from lispwalk.errors import LispError, LispSyntaxError
from lispwalk.interpreter import Interpreter
from lispwalk.printer import to_lisp_string
from lispwalk.reader.parser import read_all
from lispwalk.runtime_context import output_to

logger = logging.getLogger(__name__)

CONTINUATION_PROMPT = '...> '


def _complete(source: str) -> bool:
    """True unless `source` ends inside an open list or string."""
    try:
        for _ in read_all(source):
            pass
    except LispSyntaxError as err:
        return not err.incomplete
    return True


def eval_and_print(interpreter: Interpreter, source: str, output: TextIO) -> None:
    """Evaluate each form in `source`, printing results or the error."""
    try:
        with output_to(output):
            for expr in read_all(source):
                text = to_lisp_string(interpreter.eval_fn(expr, interpreter.env))
                if text:
                    output.write(text + '\n')
    except LispError as ex:
        output.write(f"error: {ex}\n")
    except RecursionError:
        output.write("error: maximum recursion depth exceeded (non-tail recursion too deep)\n")
    except Exception as ex:
        # Python errors from imported modules or the host runtime
        logger.debug("unexpected error in REPL", exc_info=True)
        output.write(f"error: {type(ex).__name__}: {ex}\n")


def repl(
    interpreter: Interpreter | None = None,
    input_fn: Callable[[str], str] | None = None,
    output: TextIO | None = None,
    prompt: str | None = None,
) -> int:
    """Run the loop until EOF or (exit); returns the exit status."""
    interpreter = interpreter or Interpreter()
    input_fn = input_fn or input
    output = output or sys.stdout
    prompt = prompt if prompt is not None else get_prompt()

    buffer: list[str] = []
    while True:
        try:
            line = input_fn(CONTINUATION_PROMPT if buffer else prompt)
        except EOFError:
            output.write('\n')
            return 0
        except KeyboardInterrupt:
            output.write('\n')
            buffer.clear()
            continue

        buffer.append(line)
        source = '\n'.join(buffer)
        if not _complete(source):
            continue
        buffer.clear()
        if not source.strip():
            continue
        try:
            eval_and_print(interpreter, source, output)
        except SystemExit as ex:
            return ex.code if isinstance(ex.code, int) else 0
