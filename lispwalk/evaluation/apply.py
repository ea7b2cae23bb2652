"""Application engine for lispwalk.

This module centralizes procedure application for the interpreter:
- Tail-call awareness via TailCall objects (consumed by `trampoline`).
- Compound procedures (Procedure) bound through Procedure.extend_env.
- Builtins, which are Python callables taking (env, args).
- Plain Python callables reached through `import`, called as fn(*args).

Keeping this logic in one place prevents duplication between the evaluator,
special forms, and builtins such as map and apply.
"""

from __future__ import annotations

from typing import Callable

from lispwalk import LispValue, EvaluatorFn
from lispwalk.errors import LispTypeError
from lispwalk.types.environment import Environment
from lispwalk.types.procedure import Procedure
from lispwalk.types.tail_call import TailCall


def is_builtin(fn: object) -> bool:
    return callable(fn) and getattr(fn, "lisp_builtin", False)


def builtin(name: str) -> Callable[[Callable], Callable]:
    """Mark a Python function as a builtin taking (env, args)."""

    def mark(fn: Callable) -> Callable:
        fn.lisp_builtin = True
        fn.lisp_name = name
        return fn

    return mark


def trampoline(result: LispValue, evaluate_fn: EvaluatorFn) -> LispValue:
    """Run pending tail calls until a plain value comes back."""
    while isinstance(result, TailCall):
        result = evaluate_fn(result.fn.body, result.env, True)
    return result


def apply_procedure(
    fn: Procedure,
    args: list[LispValue],
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool,
) -> LispValue | TailCall:
    """Apply a compound procedure.

    In tail position the body is not evaluated here; a TailCall is returned
    for the enclosing trampoline, which keeps the Python stack flat for
    tail-recursive loops. Otherwise the body is run to completion.
    """
    new_env = fn.extend_env(args)
    if is_tail_call:
        return TailCall(fn, new_env)
    return trampoline(evaluate_fn(fn.body, new_env, True), evaluate_fn)


def apply(
    head: Procedure | Callable | object,
    args: list[LispValue],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    tail: bool = False,
) -> LispValue | TailCall:
    """Apply a Procedure, a builtin or a Python callable.

    Anything else raises LispTypeError.
    """
    if isinstance(head, Procedure):
        return apply_procedure(head, args, evaluate_fn, tail)
    if is_builtin(head):
        return head(env, args)
    if callable(head):
        return head(*args)
    from lispwalk.printer import to_lisp_string
    raise LispTypeError(f"Cannot apply non-procedure {to_lisp_string(head)}")


def call_procedure(fn: LispValue, args: list[LispValue], env: Environment) -> LispValue:
    """Fully apply `fn` from Python code (used by higher-order builtins)."""
    from lispwalk.evaluation.evaluator import evaluate0
    return apply(fn, list(args), env, evaluate0, False)
