"""Core evaluator and trampoline for the lispwalk interpreter.

Implements special-form dispatch and tail-call aware application via a simple
trampoline using TailCall objects.

Invariant: evaluate0(..., is_tail_call=False) never returns a TailCall, so
special forms may evaluate non-tail sub-expressions without unwrapping.
"""

from __future__ import annotations

from lispwalk import SExpression, LispValue
from lispwalk.errors import LispTypeError
from lispwalk.types.environment import Environment
from lispwalk.types.symbol import Symbol
from lispwalk.evaluation.apply import apply, trampoline
from lispwalk.evaluation.special_forms import SPECIAL_FORMS
from lispwalk.evaluation.py_module_util import is_qualified, resolve_object_path


def evaluate(expr: SExpression, env: Environment) -> LispValue:
    """
    Trampoline evaluator: tail-call aware evaluation.
    """
    return trampoline(evaluate0(expr, env, True), evaluate0)


def evaluate0(
    expr: SExpression,
    env: Environment,
    is_tail_call: bool = False,
) -> LispValue:
    """
    Core evaluator: single-step evaluation with tail-call awareness.
    Returns either a value or, in tail position, a TailCall.
    """
    match expr:
        case Symbol():
            if is_qualified(expr):
                return resolve_object_path(env, expr)
            return env.lookup(expr)

        case tuple():
            raise LispTypeError("Cannot evaluate a dotted list")

        case []:
            return []

        case [head, *tail_args]:
            # --- Special forms handling ---
            if isinstance(head, Symbol) and head in SPECIAL_FORMS:
                return SPECIAL_FORMS[head](tail_args, env, evaluate0, is_tail_call)

            # --- Procedure application ---
            fn = evaluate0(head, env)
            args = [evaluate0(arg, env) for arg in tail_args]
            return apply(fn, args, env, evaluate0, is_tail_call)

    # --- Atoms return as-is ---
    return expr
