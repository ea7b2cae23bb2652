from lispwalk import EvaluatorFn
from lispwalk import SExpression, LispValue
from lispwalk.errors import LispInvalidSymbol, LispArityError
from lispwalk.types.symbol import Symbol
from lispwalk.types.environment import Environment


def set_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    if len(tail) != 2:
        raise LispArityError("set! requires exactly 2 arguments: (set! var value)")
    var_sym, val_expr = tail
    if not isinstance(var_sym, Symbol):
        raise LispInvalidSymbol(f"set! first argument must be a Symbol, got {var_sym!r}")
    env.set(var_sym, evaluate_fn(val_expr, env))
    return None
