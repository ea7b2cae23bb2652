from lispwalk import EvaluatorFn
from lispwalk import SExpression, LispValue
from lispwalk.errors import LispArityError, LispInvalidSymbol
from lispwalk.types.environment import Environment
from lispwalk.types.procedure import Procedure
from lispwalk.types.symbol import Symbol
from lispwalk.evaluation.special_forms.begin_form import make_body


def _split_signature(target: list | tuple) -> tuple[SExpression, SExpression]:
    """(name a b) -> (name, [a, b]); (name a . rest) -> (name, ([a], rest))."""
    if isinstance(target, tuple):
        head, rest = target
        name, *params = head
        return name, ((params, rest) if params else rest)
    name, *params = target
    return name, params


def define_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    """
    (define name value)
    (define (name . formals) body...)

    Binds in the current frame. Returns nothing, so the REPL prints nothing.
    """
    if not tail:
        raise LispArityError("define requires a name")

    target, *rest = tail
    if isinstance(target, (list, tuple)) and target:
        name, formals = _split_signature(target)
        if not isinstance(name, Symbol):
            raise LispInvalidSymbol(f"Cannot define {name!r}: not a symbol")
        if not rest:
            raise LispArityError(f"define {name}: procedure needs a body")
        env.define(name, Procedure(formals, make_body(rest), env, name=name.id))
        return None

    if len(rest) != 1:
        raise LispArityError("define requires exactly 2 arguments: (define name value)")
    if not isinstance(target, Symbol):
        raise LispInvalidSymbol(f"Cannot define {target!r}: not a symbol")

    value = evaluate_fn(rest[0], env)
    if isinstance(value, Procedure) and value.name is None:
        value.name = target.id
    env.define(target, value)
    return None
