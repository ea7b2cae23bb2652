from lispwalk import EvaluatorFn
from lispwalk import SExpression, LispValue
from lispwalk.errors import LispArityError, LispInvalidSymbol
from lispwalk.types.environment import Environment
from lispwalk.types.procedure import Procedure
from lispwalk.types.symbol import Symbol
from lispwalk.evaluation.apply import apply_procedure
from lispwalk.evaluation.special_forms.begin_form import make_body


def _parse_bindings(bindings: SExpression) -> tuple[list[Symbol], list[SExpression]]:
    if not isinstance(bindings, list):
        raise LispArityError(f"let bindings must be a list, got {bindings!r}")
    names: list[Symbol] = []
    exprs: list[SExpression] = []
    for binding in bindings:
        if not (isinstance(binding, list) and len(binding) == 2):
            raise LispArityError(f"Malformed let binding {binding!r}: expected (name value)")
        name, expr = binding
        if not isinstance(name, Symbol):
            raise LispInvalidSymbol(f"let binding name must be a Symbol, got {name!r}")
        names.append(name)
        exprs.append(expr)
    return names, exprs


def let_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    """
    (let ((name value) ...) body...)
    (let loop ((name value) ...) body...)

    Values are evaluated in the enclosing environment, then bound together in
    a fresh frame. The named variant also binds `loop` to a procedure over
    the same parameters, so iterative loops run through tail calls.
    """
    loop_name = None
    if tail and isinstance(tail[0], Symbol):
        loop_name, *tail = tail
    if len(tail) < 2:
        raise LispArityError("let requires a binding list and at least one body form")

    names, exprs = _parse_bindings(tail[0])
    values = [evaluate_fn(e, env) for e in exprs]
    body = make_body(tail[1:])

    if loop_name is None:
        frame = Environment(dict(zip(names, values)), outer=env)
        return evaluate_fn(body, frame, is_tail_call)

    loop_env = Environment(outer=env)
    loop = Procedure(names, body, loop_env, name=loop_name.id)
    loop_env.define(loop_name, loop)
    return apply_procedure(loop, values, evaluate_fn, is_tail_call)
