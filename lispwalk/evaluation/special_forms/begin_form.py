from lispwalk import EvaluatorFn
from lispwalk import SExpression, LispValue
from lispwalk.types.environment import Environment
from lispwalk.types.symbol import BEGIN


def make_body(forms: list[SExpression]) -> SExpression:
    """Collapse a sequence of body forms into a single form."""
    if len(forms) == 1:
        return forms[0]
    return [BEGIN, *forms]


def begin_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    result: LispValue = None
    for e in tail[:-1]:
        evaluate_fn(e, env)
    if tail:
        result = evaluate_fn(tail[-1], env, is_tail_call)
    return result
