from lispwalk import EvaluatorFn
from lispwalk import SExpression, LispValue
from lispwalk.errors import LispArityError
from lispwalk.types.environment import Environment


def is_true(value: LispValue) -> bool:
    # Only #f is false; (), 0 and "" are all true
    return value is not False


def if_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    if len(tail) not in (2, 3):
        raise LispArityError("if requires a test, a consequent and an optional alternative")

    if is_true(evaluate_fn(tail[0], env)):
        return evaluate_fn(tail[1], env, is_tail_call)
    elif len(tail) == 3:
        return evaluate_fn(tail[2], env, is_tail_call)
    return None
