from lispwalk import EvaluatorFn
from lispwalk import SExpression, LispValue
from lispwalk.types.environment import Environment
from lispwalk.evaluation.special_forms.if_form import is_true


def and_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, is_tail_call: bool = False) -> LispValue:
    """Short-circuiting logical AND special form.

    (and a b c ...) evaluates each operand left-to-right until #f is found,
    which is returned immediately. If all operands are true, returns the value
    of the last operand. With zero operands, returns #t.
    """
    if not tail:
        return True

    last_index = len(tail) - 1
    for i, expr in enumerate(tail):
        # Only propagate tail position to the final operand
        val = evaluate_fn(expr, env, is_tail_call and i == last_index)
        if i != last_index and not is_true(val):
            return False
    return val


def or_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, is_tail_call: bool = False) -> LispValue:
    """Short-circuiting logical OR special form.

    (or a b c ...) evaluates each operand left-to-right and returns the first
    true value. If none are true, returns #f. With zero operands, returns #f.
    """
    if not tail:
        return False

    last_index = len(tail) - 1
    for i, expr in enumerate(tail):
        val = evaluate_fn(expr, env, is_tail_call and i == last_index)
        if i == last_index or is_true(val):
            return val
    return False
