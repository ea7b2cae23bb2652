from lispwalk import EvaluatorFn
from lispwalk import SExpression, LispValue
from lispwalk.errors import LispArityError
from lispwalk.types.environment import Environment
from lispwalk.types.symbol import ELSE
from lispwalk.evaluation.special_forms.begin_form import begin_form
from lispwalk.evaluation.special_forms.if_form import is_true


def cond_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    """(cond (test expr...) ... (else expr...))

    The first clause whose test is true has its body evaluated; a clause with
    no body yields the test value itself. No matching clause yields nothing.
    """
    for i, clause in enumerate(tail):
        if not isinstance(clause, list) or not clause:
            raise LispArityError(f"Malformed cond clause {clause!r}")
        test, *body = clause
        if test == ELSE:
            if i != len(tail) - 1:
                raise LispArityError("else must be the last cond clause")
            return begin_form(body, env, evaluate_fn, is_tail_call)
        value = evaluate_fn(test, env)
        if is_true(value):
            if not body:
                return value
            return begin_form(body, env, evaluate_fn, is_tail_call)
    return None
