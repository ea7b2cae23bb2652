from lispwalk import EvaluatorFn
from lispwalk import SExpression, LispValue
from lispwalk.errors import LispArityError
from lispwalk.types.environment import Environment
from lispwalk.types.procedure import Procedure
from lispwalk.evaluation.special_forms.begin_form import make_body


def lambda_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    # (lambda formals body...) with an implicit begin around several body forms
    if len(tail) < 2:
        raise LispArityError("lambda requires a parameter list and at least one body form")

    formals, *body_forms = tail
    return Procedure(formals, make_body(body_forms), env)
