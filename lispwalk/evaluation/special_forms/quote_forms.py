from lispwalk import SExpression, LispValue, EvaluatorFn
from lispwalk.errors import LispArityError, LispTypeError, LispError
from lispwalk.types.environment import Environment
from lispwalk.types.symbol import QUASIQUOTE, UNQUOTE, UNQUOTE_SPLICING
from lispwalk.types.dotted import make_dotted


def _single_operand(item: list, name: str) -> SExpression:
    if len(item) != 2:
        raise LispArityError(f"{name} expects exactly 1 argument")
    return item[1]


def eval_quasiquote(
    evaluate_fn: EvaluatorFn,
    expr: SExpression,
    env: Environment,
    depth: int = 1,
) -> SExpression:
    """Build the structure described by a quasiquote template.

    `depth` counts enclosing quasiquotes; only unquotes at depth 1 are
    evaluated, deeper ones are rebuilt with their depth reduced.
    """

    def _walk(item: SExpression) -> SExpression:
        if isinstance(item, list) and item:
            head = item[0]
            if head == QUASIQUOTE:
                inner = _single_operand(item, "quasiquote")
                return [QUASIQUOTE, eval_quasiquote(evaluate_fn, inner, env, depth + 1)]
            if head == UNQUOTE:
                inner = _single_operand(item, "unquote")
                if depth == 1:
                    return evaluate_fn(inner, env)
                return [UNQUOTE, eval_quasiquote(evaluate_fn, inner, env, depth - 1)]
        return eval_quasiquote(evaluate_fn, item, env, depth)

    def _process_list_part(seq: list, proper: bool = True) -> LispValue:
        result_list = []
        for i, item in enumerate(seq):
            # (a . ,x) reads as (a unquote x); the last two items form the tail
            if proper and i > 0 and i == len(seq) - 2 and item in (UNQUOTE, QUASIQUOTE):
                return make_dotted(result_list, _walk(seq[i:]))
            if isinstance(item, list) and item and item[0] == UNQUOTE_SPLICING:
                inner = _single_operand(item, "unquote-splicing")
                if depth == 1:
                    spliced_val = evaluate_fn(inner, env)
                    if not isinstance(spliced_val, list):
                        raise LispTypeError("unquote-splicing must produce a list")
                    result_list.extend(spliced_val)
                else:
                    result_list.append(
                        [UNQUOTE_SPLICING, eval_quasiquote(evaluate_fn, inner, env, depth - 1)]
                    )
                continue
            result_list.append(_walk(item))
        return result_list

    # Dotted list (tuple) support: (list_part, tail); no splicing in the tail
    if isinstance(expr, tuple) and len(expr) == 2:
        lst, tail = expr
        return make_dotted(_process_list_part(lst, proper=False), _walk(tail))

    if not isinstance(expr, list) or not expr:
        return expr
    if expr[0] in (UNQUOTE, QUASIQUOTE):
        return _walk(expr)
    return _process_list_part(expr)


def quote_form(
    tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, _: bool
) -> LispValue:
    if len(tail) != 1:
        raise LispArityError("quote expects exactly 1 argument")
    return tail[0]


def quasiquote_form(
    tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, _: bool
) -> LispValue:
    if len(tail) != 1:
        raise LispArityError("quasiquote expects exactly 1 argument")
    return eval_quasiquote(evaluate_fn, tail[0], env)


def unquote_form(
    tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, _: bool
) -> LispValue:
    raise LispError("unquote not valid outside of quasiquote")


def unquote_splice_form(
    tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, _: bool
) -> LispValue:
    raise LispError("unquote-splicing not valid outside of quasiquote")
