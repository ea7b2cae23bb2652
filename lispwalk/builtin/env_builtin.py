"""Built-in procedures for the lispwalk runtime environment.

This module defines core arithmetic, comparison, list processing, predicates,
higher-order helpers, I/O, and the registration entry point exposed to Lisp
code. Every builtin takes (env, args) with already-evaluated arguments.
"""
from __future__ import annotations

import math
from numbers import Number
from typing import Callable

from lispwalk import LispValue
from lispwalk.errors import LispArityError, LispTypeError, LispZeroDivisionError
from lispwalk.evaluation.apply import builtin, call_procedure, is_builtin
from lispwalk.printer import to_display_string
from lispwalk.runtime_context import get_output
from lispwalk.types.environment import Environment
from lispwalk.types.dotted import make_dotted
from lispwalk.types.procedure import Procedure
from lispwalk.types.symbol import Symbol

BUILTINS: list[Callable] = []


def register_builtin(name: str) -> Callable[[Callable], Callable]:
    def decorate(fn: Callable) -> Callable:
        BUILTINS.append(builtin(name)(fn))
        return fn

    return decorate


def _check_arity(name: str, args: list[LispValue], low: int, high: int | None = None) -> None:
    if len(args) < low or (high is not None and len(args) > high):
        if high is None:
            expected = f"at least {low}"
        elif low == high:
            expected = str(low)
        else:
            expected = f"{low} to {high}"
        raise LispArityError(f"{name}: expected {expected} argument(s), got {len(args)}")


def _is_number(x: LispValue) -> bool:
    return isinstance(x, Number) and not isinstance(x, bool)


def _numbers(name: str, args: list[LispValue]) -> list[LispValue]:
    for a in args:
        if not _is_number(a):
            raise LispTypeError(f"{name}: expected numbers, got {to_display_string(a)!r}")
    return args


# -------------------------------
# Arithmetic
# -------------------------------
@register_builtin("+")
def add(env: Environment, args: list[LispValue]) -> LispValue:
    """Return the numeric sum of all arguments (0 for none)."""
    return sum(_numbers("+", args))


@register_builtin("-")
def sub(env: Environment, args: list[LispValue]) -> LispValue:
    """Subtract all subsequent numbers from the first; unary negation for one arg."""
    _check_arity("-", args, 1)
    first, *rest = _numbers("-", args)
    if not rest:
        return -first
    for x in rest:
        first -= x
    return first


@register_builtin("*")
def mul(env: Environment, args: list[LispValue]) -> LispValue:
    """Return the product of all arguments (1 for none)."""
    result = 1
    for x in _numbers("*", args):
        result *= x
    return result


@register_builtin("/")
def div(env: Environment, args: list[LispValue]) -> LispValue:
    """True division, left to right; unary form returns the reciprocal."""
    _check_arity("/", args, 1)
    first, *rest = _numbers("/", args)
    try:
        if not rest:
            return 1 / first
        for x in rest:
            first /= x
        return first
    except ZeroDivisionError:
        raise LispZeroDivisionError("/: division by zero") from None


def _integer_division(name: str, op: Callable[[int, int], int]) -> Callable:
    def fn(env: Environment, args: list[LispValue]) -> LispValue:
        _check_arity(name, args, 2, 2)
        a, b = _numbers(name, args)
        if b == 0:
            raise LispZeroDivisionError(f"{name}: division by zero")
        return op(a, b)

    fn.__name__ = name
    register_builtin(name)(fn)
    return fn


def _truncate_div(a: LispValue, b: LispValue) -> LispValue:
    # Rounds toward zero, unlike Python's floor division
    if isinstance(a, int) and isinstance(b, int):
        q = abs(a) // abs(b)
        return q if (a < 0) == (b < 0) else -q
    return float(math.trunc(a / b))


quotient = _integer_division("quotient", _truncate_div)
remainder = _integer_division("remainder", lambda a, b: a - b * _truncate_div(a, b))
modulo = _integer_division("modulo", lambda a, b: a % b)


@register_builtin("abs")
def abs_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    _check_arity("abs", args, 1, 1)
    return abs(_numbers("abs", args)[0])


@register_builtin("min")
def min_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    _check_arity("min", args, 1)
    return min(_numbers("min", args))


@register_builtin("max")
def max_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    _check_arity("max", args, 1)
    return max(_numbers("max", args))


@register_builtin("expt")
def expt(env: Environment, args: list[LispValue]) -> LispValue:
    _check_arity("expt", args, 2, 2)
    base, power = _numbers("expt", args)
    try:
        result = base ** power
    except ZeroDivisionError:
        raise LispZeroDivisionError("expt: zero raised to a negative power") from None
    except OverflowError:
        raise LispTypeError("expt: result too large to represent") from None
    if isinstance(result, complex):
        raise LispTypeError("expt: negative base with a fractional power has no real result")
    return result


@register_builtin("sqrt")
def sqrt(env: Environment, args: list[LispValue]) -> LispValue:
    _check_arity("sqrt", args, 1, 1)
    (x,) = _numbers("sqrt", args)
    if x < 0:
        raise LispTypeError("sqrt: negative argument")
    root = math.isqrt(x) if isinstance(x, int) else None
    if root is not None and root * root == x:
        return root
    return math.sqrt(x)


# -------------------------------
# Comparison
# -------------------------------
def _chained(name: str, op: Callable[[LispValue, LispValue], bool]) -> Callable:
    def fn(env: Environment, args: list[LispValue]) -> bool:
        _check_arity(name, args, 1)
        _numbers(name, args)
        return all(op(a, b) for a, b in zip(args, args[1:]))

    fn.__name__ = name
    register_builtin(name)(fn)
    return fn


num_eq = _chained("=", lambda a, b: a == b)
lt = _chained("<", lambda a, b: a < b)
gt = _chained(">", lambda a, b: a > b)
lte = _chained("<=", lambda a, b: a <= b)
gte = _chained(">=", lambda a, b: a >= b)


# -------------------------------
# Equality and predicates
# -------------------------------
def is_eqv(a: LispValue, b: LispValue) -> bool:
    """Identity, except atoms of the same type compare by value."""
    if a is b:
        return True
    if type(a) is not type(b):
        return False
    if isinstance(a, (Symbol, int, float, str)):
        return a == b
    return isinstance(a, list) and not a and not b


def is_equal(a: LispValue, b: LispValue) -> bool:
    """Deep equality for Lisp values, element-wise for lists and dotted pairs."""
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(is_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, tuple) and isinstance(b, tuple):
        return len(a) == len(b) and all(is_equal(x, y) for x, y in zip(a, b))
    return is_eqv(a, b)


@register_builtin("eq?")
def eq_p(env: Environment, args: list[LispValue]) -> bool:
    _check_arity("eq?", args, 2, 2)
    return is_eqv(*args)


@register_builtin("equal?")
def equal_p(env: Environment, args: list[LispValue]) -> bool:
    _check_arity("equal?", args, 2, 2)
    return is_equal(*args)


@register_builtin("not")
def logical_not(env: Environment, args: list[LispValue]) -> bool:
    _check_arity("not", args, 1, 1)
    return args[0] is False


def _predicate(name: str, test: Callable[[LispValue], bool]) -> Callable:
    def fn(env: Environment, args: list[LispValue]) -> bool:
        _check_arity(name, args, 1, 1)
        return test(args[0])

    fn.__name__ = name
    register_builtin(name)(fn)
    return fn


number_p = _predicate("number?", _is_number)
symbol_p = _predicate("symbol?", lambda x: isinstance(x, Symbol))
string_p = _predicate("string?", lambda x: isinstance(x, str))
boolean_p = _predicate("boolean?", lambda x: isinstance(x, bool))
procedure_p = _predicate("procedure?", lambda x: isinstance(x, Procedure) or callable(x))
null_p = _predicate("null?", lambda x: isinstance(x, list) and not x)
list_p = _predicate("list?", lambda x: isinstance(x, list))
pair_p = _predicate("pair?", lambda x: (isinstance(x, list) and bool(x)) or isinstance(x, tuple))


# -------------------------------
# List operations
# -------------------------------
@register_builtin("cons")
def cons(env: Environment, args: list[LispValue]) -> LispValue:
    """Prepend onto a list; onto anything else, build a dotted pair."""
    _check_arity("cons", args, 2, 2)
    head, tail = args
    return make_dotted([head], tail)


@register_builtin("car")
def car(env: Environment, args: list[LispValue]) -> LispValue:
    _check_arity("car", args, 1, 1)
    x = args[0]
    if isinstance(x, list) and x:
        return x[0]
    if isinstance(x, tuple):
        return x[0][0]
    raise LispTypeError(f"car: expected a pair, got {to_display_string(x) or '()'}")


@register_builtin("cdr")
def cdr(env: Environment, args: list[LispValue]) -> LispValue:
    _check_arity("cdr", args, 1, 1)
    x = args[0]
    if isinstance(x, list) and x:
        return x[1:]
    if isinstance(x, tuple):
        items, rest = x
        return (items[1:], rest) if len(items) > 1 else rest
    raise LispTypeError(f"cdr: expected a pair, got {to_display_string(x) or '()'}")


@register_builtin("list")
def list_builtin(env: Environment, args: list[LispValue]) -> list[LispValue]:
    return list(args)


def _as_list(name: str, x: LispValue) -> list[LispValue]:
    if not isinstance(x, list):
        raise LispTypeError(f"{name}: expected a list, got {to_display_string(x)}")
    return x


@register_builtin("length")
def length(env: Environment, args: list[LispValue]) -> int:
    _check_arity("length", args, 1, 1)
    x = args[0]
    if isinstance(x, str):
        return len(x)
    return len(_as_list("length", x))


@register_builtin("append")
def append(env: Environment, args: list[LispValue]) -> list[LispValue]:
    result: list[LispValue] = []
    for x in args:
        result.extend(_as_list("append", x))
    return result


# -------------------------------
# Higher-order procedures
# -------------------------------
@register_builtin("apply")
def apply_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(apply f a b ... lst) calls f with a, b, ... followed by the items of lst."""
    _check_arity("apply", args, 2)
    fn, *leading, last = args
    return call_procedure(fn, [*leading, *_as_list("apply", last)], env)


@register_builtin("map")
def map_builtin(env: Environment, args: list[LispValue]) -> list[LispValue]:
    """(map f l1 l2 ...) stops at the shortest list."""
    _check_arity("map", args, 2)
    fn, *lists = args
    lists = [_as_list("map", lst) for lst in lists]
    return [call_procedure(fn, list(items), env) for items in zip(*lists)]


@register_builtin("filter")
def filter_builtin(env: Environment, args: list[LispValue]) -> list[LispValue]:
    _check_arity("filter", args, 2, 2)
    fn, lst = args
    return [x for x in _as_list("filter", lst) if call_procedure(fn, [x], env) is not False]


# -------------------------------
# Strings and symbols
# -------------------------------
@register_builtin("symbol->string")
def symbol_to_string(env: Environment, args: list[LispValue]) -> str:
    """(symbol->string x) -> the name of symbol x"""
    _check_arity("symbol->string", args, 1, 1)
    if not isinstance(args[0], Symbol):
        raise LispTypeError("symbol->string: expected a symbol")
    return args[0].id


@register_builtin("string->symbol")
def string_to_symbol(env: Environment, args: list[LispValue]) -> Symbol:
    """(string->symbol x) -> Symbol corresponding to string x"""
    _check_arity("string->symbol", args, 1, 1)
    if not isinstance(args[0], str):
        raise LispTypeError("string->symbol: expected a string")
    return Symbol(args[0])


@register_builtin("number->string")
def number_to_string(env: Environment, args: list[LispValue]) -> str:
    _check_arity("number->string", args, 1, 1)
    return str(_numbers("number->string", args)[0])


@register_builtin("string-append")
def string_append(env: Environment, args: list[LispValue]) -> str:
    for a in args:
        if not isinstance(a, str):
            raise LispTypeError(f"string-append: expected strings, got {to_display_string(a)}")
    return "".join(args)


# -------------------------------
# I/O and the import tracer
# -------------------------------
@register_builtin("display")
def display(env: Environment, args: list[LispValue]) -> None:
    """Write the argument without quoting strings; no trailing newline."""
    _check_arity("display", args, 1, 1)
    get_output().write(to_display_string(args[0]))
    return None


@register_builtin("newline")
def newline(env: Environment, args: list[LispValue]) -> None:
    _check_arity("newline", args, 0, 0)
    get_output().write("\n")
    return None


@register_builtin("exit")
def exit_builtin(env: Environment, args: list[LispValue]) -> None:
    _check_arity("exit", args, 0, 1)
    raise SystemExit(args[0] if args else 0)


@register_builtin("explain-import")
def explain_import(env: Environment, args: list[LispValue]) -> str:
    """(explain-import "pkg.mod") -> walkthrough of how Python resolves the name."""
    from lispwalk.imports import trace_import, render_text

    _check_arity("explain-import", args, 1, 1)
    name = args[0]
    if isinstance(name, Symbol):
        name = name.id
    if not isinstance(name, str):
        raise LispTypeError("explain-import: expected a module name")
    return render_text(trace_import(name))


def register(env: Environment) -> None:
    """Register all builtin procedures into the given environment."""
    env.update({Symbol(fn.lisp_name): fn for fn in BUILTINS})


__all__ = ["BUILTINS", "register", "is_builtin", "is_equal", "is_eqv"]
