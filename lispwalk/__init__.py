# Core type aliases for lispwalk's data model.
# Forms and runtime values are plain Python objects: int, float, str, bool, None,
# list for proper lists and (list, tail) tuples for dotted lists. Symbols are the
# only dedicated atom type (see lispwalk.types.symbol).
#
# - SExpression: syntactic forms as produced by the reader.
# - LispValue:  evaluated values in the runtime.

from typing import Any, Callable

__version__ = "0.3.0"

LispValue = Any
SExpression = LispValue

# Evaluator function type passed to special forms: evaluate0(expr, env, is_tail_call)
EvaluatorFn = Callable[..., LispValue]
