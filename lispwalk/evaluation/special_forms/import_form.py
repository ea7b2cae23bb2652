from __future__ import annotations

import importlib
import logging

from lispwalk import SExpression, LispValue, EvaluatorFn
from lispwalk.errors import LispArityError, LispImportError, LispInvalidSymbol
from lispwalk.types.environment import Environment
from lispwalk.types.symbol import Symbol

logger = logging.getLogger(__name__)

AS = Symbol("as")


def _name(value: SExpression, what: str) -> str:
    if isinstance(value, Symbol):
        return value.id
    if isinstance(value, str):
        return value
    raise LispInvalidSymbol(f"import {what} must be a string or symbol, got {value!r}")


def import_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, _: bool) -> LispValue:
    """
    Usage:
        (import "module.name")             ; binds `name`
        (import "module.name" as alias)    ; binds `alias`

    Attributes are then reached with qualified symbols: (alias:func arg ...).
    """
    if len(tail) not in (1, 3) or (len(tail) == 3 and tail[1] != AS):
        raise LispArityError('import usage: (import "module" [as alias])')

    module_name = _name(tail[0], "module name")
    alias = _name(tail[2], "alias") if len(tail) == 3 else module_name.rsplit(".", 1)[-1]

    try:
        module = importlib.import_module(module_name)
    except ImportError as ex:
        raise LispImportError(
            f"Cannot import {module_name!r}: {ex}. "
            f"Try (display (explain-import \"{module_name}\")) to see how it was searched for."
        ) from ex

    logger.debug("imported %s as %s from %s", module_name, alias, getattr(module, "__file__", None))
    env.define(Symbol(alias), module)
    return None
