"""Compound procedure representation and argument binding for lispwalk."""

from __future__ import annotations

from lispwalk import SExpression, LispValue
from lispwalk.errors import LispArityError, LispInvalidSymbol
from lispwalk.types.environment import Environment
from lispwalk.types.symbol import Symbol


def parse_formals(formals: SExpression) -> tuple[list[Symbol], Symbol | None]:
    """Split a lambda list into (required, rest).

    Accepted shapes:
    - (a b c)         -> required only
    - args            -> no required, everything collected into `args`
    - (a b . rest)    -> read as the dotted tuple ([a, b], rest)
    """
    if isinstance(formals, Symbol):
        return [], formals
    if isinstance(formals, tuple) and len(formals) == 2:
        required, rest = formals
        if not isinstance(rest, Symbol):
            raise LispInvalidSymbol(f"Rest parameter must be a symbol, got {rest!r}")
    elif isinstance(formals, list):
        required, rest = formals, None
    else:
        raise LispInvalidSymbol(f"Malformed parameter list: {formals!r}")

    seen: set[Symbol] = set()
    for f in [*required, *([rest] if rest is not None else [])]:
        if not isinstance(f, Symbol):
            raise LispInvalidSymbol(f"Parameter must be a symbol, got {f!r}")
        if f in seen:
            raise LispInvalidSymbol(f"Duplicate parameter {f}")
        seen.add(f)
    return list(required), rest


class Procedure:
    """A first-class closure: parameters, body and the defining environment."""

    __slots__ = ("params", "rest", "body", "env", "name")

    def __init__(
        self,
        formals: SExpression,
        body: SExpression,
        env: Environment,
        name: str | None = None,
    ):
        self.params, self.rest = parse_formals(formals)
        self.body: SExpression = body
        self.env: Environment = env
        self.name: str | None = name

    @property
    def arity(self) -> tuple[int, int | None]:
        """(minimum, maximum) argument count; maximum is None when variadic."""
        n = len(self.params)
        return n, (None if self.rest is not None else n)

    def extend_env(self, args: list[LispValue]) -> Environment:
        """Bind `args` to the parameters in a new frame over the closure env."""
        n = len(self.params)
        if len(args) < n or (self.rest is None and len(args) > n):
            expected = f"at least {n}" if self.rest is not None else str(n)
            raise LispArityError(
                f"{self.name or 'lambda'}: expected {expected} argument(s), got {len(args)}"
            )
        frame = Environment(outer=self.env)
        frame.vars.update(zip(self.params, args))
        if self.rest is not None:
            frame.vars[self.rest] = list(args[n:])
        return frame

    def __repr__(self) -> str:
        return f"#<procedure {self.name or 'lambda'}>"
