"""Runtime environment for lispwalk.

An Environment is one frame of name-to-value bindings plus an `outer` link to
the frame it was created in. Looking a symbol up walks the chain outward, which
gives lexical scoping and lets closures keep their defining frame alive.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterator, Optional

from lispwalk import LispValue
from lispwalk.errors import LispInvalidSymbol, LispUnboundSymbol
from lispwalk.types.symbol import Symbol


class Environment:
    """Hierarchical mapping from Symbols to Lisp values."""

    __slots__ = ("vars", "outer")

    def __init__(
        self,
        bindings: Optional[dict[Symbol, LispValue]] = None,
        outer: Optional[Environment] = None,
    ):
        self.vars: dict[Symbol, LispValue] = {}
        self.outer: Environment | None = outer
        if bindings:
            self.update(bindings)

    def define(self, name: Symbol, value: LispValue) -> None:
        """Bind `name` to `value` in this frame, shadowing any outer binding.

        Raises LispInvalidSymbol if `name` is not a Symbol.
        """
        if not isinstance(name, Symbol):
            raise LispInvalidSymbol(f"Cannot define {name!r} as a symbol")
        self.vars[name] = value

    def find(self, symbol: Symbol) -> Optional[Environment]:
        """Find the nearest environment in the chain that contains `symbol`."""
        env: Optional[Environment] = self
        while env is not None:
            if symbol in env.vars:
                return env
            env = env.outer
        return None

    def set(self, name: Symbol, value: LispValue) -> None:
        """Update an existing binding for `name` in the environment chain.

        Raises LispUnboundSymbol if the symbol is not found.
        """
        if not isinstance(name, Symbol):
            raise LispInvalidSymbol(f"Cannot set {name!r}: not a symbol")
        env = self.find(name)
        if env is None:
            raise LispUnboundSymbol(f"Cannot set unbound symbol {name}")
        env.vars[name] = value

    def lookup(self, name: Symbol) -> LispValue:
        """Look up the value bound to `name`, innermost frame first.

        Raises LispUnboundSymbol if not found.
        """
        env = self.find(name)
        if env is None:
            raise LispUnboundSymbol(f"Cannot lookup unbound symbol {name}")
        return env.vars[name]

    def update(self, mapping: dict[Symbol, LispValue]) -> None:
        """Bulk-define a mapping of Symbol -> value in the current frame."""
        for k, v in mapping.items():
            if not isinstance(k, Symbol):
                raise LispInvalidSymbol(f"Cannot define {k!r} as a symbol")
            self.vars[k] = v

    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    def chain(self) -> Iterator[Environment]:
        env: Optional[Environment] = self
        while env is not None:
            yield env
            env = env.outer

    def __contains__(self, name: Symbol) -> bool:
        return self.find(name) is not None

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v!r}" for k, v in self.vars.items()))
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Frame sizes along the chain; the global frame is usually large."""
        sizes = " -> ".join(str(len(env.vars)) for env in self.chain())
        return f"<Environment chain: {sizes}>"
