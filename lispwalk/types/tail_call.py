from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lispwalk.types.environment import Environment
    from lispwalk.types.procedure import Procedure


class TailCall:
    """A pending procedure body evaluation, returned from tail position."""

    __slots__ = ("fn", "env")

    def __init__(self, fn: Procedure, env: Environment):
        self.fn = fn
        self.env = env

    def __repr__(self) -> str:
        return f"<TailCall {self.fn!r}>"
