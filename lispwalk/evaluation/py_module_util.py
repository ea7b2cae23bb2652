"""Utilities for resolving Python attributes from qualified lispwalk symbols.

After (import "os.path" as p), the symbol p:join.__name__ names the Python
object reached by looking up `p` and then following attributes.
"""
from typing import Any

from lispwalk.errors import LispUnboundSymbol
from lispwalk.types.environment import Environment
from lispwalk.types.symbol import Symbol


def is_qualified(symbol: Symbol) -> bool:
    name = symbol.id
    return ":" in name and not name.startswith(":") and not name.endswith(":")


def resolve_object_path(env: Environment, path: Symbol) -> Any:
    """Resolve alias:attr.attr to a Python object.

    The part before the colon is an ordinary environment lookup; the rest is
    dotted attribute access on whatever that binding holds.
    """
    first, _, rest = path.id.partition(":")
    obj: Any = env.lookup(Symbol(first))
    for attr in rest.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise LispUnboundSymbol(f"Cannot resolve {path}: no attribute {attr!r}") from None
    return obj
