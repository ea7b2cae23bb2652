from __future__ import annotations

from lispwalk import LispValue


def make_dotted(items: list[LispValue], tail: LispValue) -> LispValue:
    """Build (items . tail) in normal form.

    A list tail is spliced in, so (1 . (2 3)) is the proper list (1 2 3), and a
    dotted tail is merged, so (1 . (2 . 3)) is (1 2 . 3). Anything else stays
    an improper ([items], tail) tuple.
    """
    if isinstance(tail, list):
        return [*items, *tail]
    if isinstance(tail, tuple):
        more, rest = tail
        return [*items, *more], rest
    return list(items), tail
