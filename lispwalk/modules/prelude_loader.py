from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

from lispwalk.config import get_load_path, get_prelude_root

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = '.lisp'


class _HasEvalPrelude(Protocol):
    def eval_prelude(self, code: str) -> None: ...


def resolve_source(name: str | Path) -> Optional[Path]:
    """Find a source file by path, or relative to LISPWALK_LOAD_PATH.

    The '.lisp' suffix may be omitted.
    """
    path = Path(name)
    candidates = [path] if path.suffix else [path, path.with_suffix(SOURCE_SUFFIX)]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    if path.is_absolute():
        return None
    for root in get_load_path():
        for candidate in candidates:
            if (root / candidate).is_file():
                return root / candidate
    return None


def load_source(itp: _HasEvalPrelude, name: str | Path) -> Path:
    p = resolve_source(name)
    if p is None:
        raise FileNotFoundError(f"Cannot find source file '{name}' in LISPWALK_LOAD_PATH")
    logger.debug("loading %s", p)
    itp.eval_prelude(p.read_text(encoding='utf-8'))
    return p


def load_prelude(itp: _HasEvalPrelude) -> None:
    root = get_prelude_root()
    std = root / 'std.lisp'
    if not std.exists():
        raise FileNotFoundError(f"No prelude found at {std}")
    logger.debug("loading prelude %s", std)
    itp.eval_prelude(std.read_text(encoding='utf-8'))
