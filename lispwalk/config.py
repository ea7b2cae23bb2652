from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Iterable, List


def _sep() -> str:
    return ';' if os.name == 'nt' else ':'


# Resolve installation dir (lispwalk package directory)
_LISPWALK_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_PRELUDE_DIR = _LISPWALK_DIR / 'prelude'
DEFAULT_PROMPT = 'lispwalk> '
DEFAULT_REPL_HOST = '127.0.0.1'
DEFAULT_REPL_PORT = 8765
DEFAULT_RECURSION_LIMIT = 10000


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    sep = _sep()
    return [Path(p.strip()) for p in raw.split(sep) if p.strip()]


def get_prelude_root() -> Path:
    roots = paths_from_env('LISPWALK_PRELUDE_PATH', [_DEFAULT_PRELUDE_DIR])
    # treat as single directory; if a file path is set, return its parent
    p = roots[0]
    return p if p.is_dir() else p.parent


def get_load_path() -> List[Path]:
    return paths_from_env('LISPWALK_LOAD_PATH', [Path.cwd()])


def get_prompt() -> str:
    return os.environ.get('LISPWALK_PROMPT', DEFAULT_PROMPT)


def get_log_level() -> int:
    raw = os.environ.get('LISPWALK_LOG_LEVEL', 'WARNING').strip().upper()
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.WARNING


def get_repl_address() -> tuple[str, int]:
    host = os.environ.get('LISPWALK_REPL_HOST', DEFAULT_REPL_HOST)
    raw_port = os.environ.get('LISPWALK_REPL_PORT')
    try:
        port = int(raw_port) if raw_port else DEFAULT_REPL_PORT
    except ValueError:
        port = DEFAULT_REPL_PORT
    return host, port


def get_recursion_limit() -> int:
    raw = os.environ.get('LISPWALK_RECURSION_LIMIT')
    try:
        limit = int(raw) if raw else DEFAULT_RECURSION_LIMIT
    except ValueError:
        return DEFAULT_RECURSION_LIMIT
    return limit if limit > 0 else DEFAULT_RECURSION_LIMIT
