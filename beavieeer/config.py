from __future__ import annotations
import os
from pathlib import Path
from typing import Iterable, List


def _sep() -> str:
    return ';' if os.name == 'nt' else ':'


# Resolve installation dir (beavieeer package directory)
_BEAVIEEER_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_PRELUDE_DIR = _BEAVIEEER_DIR / 'prelude'
_DEFAULT_RECURSION_LIMIT = 20_000

PRELUDE_FILE = 'std.bv'


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    sep = _sep()
    return [Path(p.strip()) for p in raw.split(sep) if p.strip()]


def get_prelude_roots() -> List[Path]:
    roots = paths_from_env('BEAVIEEER_PRELUDE_PATH', [_DEFAULT_PRELUDE_DIR])
    # a file entry names its directory
    return [p if p.is_dir() else p.parent for p in roots]


def get_recursion_limit() -> int:
    raw = os.environ.get('BEAVIEEER_RECURSION_LIMIT')
    if not raw:
        return _DEFAULT_RECURSION_LIMIT
    try:
        return max(int(raw), 1000)
    except ValueError:
        return _DEFAULT_RECURSION_LIMIT
