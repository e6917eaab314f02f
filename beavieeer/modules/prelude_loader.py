from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Protocol

from beavieeer.config import PRELUDE_FILE, get_prelude_roots

logger = logging.getLogger(__name__)


class _HasEvalPrelude(Protocol):
    def eval_prelude(self, code: str) -> None: ...


def resolve_prelude() -> Optional[Path]:
    for root in get_prelude_roots():
        candidate = root / PRELUDE_FILE
        if candidate.is_file():
            return candidate
    return None


# Prelude convenience loader (first std.bv found along BEAVIEEER_PRELUDE_PATH)

def load_prelude(itp: _HasEvalPrelude) -> None:
    path = resolve_prelude()
    if path is None:
        raise FileNotFoundError(f"Cannot find prelude '{PRELUDE_FILE}' in BEAVIEEER_PRELUDE_PATH")
    logger.debug("loading prelude from %s", path)
    itp.eval_prelude(path.read_text(encoding='utf-8'))
