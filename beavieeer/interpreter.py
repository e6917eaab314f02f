from __future__ import annotations

import logging
import sys
from typing import IO, Literal, Optional

from beavieeer.builtin.env_builtin import make_print, make_read, register
from beavieeer.config import get_recursion_limit
from beavieeer.errors import BeavieeerSyntaxError
from beavieeer.evaluation.evaluator import evaluate
from beavieeer.reader.parser import parse
from beavieeer.types.environment import Environment
from beavieeer.types.objects import Object, is_error

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Orchestrates parsing and evaluating Beavieeer code.
    Builtins live in a root Environment; user globals live in a child of it,
    so definitions persist across `eval` calls and may shadow builtins.
    """

    def __init__(
        self,
        prelude: str | None | Literal['auto'] = 'auto',
        *,
        out: Optional[IO[str]] = None,
    ):
        limit = get_recursion_limit()
        if sys.getrecursionlimit() < limit:
            sys.setrecursionlimit(limit)

        self.builtins: Environment = Environment()
        register(self.builtins)
        self.builtins.set("print", make_print(out))
        self.builtins.set("read", make_read(out))
        self.env: Environment = Environment.child_of(self.builtins)

        if prelude is None:
            pass  # explicit: no prelude
        elif prelude == 'auto':
            try:
                # Lazy import to avoid circular imports
                from beavieeer.modules.prelude_loader import load_prelude
                load_prelude(self)
            except FileNotFoundError as ex:
                # Be permissive: no prelude found -> proceed
                logger.warning("%s; continuing without prelude", ex)
        elif prelude:
            self.eval_prelude(prelude)

    def eval_prelude(self, code: str) -> None:
        result = self.eval(code)
        if is_error(result):
            logger.warning("prelude evaluation failed: %s", result)

    def eval(self, code: str) -> Optional[Object]:
        """Parse and evaluate `code` in the global environment.

        Raises BeavieeerSyntaxError when the source has syntax errors; runtime
        failures come back as Error objects.
        """
        program, errors = parse(code)
        if errors:
            logger.debug("%d syntax error(s); not evaluating", len(errors))
            raise BeavieeerSyntaxError(errors)
        return evaluate(program, self.env)
