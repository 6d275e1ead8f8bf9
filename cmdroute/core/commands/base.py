"""Declarative command definitions.

A `Command` is built once at startup by chaining its builder methods::

    Command("greet").require_params("name").set_default("greeting", "hi").do(handler)

and is sealed when registered with a dispatcher. Invoking it runs the
validation pipeline (preconditions, required params, defaults) and calls the
handler only when every check passed. All diagnostics are reported, not just
the first one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import InvalidConfigurationError
from .context import CommandContext

LOGGER = logging.getLogger(__name__)

Handler = Callable[[CommandContext], None]
Predicate = Callable[[CommandContext], bool]

DEFAULT_CONDITION_MESSAGE = "An error occurred."


@dataclass(frozen=True)
class Precondition:
    predicate: Predicate
    message: str = DEFAULT_CONDITION_MESSAGE


def missing_parameter_message(param: str, pair_prefix: str) -> str:
    return f"Missing parameter: `{param}`.\nUse `... {pair_prefix}{param} value ...` to fix this."


class Command:
    """A routable command: identifier, validation rules and handler."""

    def __init__(self, identifier: str) -> None:
        if not identifier or not identifier.strip():
            raise InvalidConfigurationError("identifier cannot be None or empty")
        self.identifier = identifier
        self._handler: Optional[Handler] = None
        self._preconditions: List[Precondition] = []
        self._required_params: List[str] = []
        self._default_params: Dict[str, str] = {}
        self._sealed = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier!r})"

    @property
    def handler(self) -> Optional[Handler]:
        return self._handler

    @property
    def preconditions(self) -> Tuple[Precondition, ...]:
        return tuple(self._preconditions)

    @property
    def required_params(self) -> Tuple[str, ...]:
        return tuple(self._required_params)

    @property
    def default_params(self) -> Dict[str, str]:
        return dict(self._default_params)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def do(self, handler: Handler) -> "Command":
        self._check_mutable()
        if handler is None or not callable(handler):
            raise InvalidConfigurationError(f"handler for `{self.identifier}` must be callable")
        self._handler = handler
        return self

    def require(self, predicate: Predicate, message: str = DEFAULT_CONDITION_MESSAGE) -> "Command":
        """Add a precondition; `message` is reported when `predicate` returns False."""
        self._check_mutable()
        if predicate is None or not callable(predicate):
            raise InvalidConfigurationError(f"precondition for `{self.identifier}` must be callable")
        self._preconditions.append(Precondition(predicate, message or DEFAULT_CONDITION_MESSAGE))
        return self

    def require_all(self, *conditions: Tuple[Predicate, str]) -> "Command":
        for predicate, message in conditions:
            self.require(predicate, message)
        return self

    def require_params(self, *names: str) -> "Command":
        self._check_mutable()
        if not names:
            raise InvalidConfigurationError("require_params needs at least one parameter name")
        for name in names:
            self._check_param_name(name)
        for name in names:
            if name not in self._required_params:
                self._required_params.append(name)
        return self

    def set_default(self, name: str, value: str) -> "Command":
        self._check_mutable()
        self._check_param_name(name)
        if value is None:
            raise InvalidConfigurationError(f"default for `{name}` cannot be None")
        self._default_params[name] = value
        return self

    def validate_definition(self) -> None:
        """Raise InvalidConfigurationError if the command cannot be registered."""
        if self._handler is None:
            raise InvalidConfigurationError(f"command `{self.identifier}` has no handler")

    def seal(self) -> None:
        self._sealed = True

    def invoke(self, context: CommandContext) -> bool:
        """Validate `context` and run the handler. Returns True if the handler ran."""
        runnable = True

        for condition in self._preconditions:
            if not condition.predicate(context):
                context.complain(condition.message)
                runnable = False

        for param in self._required_params:
            if param not in context.pairs:
                context.complain(missing_parameter_message(param, context.parsed.pair_prefix))
                runnable = False

        # Defaults are applied even when validation failed.
        for param, value in self._default_params.items():
            context.pairs.setdefault(param, value)

        if not runnable:
            LOGGER.warning("Validation failed for command %s", self.identifier)
            return False

        handler = self._handler
        if handler is None:
            raise InvalidConfigurationError(f"command `{self.identifier}` has no handler")
        handler(context)
        return True

    def _check_mutable(self) -> None:
        if self._sealed:
            raise InvalidConfigurationError(
                f"command `{self.identifier}` is registered and can no longer be modified"
            )

    @staticmethod
    def _check_param_name(name: str) -> None:
        if not name or not isinstance(name, str):
            raise InvalidConfigurationError("parameter name cannot be None or empty")
