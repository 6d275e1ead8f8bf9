"""Commands that compute a typed value before presenting it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar, Union

from ..errors import InvalidConfigurationError
from .base import Command
from .context import CommandContext

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def failed(self) -> bool:
        return False


@dataclass(frozen=True)
class Failure:
    message: Optional[str] = None

    @property
    def failed(self) -> bool:
        return True


class Result:
    """Constructors for the `Success` / `Failure` union."""

    @staticmethod
    def success(value: T) -> "Success[T]":
        return Success(value)

    @staticmethod
    def failure(message: Optional[str] = None) -> Failure:
        return Failure(message)


ResultType = Union[Success[T], Failure]
ProcessFn = Callable[[CommandContext], ResultType]
CompleteFn = Callable[[CommandContext, Success], None]


class ResultCommand(Command, Generic[T]):
    """Command split into a `process` step and an optional `completed` step.

    `process` returns a Success or Failure. A failure with a message is
    reported on the failure channel; a failure without one ends the command
    silently. A success goes to `completed` when one was given, otherwise its
    value is sent to the output channel as text.
    """

    def __init__(self, identifier: str) -> None:
        super().__init__(identifier)
        self._process: Optional[ProcessFn] = None
        self._complete: Optional[CompleteFn] = None
        super().do(self._run)

    def process(self, fn: ProcessFn) -> "ResultCommand[T]":
        self._check_mutable()
        if fn is None or not callable(fn):
            raise InvalidConfigurationError(f"process function for `{self.identifier}` must be callable")
        self._process = fn
        return self

    def completed(self, fn: CompleteFn) -> "ResultCommand[T]":
        self._check_mutable()
        if fn is None or not callable(fn):
            raise InvalidConfigurationError(f"completion function for `{self.identifier}` must be callable")
        self._complete = fn
        return self

    def do(self, handler):
        raise InvalidConfigurationError(
            f"`{self.identifier}` is a result command; use process() and completed() instead of do()"
        )

    def validate_definition(self) -> None:
        super().validate_definition()
        if self._process is None:
            raise InvalidConfigurationError(f"result command `{self.identifier}` has no process function")

    def _run(self, context: CommandContext) -> None:
        result = self._process(context)
        if not isinstance(result, (Success, Failure)):
            raise TypeError(
                f"process function for `{self.identifier}` returned {type(result).__name__}, "
                "expected Result.success(...) or Result.failure(...)"
            )

        if isinstance(result, Failure):
            if result.message:
                context.complain(result.message)
            else:
                LOGGER.debug("Command %s aborted without a message", self.identifier)
            return

        if self._complete is not None:
            self._complete(context, result)
        else:
            context.send(result.value)
