"""Routes parsed input to registered commands."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from ..errors import InvalidConfigurationError, MalformedInputError
from .base import Command
from .context import CommandContext, MessageOrigin
from .parser import ParsedInput, Tokenizer

if TYPE_CHECKING:
    from ..reporting import Reporter

LOGGER = logging.getLogger(__name__)


class CommandDispatcher:
    """Ordered, append-only registry of commands.

    Every command whose identifier matches the input is invoked, in
    registration order; identifiers are not required to be unique, so two
    commands registered as `ping` both run on `!ping`.

    Registration is expected to finish before traffic starts. Calling `add`
    while another thread is dispatching requires external locking.
    """

    def __init__(
        self,
        commands: Optional[Iterable[Command]] = None,
        reporter: Optional["Reporter"] = None,
        tokenizer: Optional[Tokenizer] = None,
    ) -> None:
        self._commands: List[Command] = []
        self._reporter = reporter
        self._tokenizer = tokenizer or Tokenizer()
        if commands is not None:
            self.add(*commands)

    @property
    def commands(self) -> Sequence[Command]:
        return tuple(self._commands)

    @property
    def tokenizer(self) -> Tokenizer:
        return self._tokenizer

    def bind_reporter(self, reporter: "Reporter") -> None:
        self._reporter = reporter

    def add(self, *commands: Command) -> "CommandDispatcher":
        for command in commands:
            if not isinstance(command, Command):
                raise InvalidConfigurationError(f"cannot register {command!r}: not a Command")
            command.validate_definition()
        for command in commands:
            command.seal()
            self._commands.append(command)
            LOGGER.debug("Registered command %s", command.identifier)
        return self

    def identifiers(self) -> List[str]:
        """Registered identifiers in registration order, without duplicates."""
        seen: List[str] = []
        for command in self._commands:
            if command.identifier not in seen:
                seen.append(command.identifier)
        return seen

    def find(self, identifier: str) -> List[Command]:
        return [command for command in self._commands if command.identifier == identifier]

    def dispatch(self, parsed: ParsedInput, origin: Optional[MessageOrigin] = None) -> int:
        """Invoke every command matching `parsed.identifier`. Returns the number of matches."""
        matched = 0
        for command in list(self._commands):
            if command.identifier != parsed.identifier:
                continue
            matched += 1
            context = CommandContext(parsed.copy(), reporter=self._reporter, origin=origin)
            try:
                ran = command.invoke(context)
            except Exception as exc:
                LOGGER.exception("Command %s raised while handling %r", command.identifier, parsed.raw_text)
                if self._reporter is not None:
                    try:
                        context.complain(f"Command `{command.identifier}` failed: {exc}")
                    except Exception:
                        LOGGER.exception("Could not report failure of command %s", command.identifier)
                continue
            LOGGER.info("Command %s %s", command.identifier, "completed" if ran else "was rejected")

        if not matched:
            LOGGER.debug("No command registered for %s", parsed.identifier)
        return matched

    def handle_text(self, text: str, origin: Optional[MessageOrigin] = None) -> int:
        """Tokenize `text` and dispatch it. Malformed input is logged and ignored."""
        try:
            parsed = self._tokenizer.parse(text)
        except MalformedInputError as exc:
            LOGGER.info("Ignoring malformed command %r: %s", text, exc)
            return 0
        return self.dispatch(parsed, origin)
