"""Help command backed by an in-memory or JSON-defined help registry.

The JSON format is::

    {"commands": {"ping": "Replies with pong.", "sum": "!sum -a 1 -b 2"}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..errors import ConfigurationError
from .base import Command
from .context import CommandContext

LOGGER = logging.getLogger(__name__)

LOOKUP_ERROR_FORMAT = "Could not find command with identifier {0}."


class HelpCommand(Command):
    """Sends help for one command, or for every known command, to the requester."""

    def __init__(self, identifier: str = "help", entries: Optional[Mapping[str, str]] = None) -> None:
        super().__init__(identifier)
        self._entries: Dict[str, str] = {}
        if entries:
            self.add(entries)
        self.do(self._execute)

    @classmethod
    def from_json(cls, text: str, identifier: str = "help") -> "HelpCommand":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Could not parse help JSON: {exc}") from exc

        commands = data.get("commands") if isinstance(data, dict) else None
        if not isinstance(commands, dict):
            raise ConfigurationError("Help JSON must contain a `commands` mapping")
        for key, value in commands.items():
            if not isinstance(value, str):
                raise ConfigurationError(f"Help text for `{key}` must be a string")
        return cls(identifier, commands)

    @classmethod
    def from_file(cls, path: Path | str, identifier: str = "help") -> "HelpCommand":
        path = Path(path).expanduser()
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Help file not found at {path}") from exc
        except OSError as exc:
            raise ConfigurationError(f"Failed to read {path}: {exc}") from exc
        LOGGER.info("Loaded help text from %s", path)
        return cls.from_json(content, identifier)

    @property
    def entries(self) -> Dict[str, str]:
        return dict(self._entries)

    def add(self, mapping: Optional[Mapping[str, str]] = None, **entries: str) -> "HelpCommand":
        self._check_mutable()
        merged = dict(mapping or {})
        merged.update(entries)
        self._entries.update(merged)
        return self

    def get_help_string(self, identifier: Optional[str] = None) -> str:
        if identifier is not None:
            if identifier not in self._entries:
                return LOOKUP_ERROR_FORMAT.format(identifier)
            return self._entries[identifier]

        lines = [f"Help for *{len(self._entries)}* commands:"]
        for key, text in self._entries.items():
            lines.append(f"*{key}* → ```{text}```")
        return "\n".join(lines)

    def _execute(self, context: CommandContext) -> None:
        topic = context.raw_args[0] if context.raw_args else None
        context.reply_to_user(self.get_help_string(topic))
