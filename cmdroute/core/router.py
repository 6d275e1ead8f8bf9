"""Routes chat events to the command dispatcher."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, Optional

from ..chat_adapters.i_chat_adapter import IChatAdapter
from .commands.base import Command
from .commands.context import MessageOrigin
from .commands.dispatcher import CommandDispatcher
from .commands.parser import Tokenizer
from .reporting import AdapterReporter

LOGGER = logging.getLogger(__name__)

MENTION_PREFIX = re.compile(r"^<@[^>]+>\s*")


class Router:
    """Turns chat message events into command dispatches."""

    def __init__(
        self,
        commands: Iterable[Command] = (),
        tokenizer: Optional[Tokenizer] = None,
    ) -> None:
        self._dispatcher = CommandDispatcher(commands, tokenizer=tokenizer)
        self._reporter: Optional[AdapterReporter] = None

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    @property
    def reporter(self) -> Optional[AdapterReporter]:
        return self._reporter

    def bind_adapter(self, adapter: IChatAdapter) -> None:
        """Attach the chat adapter so commands can send replies."""
        self._reporter = AdapterReporter(adapter)
        self._dispatcher.bind_reporter(self._reporter)

    def handle_message(self, event: Dict[str, Any]) -> int:
        """Dispatch a message event. Must run inside the event loop used for replies."""
        channel_id = event.get("channel")
        text = (event.get("text") or "").strip()
        text = MENTION_PREFIX.sub("", text, count=1)

        if not self._dispatcher.tokenizer.is_command(text):
            LOGGER.debug("Ignoring non-command message in %s", channel_id)
            return 0

        origin = MessageOrigin(
            channel=channel_id,
            user=event.get("user"),
            thread_ts=event.get("thread_ts") or event.get("ts"),
            team=event.get("team"),
        )
        LOGGER.info("Received command in channel %s from user %s: %s", channel_id, origin.user, text)
        return self._dispatcher.handle_text(text, origin)

    async def drain(self) -> None:
        if self._reporter is not None:
            await self._reporter.drain()
