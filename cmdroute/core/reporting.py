"""Outbound reporting channels used by commands.

The core only calls the synchronous methods of `Reporter`; delivering the
messages is the transport's business. `AdapterReporter` starts one asyncio
task per message and does not wait for it, so messages emitted during one
dispatch may arrive out of order.
"""

from __future__ import annotations

import abc
import asyncio
import logging
from typing import Any, Coroutine, Optional, Set

from ..chat_adapters.i_chat_adapter import IChatAdapter
from .commands.context import MessageOrigin

LOGGER = logging.getLogger(__name__)

FAILURE_MARKER = ":exclamation:"
INFO_MARKER = ":information_source:"


class Reporter(abc.ABC):
    """User-visible channels a command can write to."""

    @abc.abstractmethod
    def report_failure(self, origin: Optional[MessageOrigin], message: str) -> None:
        """Send an error message back to where the command came from."""

    @abc.abstractmethod
    def report_info(self, origin: Optional[MessageOrigin], message: str) -> None:
        """Send an informational message back to where the command came from."""

    @abc.abstractmethod
    def send_output(self, origin: Optional[MessageOrigin], value: Any) -> None:
        """Send a command's result, converted to text."""

    @abc.abstractmethod
    def send_direct(self, origin: Optional[MessageOrigin], message: str) -> None:
        """Send a private message to the user who issued the command."""


class AdapterReporter(Reporter):
    """Reporter that schedules sends on a chat adapter without awaiting them."""

    def __init__(self, adapter: IChatAdapter) -> None:
        self._adapter = adapter
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def report_failure(self, origin: Optional[MessageOrigin], message: str) -> None:
        self._post(origin, f"{FAILURE_MARKER} {message}")

    def report_info(self, origin: Optional[MessageOrigin], message: str) -> None:
        self._post(origin, f"{INFO_MARKER} {message}")

    def send_output(self, origin: Optional[MessageOrigin], value: Any) -> None:
        text = "" if value is None else str(value)
        if not text:
            LOGGER.debug("Dropping empty output")
            return
        self._post(origin, text)

    def send_direct(self, origin: Optional[MessageOrigin], message: str) -> None:
        if origin is None or not origin.user:
            LOGGER.warning("Cannot send a direct message without a user; dropping it")
            return
        self._spawn(self._adapter.send_direct_message(origin.user, message))

    async def drain(self) -> None:
        """Wait for every message scheduled so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _post(self, origin: Optional[MessageOrigin], text: str) -> None:
        if origin is None or not origin.channel:
            LOGGER.warning("Cannot send a message without a channel; dropping it")
            return
        self._spawn(self._adapter.send_message(origin.channel, origin.thread_ts, text))

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            raise
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Failed to deliver message: %s", exc, exc_info=exc)
