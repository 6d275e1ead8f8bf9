"""Adapter that writes replies to a text stream, for local runs."""

from __future__ import annotations

import asyncio
import sys
from typing import Optional, TextIO

from .i_chat_adapter import IChatAdapter


class ConsoleAdapter(IChatAdapter):
    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream or sys.stdout
        self._stop_event = asyncio.Event()

    async def send_message(self, channel: str, thread_ts: Optional[str], text: str) -> Optional[str]:
        self._stream.write(f"[{channel}] {text}\n")
        return None

    async def send_direct_message(self, user: str, text: str) -> Optional[str]:
        self._stream.write(f"[@{user}] {text}\n")
        return None

    async def start(self) -> None:
        await self._stop_event.wait()

    async def stop(self) -> None:
        self._stop_event.set()
