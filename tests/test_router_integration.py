"""Integration tests for Router message handling."""

from __future__ import annotations

import asyncio
from typing import Dict, Optional

import pytest

from cmdroute.core.commands.base import Command
from cmdroute.core.commands.catalog import build_default_commands
from cmdroute.core.commands.parser import Tokenizer
from cmdroute.core.errors import TransportError
from cmdroute.core.reporting import AdapterReporter
from cmdroute.core.router import Router


class DummyChatAdapter:
    """Captures messages emitted by the router."""

    def __init__(self) -> None:
        self.messages: list[Dict[str, Optional[str]]] = []
        self.direct: list[Dict[str, str]] = []

    async def send_message(self, channel: str, thread_ts: Optional[str], text: str) -> None:
        self.messages.append({"channel": channel, "thread_ts": thread_ts, "text": text})

    async def send_direct_message(self, user: str, text: str) -> None:
        self.direct.append({"user": user, "text": text})


class FailingChatAdapter(DummyChatAdapter):
    async def send_message(self, channel: str, thread_ts: Optional[str], text: str) -> None:
        raise TransportError("network down")


@pytest.fixture
def router_setup():
    router = Router(build_default_commands())
    adapter = DummyChatAdapter()
    router.bind_adapter(adapter)
    return router, adapter


def _event(text: str, **extra) -> Dict[str, str]:
    event = {"channel": "C123", "user": "U123", "ts": "111.222", "text": text}
    event.update(extra)
    return event


@pytest.mark.asyncio
async def test_command_reply_sent_to_thread(router_setup):
    router, adapter = router_setup

    assert router.handle_message(_event("!ping")) == 1
    await router.drain()

    assert adapter.messages == [{"channel": "C123", "thread_ts": "111.222", "text": "pong"}]


@pytest.mark.asyncio
async def test_reply_uses_existing_thread(router_setup):
    router, adapter = router_setup

    router.handle_message(_event("!ping", thread_ts="000.111"))
    await router.drain()

    assert adapter.messages[0]["thread_ts"] == "000.111"


@pytest.mark.asyncio
async def test_mention_prefix_stripped(router_setup):
    router, adapter = router_setup

    router.handle_message(_event("<@UBOT> !sum -a 40 -b 2"))
    await router.drain()

    assert adapter.messages[-1]["text"] == "= 42"


@pytest.mark.asyncio
async def test_failures_are_marked(router_setup):
    router, adapter = router_setup

    router.handle_message(_event("!sum"))
    await router.drain()

    assert len(adapter.messages) == 1
    assert adapter.messages[0]["text"].startswith(":exclamation: Missing parameter: `a`")


@pytest.mark.asyncio
async def test_help_sent_as_direct_message(router_setup):
    router, adapter = router_setup

    router.handle_message(_event("!help ping"))
    await router.drain()

    assert adapter.messages == []
    assert adapter.direct == [{"user": "U123", "text": "!ping\nReplies with pong."}]


@pytest.mark.asyncio
async def test_plain_text_ignored(router_setup):
    router, adapter = router_setup

    assert router.handle_message(_event("hello everyone")) == 0
    assert router.handle_message(_event("")) == 0
    await router.drain()

    assert adapter.messages == []


@pytest.mark.asyncio
async def test_malformed_command_ignored(router_setup):
    router, adapter = router_setup

    assert router.handle_message(_event("! ping")) == 0
    await router.drain()

    assert adapter.messages == []


@pytest.mark.asyncio
async def test_custom_prefix():
    router = Router([Command("ping").do(lambda ctx: ctx.reply("pong"))], tokenizer=Tokenizer(command_prefix="?"))
    adapter = DummyChatAdapter()
    router.bind_adapter(adapter)

    assert router.handle_message(_event("!ping")) == 0
    assert router.handle_message(_event("?ping")) == 1
    await router.drain()

    assert [m["text"] for m in adapter.messages] == ["pong"]


@pytest.mark.asyncio
async def test_send_failure_is_logged_not_raised(caplog):
    reporter = AdapterReporter(FailingChatAdapter())
    router = Router([Command("ping").do(lambda ctx: ctx.reply("pong"))])
    router.dispatcher.bind_reporter(reporter)

    router.handle_message(_event("!ping"))
    await reporter.drain()

    assert reporter.pending == 0
    assert "Failed to deliver message" in caplog.text


@pytest.mark.asyncio
async def test_sends_are_fire_and_forget(router_setup):
    router, adapter = router_setup

    router.handle_message(_event("!ping"))
    # Nothing is delivered until the event loop gets a chance to run the task.
    assert adapter.messages == []
    assert router.reporter.pending == 1
    await asyncio.sleep(0)
    await router.drain()
    assert len(adapter.messages) == 1
