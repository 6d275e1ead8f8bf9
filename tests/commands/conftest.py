"""Shared fixtures for command tests."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from cmdroute.core.commands.context import CommandContext, MessageOrigin
from cmdroute.core.commands.dispatcher import CommandDispatcher
from cmdroute.core.commands.parser import Tokenizer
from cmdroute.core.reporting import Reporter


class RecordingReporter(Reporter):
    """Captures every outbound event in order, tagged by channel kind."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def report_failure(self, origin: Optional[MessageOrigin], message: str) -> None:
        self.events.append(("failure", message))

    def report_info(self, origin: Optional[MessageOrigin], message: str) -> None:
        self.events.append(("info", message))

    def send_output(self, origin: Optional[MessageOrigin], value: Any) -> None:
        self.events.append(("output", value))

    def send_direct(self, origin: Optional[MessageOrigin], message: str) -> None:
        self.events.append(("direct", message))

    def of_kind(self, kind: str) -> list[Any]:
        return [payload for event_kind, payload in self.events if event_kind == kind]

    @property
    def failures(self) -> list[Any]:
        return self.of_kind("failure")

    @property
    def outputs(self) -> list[Any]:
        return self.of_kind("output")


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def origin() -> MessageOrigin:
    return MessageOrigin(channel="C123456", user="U123", thread_ts="1234567890.123456")


@pytest.fixture
def make_context(reporter, origin):
    """Build a CommandContext from a command line."""

    tokenizer = Tokenizer()

    def _make(text: str) -> CommandContext:
        return CommandContext(tokenizer.parse(text), reporter=reporter, origin=origin)

    return _make


@pytest.fixture
def dispatcher(reporter) -> CommandDispatcher:
    return CommandDispatcher(reporter=reporter)
