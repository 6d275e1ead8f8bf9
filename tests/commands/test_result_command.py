"""Tests for ResultCommand and the Result union."""

from __future__ import annotations

import pytest

from cmdroute.core.commands.result import Failure, Result, ResultCommand, Success
from cmdroute.core.errors import InvalidConfigurationError


class TestResult:
    def test_constructors(self):
        assert Result.success(3) == Success(3)
        assert Result.failure("nope") == Failure("nope")
        assert Result.failure() == Failure(None)
        assert not Result.success(None).failed
        assert Result.failure().failed


class TestResultCommand:
    """Process/complete pipeline."""

    def test_success_sent_to_output_by_default(self, make_context, reporter):
        command = ResultCommand[int]("count").process(lambda ctx: Result.success(len(ctx.raw_args)))

        command.invoke(make_context("!count a b c"))

        assert reporter.events == [("output", 3)]

    def test_success_goes_to_completion(self, make_context, reporter):
        received = []
        command = (
            ResultCommand[str]("shout")
            .process(lambda ctx: Result.success(ctx.parsed.argument_text.upper()))
            .completed(lambda ctx, result: received.append(result.value))
        )

        command.invoke(make_context("!shout hey there"))

        assert received == ["HEY THERE"]
        assert reporter.events == []

    def test_failure_with_message_reported_once(self, make_context, reporter):
        completed = []
        command = (
            ResultCommand[int]("fail")
            .process(lambda ctx: Result.failure("bad input"))
            .completed(lambda ctx, result: completed.append(result))
        )

        command.invoke(make_context("!fail"))

        assert reporter.events == [("failure", "bad input")]
        assert completed == []

    def test_failure_without_message_is_silent(self, make_context, reporter):
        completed = []
        command = (
            ResultCommand[int]("quiet")
            .process(lambda ctx: Result.failure())
            .completed(lambda ctx, result: completed.append(result))
        )

        command.invoke(make_context("!quiet"))

        assert reporter.events == []
        assert completed == []

    def test_bare_value_is_not_wrapped(self, make_context):
        command = ResultCommand[int]("raw").process(lambda ctx: 42)
        with pytest.raises(TypeError):
            command.invoke(make_context("!raw"))

    def test_validation_runs_before_process(self, make_context, reporter):
        processed = []
        command = (
            ResultCommand[int]("needs")
            .require_params("n")
            .process(lambda ctx: processed.append(ctx) or Result.success(1))
        )

        command.invoke(make_context("!needs"))

        assert processed == []
        assert len(reporter.failures) == 1

    def test_process_required_for_registration(self):
        with pytest.raises(InvalidConfigurationError):
            ResultCommand("empty").validate_definition()

    def test_do_is_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            ResultCommand("x").do(lambda ctx: None)

    def test_none_process_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            ResultCommand("x").process(None)
