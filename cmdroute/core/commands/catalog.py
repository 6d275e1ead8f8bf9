"""Built-in commands shipped with the daemon."""

from __future__ import annotations

import logging
from typing import List, Optional

from .base import Command
from .context import CommandContext
from .help import HelpCommand
from .result import Failure, Result, ResultCommand, Success

LOGGER = logging.getLogger(__name__)

DEFAULT_HELP = {
    "ping": "!ping\nReplies with pong.",
    "echo": "!echo <text>\nRepeats the text back to the channel.",
    "sum": "!sum -a <number> [-b <number>]\nAdds two numbers (b defaults to 0).",
}


def handle_ping(context: CommandContext) -> None:
    LOGGER.info("Executing !ping in channel %s", context.channel)
    context.reply("pong")


def handle_echo(context: CommandContext) -> None:
    context.reply(context.parsed.argument_text)


def process_sum(context: CommandContext) -> Success[float] | Failure:
    a = context.try_get_as_number("a")
    b = context.try_get_as_number("b")
    if a is None or b is None:
        return Result.failure("Both `a` and `b` must be numbers.")
    return Result.success(a + b)


def present_sum(context: CommandContext, result: Success[float]) -> None:
    value = result.value
    rendered = str(int(value)) if value.is_integer() else str(value)
    context.reply(f"= {rendered}")


def build_default_commands(help_command: Optional[HelpCommand] = None) -> List[Command]:
    """Return the built-in commands, using `help_command` when one was loaded from disk."""
    help_command = help_command or HelpCommand(entries=DEFAULT_HELP)
    return [
        Command("ping").do(handle_ping),
        Command("echo")
        .require(lambda ctx: bool(ctx.parsed.argument_text), "Nothing to echo.")
        .do(handle_echo),
        ResultCommand[float]("sum")
        .require_params("a")
        .set_default("b", "0")
        .process(process_sum)
        .completed(present_sum),
        help_command,
    ]
