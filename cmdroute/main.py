"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
from pathlib import Path
from typing import List, Optional, Sequence

from .chat_adapters.console_adapter import ConsoleAdapter
from .core import (
    Command,
    Config,
    ConfigurationError,
    HelpCommand,
    MalformedInputError,
    MessageOrigin,
    Router,
    load_config,
)
from .core.commands.catalog import build_default_commands

LOGGER = logging.getLogger(__name__)


def cli(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        prog="cmdroute",
        description="cmdroute - prefix-command router for chat messages",
    )
    parser.add_argument(
        "--config-dir",
        help="Directory holding .env and cmdroute.yaml (default: ~/.cmdroute)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser(
        "run",
        help="Dispatch a single line against the built-in commands and print the replies",
    )
    run_parser.add_argument("line", help='Command line, e.g. "!sum -a 1 -b 2"')
    run_parser.add_argument("--user", default="local", help="User the line is sent as")

    parse_parser = subparsers.add_parser(
        "parse",
        help="Print how a line is tokenized",
    )
    parse_parser.add_argument("line", help="Command line to tokenize")

    args = parser.parse_args(argv)
    _configure_logging()

    try:
        if args.command == "run":
            config = _load_local_config(args.config_dir)
            return asyncio.run(_run_line(config, args.line, args.user))
        if args.command == "parse":
            config = _load_local_config(args.config_dir)
            return _print_parse(config, args.line)

        # Default behavior: start daemon
        asyncio.run(_run_async(args.config_dir))
    except ConfigurationError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 1
    except KeyboardInterrupt:
        LOGGER.info("Interrupted by user")
        return 130
    return 0


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)
    logging.getLogger().setLevel(log_level)


def _load_local_config(config_dir: str | None) -> Config:
    """Load config for local commands; fall back to defaults when no config dir exists."""
    if config_dir is None and not Path("~/.cmdroute").expanduser().is_dir():
        return Config()
    return load_config(config_dir)


def build_commands(config: Config) -> List[Command]:
    help_command: Optional[HelpCommand] = None
    if config.help_file is not None:
        help_command = HelpCommand.from_file(config.help_file)
    return build_default_commands(help_command)


async def _run_line(config: Config, line: str, user: str) -> int:
    router = Router(build_commands(config), tokenizer=config.build_tokenizer())
    router.bind_adapter(ConsoleAdapter())
    matched = router.dispatcher.handle_text(line, MessageOrigin(channel="console", user=user))
    await router.drain()
    if not matched:
        print("No command matched.")
        return 1
    return 0


def _print_parse(config: Config, line: str) -> int:
    try:
        parsed = config.build_tokenizer().parse(line)
    except MalformedInputError as exc:
        print(f"Malformed input: {exc}")
        return 1
    print(f"identifier: {parsed.identifier}")
    print(f"flags:      {parsed.flags}")
    print(f"pairs:      {parsed.pairs}")
    print(f"raw_args:   {parsed.raw_args}")
    print(f"arguments:  {parsed.argument_text!r}")
    return 0


async def _run_async(config_dir: str | Path | None) -> None:
    from .chat_adapters.slack_adapter import SlackAdapter

    config = load_config(config_dir)
    config.require_slack()
    LOGGER.info("Using config directory: %s", config.config_dir)

    router = Router(build_commands(config), tokenizer=config.build_tokenizer())
    slack_adapter = SlackAdapter(
        bot_token=config.slack_bot_token,
        app_token=config.slack_app_token,
        allowed_user_ids=config.slack_allowed_user_ids,
        router=router,
    )
    router.bind_adapter(slack_adapter)
    LOGGER.info(
        "Registered %s command(s) with prefix %r",
        len(router.dispatcher.commands),
        config.command_prefix,
    )

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _request_shutdown() -> None:
        LOGGER.info("Shutdown requested")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _request_shutdown)
        except NotImplementedError:
            # Windows event loops do not support signal handlers.
            pass

    slack_task = asyncio.create_task(slack_adapter.start())
    LOGGER.info("cmdroute daemon started")

    await stop_event.wait()
    await slack_adapter.stop()
    await slack_task
    await router.drain()
    LOGGER.info("Shutdown complete")


if __name__ == "__main__":
    raise SystemExit(cli())
