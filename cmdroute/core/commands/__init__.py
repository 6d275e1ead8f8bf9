"""Command tokenizing, validation and dispatch."""

from .base import Command, Precondition
from .context import CommandContext, MessageOrigin
from .dispatcher import CommandDispatcher
from .help import HelpCommand
from .parser import DuplicateKeyPolicy, ParsedInput, Tokenizer, parse
from .result import Failure, Result, ResultCommand, Success

__all__ = [
    "Command",
    "Precondition",
    "CommandContext",
    "MessageOrigin",
    "CommandDispatcher",
    "HelpCommand",
    "DuplicateKeyPolicy",
    "ParsedInput",
    "Tokenizer",
    "parse",
    "Failure",
    "Result",
    "ResultCommand",
    "Success",
]
