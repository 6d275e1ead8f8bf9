"""Core routing logic for cmdroute."""

from .commands import (
    Command,
    CommandContext,
    CommandDispatcher,
    DuplicateKeyPolicy,
    Failure,
    HelpCommand,
    MessageOrigin,
    ParsedInput,
    Precondition,
    Result,
    ResultCommand,
    Success,
    Tokenizer,
    parse,
)
from .config import Config, load_config
from .errors import (
    CmdRouteError,
    ConfigurationError,
    ConversionError,
    InvalidConfigurationError,
    MalformedInputError,
    TransportError,
)
from .reporting import AdapterReporter, Reporter
from .router import Router

__all__ = [
    "Command",
    "CommandContext",
    "CommandDispatcher",
    "DuplicateKeyPolicy",
    "Failure",
    "HelpCommand",
    "MessageOrigin",
    "ParsedInput",
    "Precondition",
    "Result",
    "ResultCommand",
    "Success",
    "Tokenizer",
    "parse",
    "Config",
    "load_config",
    "CmdRouteError",
    "ConfigurationError",
    "ConversionError",
    "InvalidConfigurationError",
    "MalformedInputError",
    "TransportError",
    "AdapterReporter",
    "Reporter",
    "Router",
]
