"""Custom exception hierarchy for cmdroute."""


class CmdRouteError(Exception):
    """Base error type."""


class InvalidConfigurationError(CmdRouteError):
    """Raised when a command is built or registered incorrectly."""


class ConfigurationError(CmdRouteError):
    """Raised when configuration files cannot be loaded."""


class MalformedInputError(CmdRouteError):
    """Raised when a line of text cannot be tokenized into a command."""


class ConversionError(CmdRouteError):
    """Raised when a parameter value cannot be converted to the requested type."""

    def __init__(self, param: str, message: str) -> None:
        super().__init__(message)
        self.param = param


class TransportError(CmdRouteError):
    pass
