"""Shared data passed to command handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..errors import ConversionError
from .parser import ParsedInput

if TYPE_CHECKING:
    from ..reporting import Reporter


@dataclass(frozen=True)
class MessageOrigin:
    """Where a command came from. Opaque to the routing core."""

    channel: Optional[str] = None
    user: Optional[str] = None
    thread_ts: Optional[str] = None
    team: Optional[str] = None


class CommandContext:
    """The resolved view of one parsed input, handed to a command's handler."""

    def __init__(
        self,
        parsed: ParsedInput,
        reporter: Optional["Reporter"] = None,
        origin: Optional[MessageOrigin] = None,
    ) -> None:
        self.parsed = parsed
        self.origin = origin or MessageOrigin()
        self._reporter = reporter

    @property
    def identifier(self) -> str:
        return self.parsed.identifier

    @property
    def pairs(self) -> Dict[str, str]:
        return self.parsed.pairs

    @property
    def flags(self) -> List[str]:
        return self.parsed.flags

    @property
    def raw_args(self) -> List[str]:
        return self.parsed.raw_args

    @property
    def channel(self) -> Optional[str]:
        return self.origin.channel

    @property
    def user(self) -> Optional[str]:
        return self.origin.user

    @property
    def thread_ts(self) -> Optional[str]:
        return self.origin.thread_ts

    def complain(self, message: str) -> None:
        self._require_reporter().report_failure(self.origin, message)

    def inform(self, message: str) -> None:
        self._require_reporter().report_info(self.origin, message)

    def send(self, value: Any) -> None:
        self._require_reporter().send_output(self.origin, value)

    def reply(self, text: str) -> None:
        if text == "":
            return
        self.send(text)

    def reply_to_user(self, text: str) -> None:
        self._require_reporter().send_direct(self.origin, text)

    def get_as_number(self, param: str) -> float:
        """Return pair `param` as a float, raising ConversionError if it is missing or not numeric."""
        if not self.parsed.has_pair(param):
            raise ConversionError(param, f"The argument {param} does not exist.")
        raw = self.parsed.pairs[param]
        try:
            return float(raw)
        except ValueError as exc:
            raise ConversionError(param, f"Could not convert {param} to a number.") from exc

    def try_get_as_number(self, param: str) -> Optional[float]:
        try:
            return self.get_as_number(param)
        except ConversionError:
            return None

    def get_as_int(self, param: str) -> int:
        raw = self.parsed.pairs.get(param)
        if raw is not None:
            try:
                return int(raw)
            except ValueError:
                pass
        # Fall back to float parsing for values such as "7.0" or "1e3".
        value = self.get_as_number(param)
        if not value.is_integer():
            raise ConversionError(param, f"Could not convert {param} to an integer.")
        return int(value)

    def _require_reporter(self) -> "Reporter":
        if self._reporter is None:
            raise RuntimeError("reporter not bound for command context")
        return self._reporter
