"""Tokenizer for prefixed chat commands.

Supported syntax::

    !identifier --flag -key value raw "quoted raw"

- Tokens are either a double-quoted run (spaces allowed) or a run of
  non-whitespace characters.
- `--name` adds a flag, `-name value` adds a pair, anything else is a raw
  argument. A pair key in last position gets an empty value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..errors import InvalidConfigurationError, MalformedInputError

TOKEN_PATTERN = re.compile(r'"[^"]*"|\S+')

DEFAULT_COMMAND_PREFIX = "!"
DEFAULT_FLAG_PREFIX = "--"
DEFAULT_PAIR_PREFIX = "-"


class DuplicateKeyPolicy(str, Enum):
    ERROR = "error"
    OVERWRITE = "overwrite"
    IGNORE = "ignore"


@dataclass
class ParsedInput:
    identifier: str
    flags: List[str] = field(default_factory=list)
    pairs: Dict[str, str] = field(default_factory=dict)
    raw_args: List[str] = field(default_factory=list)
    raw_text: str = ""
    argument_text: str = ""
    pair_prefix: str = DEFAULT_PAIR_PREFIX

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    def has_pair(self, key: str) -> bool:
        return key in self.pairs

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.pairs.get(key, default)

    def copy(self) -> "ParsedInput":
        """Return a copy whose containers can be mutated independently."""
        return ParsedInput(
            identifier=self.identifier,
            flags=list(self.flags),
            pairs=dict(self.pairs),
            raw_args=list(self.raw_args),
            raw_text=self.raw_text,
            argument_text=self.argument_text,
            pair_prefix=self.pair_prefix,
        )


class Tokenizer:
    """Splits raw command text into a ParsedInput using per-instance prefixes."""

    def __init__(
        self,
        command_prefix: str = DEFAULT_COMMAND_PREFIX,
        flag_prefix: str = DEFAULT_FLAG_PREFIX,
        pair_prefix: str = DEFAULT_PAIR_PREFIX,
        duplicate_keys: DuplicateKeyPolicy = DuplicateKeyPolicy.ERROR,
        strip_quotes: bool = False,
    ) -> None:
        for name, value in (
            ("command_prefix", command_prefix),
            ("flag_prefix", flag_prefix),
            ("pair_prefix", pair_prefix),
        ):
            if not value or value.strip() != value:
                raise InvalidConfigurationError(f"{name} must be a non-empty string without whitespace")
        if flag_prefix == pair_prefix:
            raise InvalidConfigurationError("flag_prefix and pair_prefix must differ")

        self.command_prefix = command_prefix
        self.flag_prefix = flag_prefix
        self.pair_prefix = pair_prefix
        self.duplicate_keys = DuplicateKeyPolicy(duplicate_keys)
        self.strip_quotes = strip_quotes

    def is_command(self, text: str) -> bool:
        return text.strip().startswith(self.command_prefix)

    def parse(self, text: str) -> ParsedInput:
        normalized = text.strip()
        if not normalized.startswith(self.command_prefix):
            raise MalformedInputError(f"Input does not start with {self.command_prefix!r}")

        raw_text = normalized[len(self.command_prefix) :]
        tokens = TOKEN_PATTERN.findall(normalized)
        identifier = tokens[0][len(self.command_prefix) :] if tokens else ""
        if not identifier:
            raise MalformedInputError("Input contains no command identifier")

        parsed = ParsedInput(
            identifier=identifier,
            raw_text=raw_text,
            argument_text=raw_text[len(identifier) :].strip(),
            pair_prefix=self.pair_prefix,
        )

        remaining = tokens[1:]
        index = 0
        while index < len(remaining):
            token = remaining[index]
            # The flag prefix usually starts with the pair prefix, so it is checked first.
            if token.startswith(self.flag_prefix):
                parsed.flags.append(token[len(self.flag_prefix) :])
            elif token.startswith(self.pair_prefix):
                key = token[len(self.pair_prefix) :]
                value = ""
                if index + 1 < len(remaining):
                    value = self._unquote(remaining[index + 1])
                    index += 1
                self._add_pair(parsed.pairs, key, value)
            else:
                parsed.raw_args.append(self._unquote(token))
            index += 1
        return parsed

    def _add_pair(self, pairs: Dict[str, str], key: str, value: str) -> None:
        if key in pairs:
            if self.duplicate_keys is DuplicateKeyPolicy.ERROR:
                raise MalformedInputError(f"Parameter `{key}` was supplied more than once")
            if self.duplicate_keys is DuplicateKeyPolicy.IGNORE:
                return
        pairs[key] = value

    def _unquote(self, token: str) -> str:
        if self.strip_quotes and len(token) >= 2 and token.startswith('"') and token.endswith('"'):
            return token[1:-1]
        return token


def parse(prefix: str, text: str) -> ParsedInput:
    """Tokenize `text` with the given command prefix and default flag/pair prefixes."""
    return Tokenizer(command_prefix=prefix).parse(text)
