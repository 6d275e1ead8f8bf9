"""Configuration loader."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .commands.parser import (
    DEFAULT_COMMAND_PREFIX,
    DEFAULT_FLAG_PREFIX,
    DEFAULT_PAIR_PREFIX,
    DuplicateKeyPolicy,
    Tokenizer,
)
from .errors import ConfigurationError, InvalidConfigurationError

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path("~/.cmdroute").expanduser()
ENV_FILE_NAME = ".env"
SETTINGS_FILE = "cmdroute.yaml"


@dataclass
class Config:
    command_prefix: str = DEFAULT_COMMAND_PREFIX
    flag_prefix: str = DEFAULT_FLAG_PREFIX
    pair_prefix: str = DEFAULT_PAIR_PREFIX
    duplicate_keys: DuplicateKeyPolicy = DuplicateKeyPolicy.ERROR
    strip_quotes: bool = False
    help_file: Optional[Path] = None
    slack_bot_token: Optional[str] = None
    slack_app_token: Optional[str] = None
    slack_allowed_user_ids: list[str] = field(default_factory=list)
    config_dir: Optional[Path] = None

    def build_tokenizer(self) -> Tokenizer:
        try:
            return Tokenizer(
                command_prefix=self.command_prefix,
                flag_prefix=self.flag_prefix,
                pair_prefix=self.pair_prefix,
                duplicate_keys=self.duplicate_keys,
                strip_quotes=self.strip_quotes,
            )
        except InvalidConfigurationError as exc:
            raise ConfigurationError(f"Invalid prefix settings: {exc}") from exc

    def require_slack(self) -> None:
        """Raise ConfigurationError unless the Slack credentials are present."""
        if not self.slack_bot_token:
            raise ConfigurationError("SLACK_BOT_TOKEN is not set")
        if not self.slack_app_token:
            raise ConfigurationError("SLACK_APP_TOKEN is not set")
        if not self.slack_allowed_user_ids:
            raise ConfigurationError("SLACK_ALLOWED_USER_IDS must be set")


def resolve_config_dir(config_dir: Path | str | None) -> Path:
    """Resolve and validate the directory containing .env + cmdroute.yaml."""
    target = (
        Path(config_dir).expanduser() if config_dir else DEFAULT_CONFIG_DIR
    ).resolve()
    if not target.exists():
        raise ConfigurationError(
            f"Config directory {target} does not exist. "
            "Create it and add .env and cmdroute.yaml."
        )
    if not target.is_dir():
        raise ConfigurationError(f"Config directory {target} is not a directory")
    return target


def load_config(config_dir: Path | str | None = None) -> Config:
    """Load cmdroute configuration from the provided or default directory."""
    root = resolve_config_dir(config_dir)
    _load_env_file(root / ENV_FILE_NAME)
    settings = _load_settings(root / SETTINGS_FILE)

    config = Config(
        command_prefix=_get_str(settings, "command_prefix", DEFAULT_COMMAND_PREFIX),
        flag_prefix=_get_str(settings, "flag_prefix", DEFAULT_FLAG_PREFIX),
        pair_prefix=_get_str(settings, "pair_prefix", DEFAULT_PAIR_PREFIX),
        duplicate_keys=_parse_duplicate_keys(settings.get("duplicate_keys")),
        strip_quotes=_get_bool(settings, "strip_quotes", False),
        help_file=_resolve_help_file(root, settings.get("help_file")),
        slack_bot_token=os.getenv("SLACK_BOT_TOKEN"),
        slack_app_token=os.getenv("SLACK_APP_TOKEN"),
        slack_allowed_user_ids=_load_allowed_user_ids(),
        config_dir=root,
    )
    # Fail early on bad prefixes rather than on the first message.
    config.build_tokenizer()
    return config


def _load_env_file(path: Path) -> None:
    if not path.exists():
        LOGGER.warning("No .env file found at %s; relying on shell environment.", path)
        return
    load_dotenv(dotenv_path=path, override=False)


def _load_settings(path: Path) -> Dict[str, Any]:
    if not path.exists():
        LOGGER.warning("No %s found at %s; using default prefixes.", SETTINGS_FILE, path)
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Failed to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid {SETTINGS_FILE} structure at {path}")
    return data


def _get_str(settings: Dict[str, Any], key: str, default: str) -> str:
    value = settings.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"{key} must be a non-empty string")
    return value


def _get_bool(settings: Dict[str, Any], key: str, default: bool) -> bool:
    value = settings.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"{key} must be true or false")
    return value


def _parse_duplicate_keys(value: Any) -> DuplicateKeyPolicy:
    if value is None:
        return DuplicateKeyPolicy.ERROR
    try:
        return DuplicateKeyPolicy(str(value).lower())
    except ValueError as exc:
        allowed = ", ".join(policy.value for policy in DuplicateKeyPolicy)
        raise ConfigurationError(f"Unsupported duplicate_keys {value!r}; expected one of {allowed}") from exc


def _resolve_help_file(root: Path, value: Any) -> Optional[Path]:
    if not value:
        return None
    path = Path(str(value)).expanduser()
    if not path.is_absolute():
        path = (root / path).resolve()
    return path


def _load_allowed_user_ids() -> list[str]:
    raw_value = os.getenv("SLACK_ALLOWED_USER_IDS") or os.getenv("SLACK_ALLOWED_USER_ID")
    if not raw_value:
        return []
    return [uid.strip() for uid in raw_value.split(",") if uid.strip()]
