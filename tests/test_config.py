"""Tests for configuration loading."""

from __future__ import annotations

import pytest

from cmdroute.core.commands.parser import DuplicateKeyPolicy
from cmdroute.core.config import Config, load_config, resolve_config_dir
from cmdroute.core.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so the variables are removed again after dotenv populates them
    for name in ("SLACK_BOT_TOKEN", "SLACK_APP_TOKEN", "SLACK_ALLOWED_USER_IDS", "SLACK_ALLOWED_USER_ID"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults_without_settings_file(tmp_path):
    config = load_config(tmp_path)
    assert config.command_prefix == "!"
    assert config.flag_prefix == "--"
    assert config.pair_prefix == "-"
    assert config.duplicate_keys is DuplicateKeyPolicy.ERROR
    assert config.help_file is None
    assert config.config_dir == tmp_path.resolve()


def test_settings_file(tmp_path):
    (tmp_path / "cmdroute.yaml").write_text(
        "command_prefix: '?'\n"
        "flag_prefix: '++'\n"
        "pair_prefix: '+'\n"
        "duplicate_keys: overwrite\n"
        "strip_quotes: true\n"
        "help_file: help.json\n",
        encoding="utf-8",
    )
    config = load_config(tmp_path)

    assert config.command_prefix == "?"
    assert config.duplicate_keys is DuplicateKeyPolicy.OVERWRITE
    assert config.strip_quotes is True
    assert config.help_file == (tmp_path / "help.json").resolve()

    parsed = config.build_tokenizer().parse('?roll ++loud +d "6" +d 8')
    assert parsed.flags == ["loud"]
    assert parsed.pairs == {"d": "8"}


def test_env_file_loaded(tmp_path):
    (tmp_path / ".env").write_text(
        "SLACK_BOT_TOKEN=xoxb-1\nSLACK_APP_TOKEN=xapp-1\nSLACK_ALLOWED_USER_IDS=U1, U2\n",
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    config.require_slack()
    assert config.slack_bot_token == "xoxb-1"
    assert config.slack_allowed_user_ids == ["U1", "U2"]


def test_require_slack_without_tokens():
    with pytest.raises(ConfigurationError):
        Config().require_slack()


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "command_prefix: ''\n",
        "duplicate_keys: sometimes\n",
        "flag_prefix: '-'\npair_prefix: '-'\n",
        "command_prefix: [unclosed\n",
        "strip_quotes: \"no\"\n",
        "strip_quotes: 1\n",
    ],
)
def test_invalid_settings(tmp_path, content):
    (tmp_path / "cmdroute.yaml").write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(tmp_path)


def test_missing_config_dir(tmp_path):
    with pytest.raises(ConfigurationError):
        resolve_config_dir(tmp_path / "missing")


def test_config_dir_must_be_directory(tmp_path):
    target = tmp_path / "file"
    target.write_text("", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        resolve_config_dir(target)
