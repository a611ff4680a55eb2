import json
from pathlib import Path

import pytest
from querybot.core.common.exceptions import ConfigurationError
from querybot.core.config.config_loader import ConfigLoader, load_document

CONFIG = {
    "channels": ["chan"],
    "username": "bot",
    "oauth": "oauth:abcdefghijkl",
    "commandchar": "!",
}



def test_load_json_config(tmp_path: Path, clean_env) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG), encoding="utf-8")

    cfg = ConfigLoader(env_file=str(tmp_path / "missing.env")).load(path)

    assert cfg.channels == ["chan"]
    assert cfg.username == "bot"


def test_load_yaml_config_with_env_override(tmp_path: Path, clean_env) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "channels: [chan]\nusername: bot\nauth_token: from-file\nquery:\n  attempts: 5\n",
        encoding="utf-8",
    )
    env_file = tmp_path / ".env"
    env_file.write_text("QUERYBOT_AUTH_TOKEN=from-dotenv\n", encoding="utf-8")

    cfg = ConfigLoader(env_file=str(env_file)).load(path)

    assert cfg.auth_token == "from-dotenv"
    assert cfg.query.attempts == 5


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        load_document(tmp_path / "nope.json")

    assert "not found" in exc_info.value.message


def test_unparsable_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{channels: [unclosed", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_document(path)


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_document(path)


def test_invalid_config_values(tmp_path: Path, clean_env) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"channels": ["chan"]}), encoding="utf-8")

    with pytest.raises(ConfigurationError) as exc_info:
        ConfigLoader(env_file=str(tmp_path / "missing.env")).load(path)

    assert exc_info.value.details["path"] == str(path)
