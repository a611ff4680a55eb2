import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from querybot.core.common.exceptions import ConfigurationError
from querybot.core.config.app_config import AppConfig

logger = logging.getLogger(__name__)


def load_document(path: str | Path) -> dict[str, Any]:
    """Load a YAML or JSON mapping from a file.

    Raises:
        ConfigurationError: If the file is missing, unparsable or not a mapping
    """
    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(
            message=f"Configuration file not found: {file_path}",
            details={"path": str(file_path)},
        )

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            message=f"Could not read configuration file: {exc}",
            details={"path": str(file_path)},
        ) from exc

    # JSON is a subset of YAML, so YAML first then JSON for a clearer error
    try:
        result: Any = yaml.safe_load(content)
    except yaml.YAMLError:
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                message=f"Invalid configuration file format: {exc}",
                details={"path": str(file_path)},
            ) from exc

    if result is None:
        result = {}
    if not isinstance(result, dict):
        raise ConfigurationError(
            message="Configuration file must contain a mapping at the top level",
            details={"path": str(file_path)},
        )
    return result


class ConfigLoader:
    """Loads the bot configuration from a document and the environment."""

    def __init__(self, env_file: str | None = None) -> None:
        self._env_file = env_file

    def load(self, config_file: str | Path) -> AppConfig:
        """Load and validate the configuration.

        Args:
            config_file: Path to a YAML or JSON configuration document

        Returns:
            The validated configuration

        Raises:
            ConfigurationError: If the document is missing or invalid
        """
        load_dotenv(self._env_file)
        data = load_document(config_file)
        try:
            config = AppConfig.from_mapping(data, os.environ)
        except ValidationError as exc:
            raise ConfigurationError(
                message=f"Invalid configuration in {config_file}",
                details={"path": str(config_file), "errors": exc.errors()},
            ) from exc
        logger.info("Loaded configuration from %s", config_file)
        return config
