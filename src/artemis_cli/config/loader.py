"""Loads and saves the TOML configuration file."""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from ..errors import ConfigError
from ..utils.files import ensure_dir
from ..utils.logging import get_logger
from .models import ArtemisConfig

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/artemis-cli/config.toml")
BASE_URL_ENV_VAR = "ARTEMIS_BASE_URL"


class ConfigLoader:
    """Reads and writes the configuration file."""

    def __init__(self, path: Path | None = None):
        """Initialize the config loader.

        Args:
            path: Location of the config file. Defaults to
                ~/.config/artemis-cli/config.toml
        """
        self.path = (path or DEFAULT_CONFIG_PATH).expanduser()

    def load(self) -> ArtemisConfig:
        """Load the configuration, creating a default file if none exists.

        Returns:
            Parsed ArtemisConfig object

        Raises:
            ConfigError: If the file exists but cannot be parsed
        """
        if not self.path.exists():
            logger.warning(
                f"Config not found at {self.path}, you might need to run "
                "'artemis-cli config base-url [BASEURL]' first"
            )
            config = ArtemisConfig()
            self.save(config)
            logger.warning(f"Using default options: {config}")
        else:
            data = self._load_toml(self.path)
            try:
                config = ArtemisConfig.from_dict(data)
            except (AttributeError, TypeError, ValueError) as e:
                raise ConfigError(f"Invalid value in config file {self.path}: {e}") from e

        override = os.environ.get(BASE_URL_ENV_VAR)
        if override:
            logger.debug(f"Base URL overridden by {BASE_URL_ENV_VAR}")
            config.base_url = override.rstrip("/")

        return config

    def save(self, config: ArtemisConfig) -> Path:
        """Write the configuration file, replacing any existing one.

        Args:
            config: Configuration to store

        Returns:
            Path the configuration was written to
        """
        ensure_dir(self.path.parent)
        with open(self.path, "wb") as f:
            tomli_w.dump(config.to_dict(), f)
        logger.debug(f"Saved config to {self.path}")
        return self.path

    def _load_toml(self, path: Path) -> dict[str, Any]:
        """Load and parse a TOML file."""
        try:
            with open(path, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Can't parse config file {path}: {e}") from e
