"""Configuration management module.

This module loads user defaults from ~/.azssh/config.toml and owns the
on-disk layout of generated SSH material.

Example config.toml:

    default_client = "openssh"
    keys_subfolder = "az_ssh_keys"
    prefer_private_ip = true
    ssh_dir = "~/.ssh/azssh"

Security:
- Generated directories are created owner-only (0700)
- Keys subfolder must be a plain directory name (no path traversal)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli

from azssh.client_resolver import ClientChoice
from azssh.exceptions import ConfigError
from azssh.ssh_config import GeneratedConfig

logger = logging.getLogger(__name__)

DEFAULT_SSH_DIR = "~/.ssh/azssh"
DEFAULT_KEYS_SUBFOLDER = "az_ssh_keys"
CONFIG_FILE_NAME = "az_ssh_config"


@dataclass
class AzsshConfig:
    """azssh configuration data."""

    default_client: str = ClientChoice.AUTO.value
    keys_subfolder: str = DEFAULT_KEYS_SUBFOLDER
    prefer_private_ip: bool = False
    ssh_dir: str = DEFAULT_SSH_DIR

    @property
    def client_choice(self) -> ClientChoice:
        return ClientChoice(self.default_client)

    @property
    def ssh_dir_path(self) -> Path:
        return Path(self.ssh_dir).expanduser()

    def generated_config(self, keys_subfolder: str | None = None) -> GeneratedConfig:
        """Config file and keys directory for this run."""
        subfolder = validate_keys_subfolder(keys_subfolder or self.keys_subfolder)
        return GeneratedConfig(
            config_path=self.ssh_dir_path / CONFIG_FILE_NAME,
            keys_dir=self.ssh_dir_path / subfolder,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AzsshConfig":
        """Create from dictionary, validating values.

        Raises:
            ConfigError: If a value is invalid
        """
        config = cls(
            default_client=str(data.get("default_client", ClientChoice.AUTO.value)).lower(),
            keys_subfolder=str(data.get("keys_subfolder", DEFAULT_KEYS_SUBFOLDER)),
            prefer_private_ip=bool(data.get("prefer_private_ip", False)),
            ssh_dir=str(data.get("ssh_dir", DEFAULT_SSH_DIR)),
        )

        if config.default_client not in ClientChoice.values():
            raise ConfigError(
                f"Invalid default_client '{config.default_client}'. "
                f"Expected one of: {', '.join(ClientChoice.values())}"
            )
        validate_keys_subfolder(config.keys_subfolder)

        unknown = set(data) - {"default_client", "keys_subfolder", "prefer_private_ip", "ssh_dir"}
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

        return config


def validate_keys_subfolder(name: str) -> str:
    """Ensure the keys subfolder is a single directory name.

    Raises:
        ConfigError: If the name is empty or contains path components
    """
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ConfigError(f"Invalid keys subfolder '{name}': must be a plain directory name")
    return name


class ConfigManager:
    """Manage azssh configuration file.

    Configuration is read from ~/.azssh/config.toml. A missing file means
    defaults.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".azssh"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Raises:
            ConfigError: If a custom path is given but does not exist
        """
        if custom_path:
            path = Path(custom_path).expanduser().resolve()
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            return path

        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> AzsshConfig:
        """Load configuration from file.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            AzsshConfig object

        Raises:
            ConfigError: If loading fails
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            logger.debug("Config file not found, using defaults")
            return AzsshConfig()

        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)
        except (OSError, tomli.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load config {config_path}: {e}") from e

        logger.debug(f"Loaded config from: {config_path}")
        return AzsshConfig.from_dict(data)

    @classmethod
    def ensure_ssh_dirs(cls, generated: GeneratedConfig) -> GeneratedConfig:
        """Create the config directory and keys directory if missing.

        Returns:
            The same GeneratedConfig, now backed by existing directories

        Raises:
            ConfigError: If directory creation fails
        """
        try:
            for directory in (generated.config_path.parent, generated.keys_dir):
                directory.mkdir(parents=True, exist_ok=True)
                # Set secure permissions (owner only: rwx------)
                os.chmod(directory, 0o700)
        except OSError as e:
            raise ConfigError(f"Failed to create SSH directories: {e}") from e

        logger.debug(f"SSH directories ready: {generated.keys_dir}")
        return generated


__all__ = ["AzsshConfig", "ConfigManager", "validate_keys_subfolder"]
