"""Pytest configuration and fixtures for azssh tests.

CRITICAL: Protects the user's real ~/.azssh and ~/.ssh from test runs.
"""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolate_user_home(tmp_path_factory, monkeypatch):
    """Keep every test away from the real ~/.azssh and ~/.ssh.

    HOME points at an empty directory, so "~/.ssh/azssh" expands there,
    and the default config file is looked up inside it.
    """
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))

    from azssh.config_manager import ConfigManager

    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_FILE", home / ".azssh" / "config.toml")

    return home


@pytest.fixture
def isolated_config(tmp_path):
    """Provide isolated config directory for tests.

    Use this fixture instead of touching ~/.azssh/config.toml.
    """
    config_dir = tmp_path / ".azssh"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def mock_config_path(isolated_config, monkeypatch):
    """Point ConfigManager at the isolated config file instead of ~/.azssh."""
    config_file = isolated_config / "config.toml"

    from azssh.config_manager import ConfigManager

    def mock_get_path(custom_path=None):
        if custom_path:
            return Path(custom_path)
        return config_file

    monkeypatch.setattr(ConfigManager, "get_config_path", mock_get_path)

    return config_file
