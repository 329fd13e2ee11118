"""
Shared test fixtures and configuration for azssh tests.

This module provides common fixtures used across all test types:
- Temporary directories for generated SSH config and keys
- A scripted fake of the az CLI and ssh client (subprocess.run)
- Sample subscriptions and VMs
"""

import json
import subprocess
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from azssh.ssh_config import GeneratedConfig

# ============================================================================
# DIRECTORY FIXTURES
# ============================================================================


@pytest.fixture
def temp_ssh_dir(tmp_path):
    """Temporary azssh SSH directory (stands in for ~/.ssh/azssh)."""
    ssh_dir = tmp_path / ".ssh" / "azssh"
    ssh_dir.mkdir(parents=True, mode=0o700)
    return ssh_dir


@pytest.fixture
def generated_config(temp_ssh_dir):
    """GeneratedConfig whose keys directory already exists."""
    keys_dir = temp_ssh_dir / "az_ssh_keys"
    keys_dir.mkdir(mode=0o700)
    return GeneratedConfig(config_path=temp_ssh_dir / "az_ssh_config", keys_dir=keys_dir)


@pytest.fixture
def config_file(tmp_path, temp_ssh_dir):
    """config.toml that points ssh_dir at the temporary directory."""
    path = tmp_path / "config.toml"
    path.write_text(f'ssh_dir = "{temp_ssh_dir.as_posix()}"\n')
    return path


# ============================================================================
# SAMPLE DATA FIXTURES
# ============================================================================


@pytest.fixture
def sample_subscriptions() -> list[dict[str, Any]]:
    """Two enabled subscriptions as returned by az account list."""
    return [
        {
            "id": "11111111-1111-1111-1111-111111111111",
            "name": "Dev",
            "isDefault": True,
            "state": "Enabled",
            "tenantId": "tenant-1",
        },
        {
            "id": "22222222-2222-2222-2222-222222222222",
            "name": "Prod",
            "isDefault": False,
            "state": "Enabled",
            "tenantId": "tenant-1",
        },
    ]


@pytest.fixture
def sample_vms() -> list[dict[str, Any]]:
    """Three VMs in one resource group as returned by az vm list -d."""
    return [
        {
            "name": f"vm0{i}",
            "resourceGroup": "RG1",
            "location": "eastus",
            "powerState": "VM running",
            "publicIps": f"20.0.0.{i}",
            "privateIps": f"10.0.0.{i}",
        }
        for i in (1, 2, 3)
    ]


# ============================================================================
# SUBPROCESS MOCKING FIXTURES
# ============================================================================

SIGNED_IN_ACCOUNT = {
    "id": "11111111-1111-1111-1111-111111111111",
    "name": "Dev",
    "tenantId": "tenant-1",
    "user": {"name": "alice@contoso.com", "type": "user"},
}


class FakeAzure:
    """Scripted stand-in for subprocess.run covering az and ssh.

    Behaves like subprocess.run: honours check=True by raising
    CalledProcessError. `az ssh config` writes a real config file and key
    material (overwriting, like --overwrite), so alias extraction runs for
    real.
    """

    def __init__(
        self,
        subscriptions: list[dict[str, Any]] | None = None,
        vms: list[dict[str, Any]] | None = None,
        logged_in: bool = True,
        login_succeeds: bool = True,
        extension_installed: bool = True,
        extension_show_times_out: bool = False,
        extension_add_succeeds: bool = True,
        ssh_config_returncode: int = 0,
        ssh_config_body: str | None = None,
        ssh_returncode: int = 0,
    ):
        self.subscriptions = subscriptions or []
        self.vms = vms or []
        self.logged_in = logged_in
        self.login_succeeds = login_succeeds
        self.extension_installed = extension_installed
        self.extension_show_times_out = extension_show_times_out
        self.extension_add_succeeds = extension_add_succeeds
        self.ssh_config_returncode = ssh_config_returncode
        self.ssh_config_body = ssh_config_body
        self.ssh_returncode = ssh_returncode
        self.calls: list[list[str]] = []

    def __call__(self, cmd, *args, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)

        if cmd[0] != "az":
            return self._result(cmd, self.ssh_returncode, kwargs)

        verb = cmd[1:3]
        if verb == ["account", "show"]:
            if self.logged_in:
                return self._result(cmd, 0, kwargs, json.dumps(SIGNED_IN_ACCOUNT))
            return self._result(cmd, 1, kwargs, stderr="Please run 'az login'")
        if cmd[1] == "login":
            self.logged_in = self.login_succeeds
            return self._result(cmd, 0 if self.login_succeeds else 1, kwargs)
        if verb == ["account", "list"]:
            return self._result(cmd, 0, kwargs, json.dumps(self.subscriptions))
        if verb == ["account", "set"]:
            return self._result(cmd, 0, kwargs)
        if verb == ["extension", "show"]:
            if self.extension_show_times_out:
                raise subprocess.TimeoutExpired(cmd, kwargs.get("timeout"))
            return self._result(cmd, 0 if self.extension_installed else 1, kwargs)
        if verb == ["extension", "add"]:
            if self.extension_add_succeeds:
                self.extension_installed = True
                return self._result(cmd, 0, kwargs)
            return self._result(cmd, 1, kwargs, stderr="network unreachable")
        if verb == ["vm", "list"]:
            return self._result(cmd, 0, kwargs, json.dumps(self.vms))
        if verb == ["ssh", "config"]:
            return self._ssh_config(cmd, kwargs)

        return self._result(cmd, 1, kwargs, stderr=f"unexpected az command: {cmd}")

    def calls_matching(self, *prefix: str) -> list[list[str]]:
        return [call for call in self.calls if call[: len(prefix)] == list(prefix)]

    @property
    def provisioning_calls(self) -> list[list[str]]:
        return self.calls_matching("az", "ssh", "config")

    @property
    def ssh_calls(self) -> list[list[str]]:
        return [call for call in self.calls if call[0] != "az"]

    def _ssh_config(self, cmd, kwargs):
        if self.ssh_config_returncode != 0:
            return self._result(
                cmd, self.ssh_config_returncode, kwargs, stderr="VM not found"
            )

        config_path = Path(cmd[cmd.index("--file") + 1])
        keys_dir = Path(cmd[cmd.index("--keys-destination-folder") + 1])
        vm_name = cmd[cmd.index("--name") + 1]
        resource_group = cmd[cmd.index("--resource-group") + 1]

        (keys_dir / "id_rsa").write_text("private key")
        (keys_dir / "id_rsa.pub-aadcert.pub").write_text("certificate")

        body = self.ssh_config_body
        if body is None:
            body = (
                f"Host {resource_group}-{vm_name}\n"
                f"\tUser alice@contoso.com\n"
                f"\tHostName 20.0.0.1\n"
                f'\tCertificateFile "{keys_dir}/id_rsa.pub-aadcert.pub"\n'
                f'\tIdentityFile "{keys_dir}/id_rsa"\n'
            )
        config_path.write_text(body)
        return self._result(cmd, 0, kwargs)

    @staticmethod
    def _result(cmd, returncode, kwargs, stdout="", stderr=""):
        if kwargs.get("check") and returncode != 0:
            raise subprocess.CalledProcessError(returncode, cmd, output=stdout, stderr=stderr)
        return subprocess.CompletedProcess(
            args=cmd, returncode=returncode, stdout=stdout, stderr=stderr
        )


@pytest.fixture
def fake_azure():
    """Patch subprocess.run with a default FakeAzure (signed in, extension present)."""
    fake = FakeAzure()
    with patch("subprocess.run", side_effect=fake):
        yield fake


@pytest.fixture
def make_fake_azure():
    """Factory: patch subprocess.run with a FakeAzure built from kwargs."""
    patchers = []

    def _make(**kwargs) -> FakeAzure:
        fake = FakeAzure(**kwargs)
        patcher = patch("subprocess.run", side_effect=fake)
        patcher.start()
        patchers.append(patcher)
        return fake

    yield _make

    for patcher in patchers:
        patcher.stop()
