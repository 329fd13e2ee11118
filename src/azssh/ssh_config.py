"""Certificate-backed SSH config generation.

Wraps `az ssh config`, which signs in-memory keys with an Entra ID
certificate, writes them to a keys folder, and emits an OpenSSH config
stanza for the VM. The Host alias of that stanza is what the SSH client
connects to.

The config file and keys are overwritten on every run: certificates are
short-lived, so nothing is reused between invocations.
"""

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from azssh.azure_cli_executor import run_az_command
from azssh.exceptions import HostAliasError, ProvisioningError

logger = logging.getLogger(__name__)

HOST_LINE_PATTERN = re.compile(r"^Host\s+(\S+)")


@dataclass(frozen=True)
class ConnectionTarget:
    """VM to connect to, plus the subscription it lives in."""

    resource_group: str
    vm_name: str
    subscription_id: str | None = None


@dataclass(frozen=True)
class GeneratedConfig:
    """Where az ssh config writes its output."""

    config_path: Path
    keys_dir: Path


def extract_host_alias(config_path: Path) -> str:
    """
    Return the alias of the first Host stanza in an SSH config file.

    Args:
        config_path: Generated SSH config

    Returns:
        str: Token following "Host"

    Raises:
        HostAliasError: File missing, empty, or without a Host line

    Example:
        >>> extract_host_alias(Path("~/.ssh/azssh/az_ssh_config").expanduser())
        'rg1-vm01'
    """
    try:
        lines = config_path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise HostAliasError(f"Could not read generated SSH config {config_path}: {e}") from e

    for line in lines:
        match = HOST_LINE_PATTERN.match(line)
        if match:
            return match.group(1)

    raise HostAliasError(f"Could not determine host alias from {config_path}")


class CredentialProvisioner:
    """Issue an SSH certificate and config for one VM."""

    @classmethod
    def build_command(
        cls,
        target: ConnectionTarget,
        generated: GeneratedConfig,
        prefer_private_ip: bool = False,
    ) -> list[str]:
        """Build the az ssh config command line."""
        cmd = [
            "az",
            "ssh",
            "config",
            "--file",
            str(generated.config_path),
            "--name",
            target.vm_name,
            "--resource-group",
            target.resource_group,
            "--keys-destination-folder",
            str(generated.keys_dir),
            "--overwrite",
        ]
        if prefer_private_ip:
            cmd.append("--prefer-private-ip")
        if target.subscription_id:
            cmd.extend(["--subscription", target.subscription_id])
        return cmd

    @classmethod
    def provision(
        cls,
        target: ConnectionTarget,
        generated: GeneratedConfig,
        prefer_private_ip: bool = False,
    ) -> str:
        """
        Write a fresh SSH config and certificate, then return its Host alias.

        Args:
            target: Resource group, VM, and subscription
            generated: Config file path and keys directory (must exist)
            prefer_private_ip: Connect over the VM's private address

        Returns:
            str: Host alias to pass to the SSH client

        Raises:
            ProvisioningError: az ssh config failed
            HostAliasError: Output had no Host stanza
        """
        cmd = cls.build_command(target, generated, prefer_private_ip)
        logger.info(
            f"Generating SSH certificate for {target.vm_name} ({target.resource_group})..."
        )

        try:
            run_az_command(cmd, timeout=None)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise ProvisioningError(
                f"az ssh config failed for {target.vm_name}: {stderr or f'exit code {e.returncode}'}"
            ) from e

        alias = extract_host_alias(generated.config_path)
        logger.debug(f"Host alias: {alias}")
        return alias


__all__ = [
    "ConnectionTarget",
    "CredentialProvisioner",
    "GeneratedConfig",
    "extract_host_alias",
]
