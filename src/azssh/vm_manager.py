"""VM and subscription queries.

This module lists subscriptions and VMs and switches the active
subscription. Delegates to Azure CLI for every operation.

Security:
- No shell=True
- Sanitized logging
"""

import json
import logging
import subprocess
from dataclasses import dataclass, field
from typing import Any

from azssh.azure_cli_executor import run_az_command
from azssh.exceptions import AzureCLIError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriptionInfo:
    """Subscription as reported by az account list."""

    id: str
    name: str
    is_default: bool = False
    tenant_id: str | None = None

    @property
    def display_name(self) -> str:
        marker = " (current)" if self.is_default else ""
        return f"{self.name} [{self.id}]{marker}"


@dataclass(frozen=True)
class VMInfo:
    """VM information from az vm list --show-details."""

    name: str
    resource_group: str
    location: str
    power_state: str
    public_ips: list[str] = field(default_factory=list)
    private_ips: list[str] = field(default_factory=list)

    def is_running(self) -> bool:
        """Check if VM is running."""
        return self.power_state == "VM running"

    @property
    def display_name(self) -> str:
        ips = ", ".join(self.public_ips or self.private_ips) or "no IP"
        return f"{self.name:<30} {self.location:<15} {self.power_state:<16} {ips}"

    @classmethod
    def from_az(cls, data: dict[str, Any]) -> "VMInfo":
        return cls(
            name=data["name"],
            resource_group=data.get("resourceGroup", ""),
            location=data.get("location", ""),
            power_state=data.get("powerState") or "unknown",
            public_ips=_split_ips(data.get("publicIps")),
            private_ips=_split_ips(data.get("privateIps")),
        )


def _split_ips(value: str | None) -> list[str]:
    # az vm list -d joins multiple addresses with commas
    if not value:
        return []
    return [ip.strip() for ip in value.split(",") if ip.strip()]


class VMManager:
    """Query subscriptions and VMs through az."""

    @classmethod
    def list_subscriptions(cls) -> list[SubscriptionInfo]:
        """List enabled subscriptions visible to the signed-in account.

        Raises:
            AzureCLIError: If the az call fails
        """
        data = cls._run_json(["az", "account", "list", "--output", "json"])
        subscriptions = [
            SubscriptionInfo(
                id=item["id"],
                name=item.get("name", item["id"]),
                is_default=bool(item.get("isDefault")),
                tenant_id=item.get("tenantId"),
            )
            for item in data
            if item.get("state", "Enabled") == "Enabled"
        ]
        logger.debug(f"Found {len(subscriptions)} subscriptions")
        return subscriptions

    @classmethod
    def set_subscription(cls, subscription_id: str) -> None:
        """Make a subscription the active az subscription.

        This mutates az CLI state shared by every az invocation of this user.

        Raises:
            AzureCLIError: If the az call fails
        """
        try:
            run_az_command(["az", "account", "set", "--subscription", subscription_id])
        except subprocess.CalledProcessError as e:
            raise AzureCLIError(
                f"Failed to set subscription {subscription_id}: {(e.stderr or '').strip()}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise AzureCLIError(f"Timed out setting subscription {subscription_id}") from e
        logger.debug(f"Active subscription set to {subscription_id}")

    @classmethod
    def list_vms(cls, subscription_id: str | None = None) -> list[VMInfo]:
        """List VMs with derived power state and IP addresses.

        Args:
            subscription_id: Subscription to query (active one if None)

        Returns:
            VMs sorted by resource group, then name

        Raises:
            AzureCLIError: If the az call fails
        """
        cmd = ["az", "vm", "list", "--show-details", "--output", "json"]
        if subscription_id:
            cmd.extend(["--subscription", subscription_id])

        vms = [VMInfo.from_az(item) for item in cls._run_json(cmd, timeout=180)]
        vms.sort(key=lambda vm: (vm.resource_group.lower(), vm.name.lower()))
        logger.debug(f"Found {len(vms)} VMs")
        return vms

    @staticmethod
    def group_by_resource_group(vms: list[VMInfo]) -> dict[str, list[VMInfo]]:
        """Group VMs by resource group, preserving input order."""
        groups: dict[str, list[VMInfo]] = {}
        for vm in vms:
            groups.setdefault(vm.resource_group, []).append(vm)
        return groups

    @staticmethod
    def _run_json(cmd: list[str], timeout: int = 60) -> list[dict[str, Any]]:
        try:
            result = run_az_command(cmd, timeout=timeout)
            return json.loads(result.stdout or "[]")
        except subprocess.CalledProcessError as e:
            raise AzureCLIError(f"'{' '.join(cmd[:3])}' failed: {(e.stderr or '').strip()}") from e
        except subprocess.TimeoutExpired as e:
            raise AzureCLIError(f"'{' '.join(cmd[:3])}' timed out") from e
        except json.JSONDecodeError as e:
            raise AzureCLIError(f"Failed to parse az output: {e}") from e


__all__ = ["SubscriptionInfo", "VMInfo", "VMManager"]
