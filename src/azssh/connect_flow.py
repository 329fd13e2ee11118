"""Connect flow orchestration.

Sequences one azssh run:

    ToolPresent -> LoggedIn -> ExtensionPresent -> FoldersReady ->
    ClientsDetected -> (interactive selection | direct parameters) ->
    ClientResolved -> CredentialsProvisioned -> Connected

Each step is a gate for the next; the first AzsshError aborts the run and
is reported by the CLI. Nothing is retried except the single re-check after
az login.
"""

import logging
from dataclasses import dataclass

from azssh.azure_auth import AzureAuthenticator
from azssh.client_resolver import ClientChoice, ClientResolver
from azssh.config_manager import AzsshConfig, ConfigManager
from azssh.exceptions import NoSubscriptionsError, NoVMsError
from azssh.modules.client_detector import ClientAvailability, ClientDetector, SSHClient
from azssh.modules.interaction_handler import InteractionHandler, SelectableItem
from azssh.modules.prerequisites import PrerequisiteChecker
from azssh.modules.ssh_connector import SSHConnector
from azssh.ssh_config import ConnectionTarget, CredentialProvisioner
from azssh.vm_manager import VMInfo, VMManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectOptions:
    """Resolved command-line options for one run."""

    resource_group: str | None = None
    vm_name: str | None = None
    client: ClientChoice = ClientChoice.AUTO
    interactive: bool = False
    prefer_private_ip: bool = False
    keys_subfolder: str | None = None
    subscription_id: str | None = None


class ConnectFlow:
    """Run the full check -> select -> provision -> connect sequence.

    Collaborators are injectable so tests can observe each step.
    """

    def __init__(
        self,
        handler: InteractionHandler,
        config: AzsshConfig | None = None,
        detector: ClientDetector | None = None,
        authenticator: AzureAuthenticator | None = None,
        vm_manager: type[VMManager] = VMManager,
        provisioner: type[CredentialProvisioner] = CredentialProvisioner,
        connector: type[SSHConnector] = SSHConnector,
        prerequisites: type[PrerequisiteChecker] = PrerequisiteChecker,
    ):
        self.handler = handler
        self.config = config or AzsshConfig()
        self.detector = detector or ClientDetector()
        self.authenticator = authenticator or AzureAuthenticator()
        self.vm_manager = vm_manager
        self.provisioner = provisioner
        self.connector = connector
        self.prerequisites = prerequisites

    def run(self, options: ConnectOptions) -> int:
        """Execute the flow.

        Returns:
            int: SSH session exit code

        Raises:
            AzsshError: Any failure along the way
        """
        self.prerequisites.ensure_available()
        self.authenticator.ensure_logged_in()
        self.authenticator.ensure_extension()

        generated = ConfigManager.ensure_ssh_dirs(
            self.config.generated_config(options.keys_subfolder)
        )

        availability = self.detector.detect()

        if options.interactive:
            self._warn_if_parameters_ignored(options)
            target = self._select_target_interactively()
            client = self._resolve_client_interactively(availability, options.client)
        else:
            target = self._target_from_parameters(options)
            client = ClientResolver.resolve(availability, options.client)

        client = ClientResolver.ensure_supported(client)
        logger.debug(f"Resolved client: {client.value}")

        alias = self.provisioner.provision(target, generated, options.prefer_private_ip)
        return self.connector.connect(client, generated.config_path, alias, self.detector)

    def _resolve_client_interactively(
        self, availability: ClientAvailability, choice: ClientChoice
    ) -> SSHClient:
        if choice is ClientChoice.AUTO:
            return ClientResolver.choose_interactively(availability, self.handler)
        return ClientResolver.resolve(availability, choice)

    def _target_from_parameters(self, options: ConnectOptions) -> ConnectionTarget:
        resource_group = options.resource_group or self.handler.prompt_text("Resource group")
        vm_name = options.vm_name or self.handler.prompt_text("VM name")
        return ConnectionTarget(
            resource_group=resource_group,
            vm_name=vm_name,
            subscription_id=options.subscription_id,
        )

    def _select_target_interactively(self) -> ConnectionTarget:
        subscriptions = self.vm_manager.list_subscriptions()
        if not subscriptions:
            raise NoSubscriptionsError(
                "No enabled subscriptions found for the signed-in account."
            )

        subscription = self.handler.select(
            "Select subscription:",
            SelectableItem.from_values(subscriptions, label=lambda sub: sub.display_name),
        ).value
        self.vm_manager.set_subscription(subscription.id)

        vms = self.vm_manager.list_vms(subscription.id)
        if not vms:
            raise NoVMsError(f"No virtual machines found in subscription '{subscription.name}'.")

        groups = self.vm_manager.group_by_resource_group(vms)
        if len(groups) == 1:
            candidates = next(iter(groups.values()))
        else:
            resource_group = self.handler.select(
                "Select resource group:",
                SelectableItem.from_values(
                    groups, label=lambda rg: f"{rg} ({len(groups[rg])} VMs)"
                ),
            ).value
            candidates = groups[resource_group]

        vm = self.handler.select(
            "Select VM:",
            SelectableItem.from_values(candidates, label=lambda vm: vm.display_name),
        ).value
        self._warn_if_not_running(vm)

        return ConnectionTarget(
            resource_group=vm.resource_group,
            vm_name=vm.name,
            subscription_id=subscription.id,
        )

    def _warn_if_parameters_ignored(self, options: ConnectOptions) -> None:
        ignored = [
            flag
            for flag, value in (
                ("--resource-group", options.resource_group),
                ("--vm-name", options.vm_name),
                ("--subscription", options.subscription_id),
            )
            if value
        ]
        if ignored:
            self.handler.show_warning(
                f"Ignoring {', '.join(ignored)} in interactive mode; choose from the menus instead."
            )

    def _warn_if_not_running(self, vm: VMInfo) -> None:
        if not vm.is_running():
            self.handler.show_warning(
                f"{vm.name} is '{vm.power_state}'. Start it first or the connection will fail."
            )


__all__ = ["ConnectFlow", "ConnectOptions"]
