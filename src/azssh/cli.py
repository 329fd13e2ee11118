"""Command-line interface for azssh.

Connects to Azure Linux VMs with short-lived Entra ID SSH certificates.

Usage:
    azssh -g my-rg -n my-vm           # Direct mode
    azssh -i                          # Pick subscription / VM / client from menus
    azssh -g my-rg -n my-vm --client openssh --prefer-private-ip
"""

import logging
import sys

import click
from rich.console import Console
from rich.panel import Panel

from azssh import __version__
from azssh.client_resolver import ClientChoice
from azssh.config_manager import ConfigManager
from azssh.connect_flow import ConnectFlow, ConnectOptions
from azssh.exceptions import AzsshError, IncompatibleClientError
from azssh.modules.interaction_handler import CLIInteractionHandler

logger = logging.getLogger(__name__)

CERTIFICATE_GUIDANCE = (
    "Entra ID login issues an OpenSSH certificate, which PuTTY cannot load.\n"
    "\n"
    "Use one of:\n"
    "  - OpenSSH:   Windows 10+ 'Settings > Optional features > OpenSSH Client'\n"
    "  - MobaXterm: https://mobaxterm.mobatek.net/\n"
    "\n"
    "Then run: azssh --client openssh   (or --client mobaxterm)"
)


def _show_incompatible_client_guidance(console: Console) -> None:
    console.print(
        Panel(
            CERTIFICATE_GUIDANCE,
            title="Unsupported SSH client",
            border_style="yellow",
        )
    )


@click.command(context_settings={"help_option_names": ["--help", "-h"]})
@click.option("-g", "--resource-group", help="Resource group of the VM")
@click.option("-n", "--vm-name", help="Name of the VM")
@click.option(
    "--client",
    type=click.Choice(ClientChoice.values(), case_sensitive=False),
    default=None,
    help="SSH client to use (default: auto, or default_client from config)",
)
@click.option(
    "-i", "--interactive", is_flag=True, help="Choose subscription, VM, and client from menus"
)
@click.option(
    "--prefer-private-ip/--no-prefer-private-ip",
    default=None,
    help="Connect over the VM's private IP (e.g. over VPN)",
)
@click.option("--keys-subfolder", help="Subfolder of the azssh SSH directory for keys")
@click.option("--subscription", help="Subscription ID for direct mode")
@click.option("--config", "config_path", help="Config file path (default: ~/.azssh/config.toml)")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(version=__version__)
def main(
    resource_group: str | None,
    vm_name: str | None,
    client: str | None,
    interactive: bool,
    prefer_private_ip: bool | None,
    keys_subfolder: str | None,
    subscription: str | None,
    config_path: str | None,
    verbose: bool,
) -> None:
    """azssh - SSH into Azure Linux VMs with Entra ID certificates.

    Checks the az CLI session and ssh extension, issues a short-lived SSH
    certificate with 'az ssh config', then opens an SSH session.

    \b
    EXAMPLES:
        $ azssh -g RG1 -n vm01
        $ azssh -i
        $ azssh -g RG1 -n vm01 --client mobaxterm --prefer-private-ip

    \b
    CONFIGURATION:
        Config file: ~/.azssh/config.toml
        Keys: default_client, keys_subfolder, prefer_private_ip, ssh_dir
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")

    console = Console(stderr=True)
    try:
        config = ConfigManager.load_config(config_path)
        options = ConnectOptions(
            resource_group=resource_group,
            vm_name=vm_name,
            client=ClientChoice(client.lower()) if client else config.client_choice,
            interactive=interactive,
            prefer_private_ip=(
                config.prefer_private_ip if prefer_private_ip is None else prefer_private_ip
            ),
            keys_subfolder=keys_subfolder,
            subscription_id=subscription,
        )
        flow = ConnectFlow(handler=CLIInteractionHandler(), config=config)
        exit_code = flow.run(options)
    except IncompatibleClientError as e:
        _show_incompatible_client_guidance(console)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except AzsshError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()


__all__ = ["main"]
