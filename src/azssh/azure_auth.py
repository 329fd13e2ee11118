"""Azure authentication handler module.

This module checks the az CLI session and the ssh extension.
It NEVER stores credentials - all credential management is delegated
to Azure CLI which stores tokens securely in ~/.azure/

Security:
- No credential storage
- Delegates to az CLI
- Sanitizes outputs
"""

import json
import logging
import subprocess
from dataclasses import dataclass

from azssh.azure_cli_executor import run_az_command
from azssh.exceptions import AuthenticationError, AzureCLIError, ExtensionInstallError

logger = logging.getLogger(__name__)


@dataclass
class AccountInfo:
    """Signed-in account as reported by az account show."""

    user: str
    subscription_id: str
    subscription_name: str
    tenant_id: str | None = None


class AzureAuthenticator:
    """Manage the Azure CLI session and required extensions.

    This class never handles tokens: az login owns the browser/device flow
    and the token cache.
    """

    SSH_EXTENSION = "ssh"

    def get_account(self) -> AccountInfo | None:
        """Return the signed-in account, or None when there is no session."""
        try:
            result = run_az_command(["az", "account", "show", "--output", "json"], check=False)
        except subprocess.TimeoutExpired:
            logger.debug("az account show timed out")
            return None

        if result.returncode != 0:
            logger.debug("No active az session")
            return None

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            logger.debug(f"Unparseable az account show output: {e}")
            return None

        return AccountInfo(
            user=data.get("user", {}).get("name", "unknown"),
            subscription_id=data.get("id", ""),
            subscription_name=data.get("name", ""),
            tenant_id=data.get("tenantId"),
        )

    def ensure_logged_in(self) -> AccountInfo:
        """Return the signed-in account, running az login once if needed.

        Returns:
            AccountInfo for the active session

        Raises:
            AuthenticationError: If there is still no session after az login
        """
        account = self.get_account()
        if account:
            logger.debug(f"Signed in as {account.user}")
            return account

        logger.info("No active Azure session. Running 'az login'...")
        # az login drives its own browser/device-code flow, so it gets the terminal
        login = subprocess.run(["az", "login", "--output", "none"])
        if login.returncode != 0:
            logger.debug(f"az login exited with {login.returncode}")

        account = self.get_account()
        if not account:
            raise AuthenticationError("Azure login failed. Run 'az login' manually and retry.")

        logger.info(f"Signed in as {account.user}")
        return account

    def has_extension(self, name: str = SSH_EXTENSION) -> bool:
        """Check whether an az extension is installed.

        Raises:
            AzureCLIError: If az extension show times out
        """
        try:
            result = run_az_command(
                ["az", "extension", "show", "--name", name, "--output", "none"], check=False
            )
        except subprocess.TimeoutExpired as e:
            raise AzureCLIError(f"Timed out checking az extension '{name}'") from e
        return result.returncode == 0

    def ensure_extension(self, name: str = SSH_EXTENSION) -> None:
        """Install an az extension if it is missing.

        Raises:
            ExtensionInstallError: If az extension add fails
        """
        if self.has_extension(name):
            logger.debug(f"az extension '{name}' already installed")
            return

        logger.info(f"Installing az extension '{name}'...")
        try:
            run_az_command(
                ["az", "extension", "add", "--name", name, "--yes", "--output", "none"],
                timeout=300,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise ExtensionInstallError(
                f"Failed to install az extension '{name}': {stderr or e}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ExtensionInstallError(f"Timed out installing az extension '{name}'") from e


__all__ = ["AccountInfo", "AzureAuthenticator"]
