"""
Unit tests for Azure authentication module.

Test Coverage:
- Session detection via az account show
- Single login attempt when signed out
- ssh extension check and one-shot install
"""

import subprocess
from unittest.mock import patch

import pytest

from azssh.azure_auth import AzureAuthenticator
from azssh.exceptions import AuthenticationError, AzureCLIError, ExtensionInstallError

# ============================================================================
# LOGIN TESTS
# ============================================================================


class TestEnsureLoggedIn:
    """az account show / az login sequencing."""

    def test_existing_session_skips_login(self, fake_azure):
        account = AzureAuthenticator().ensure_logged_in()

        assert account.user == "alice@contoso.com"
        assert account.subscription_name == "Dev"
        assert fake_azure.calls_matching("az", "login") == []

    def test_logs_in_once_when_signed_out(self, make_fake_azure):
        fake = make_fake_azure(logged_in=False)

        account = AzureAuthenticator().ensure_logged_in()

        assert account.user == "alice@contoso.com"
        assert len(fake.calls_matching("az", "login")) == 1
        assert len(fake.calls_matching("az", "account", "show")) == 2

    def test_failed_login_is_fatal(self, make_fake_azure):
        fake = make_fake_azure(logged_in=False, login_succeeds=False)

        with pytest.raises(AuthenticationError, match="az login"):
            AzureAuthenticator().ensure_logged_in()

        assert len(fake.calls_matching("az", "login")) == 1

    def test_login_gets_the_terminal(self, make_fake_azure):
        fake = make_fake_azure(logged_in=False)
        AzureAuthenticator().ensure_logged_in()

        assert fake.calls_matching("az", "login")[0] == ["az", "login", "--output", "none"]


# ============================================================================
# EXTENSION TESTS
# ============================================================================


class TestEnsureExtension:
    """az extension show / add."""

    def test_installed_extension_is_left_alone(self, fake_azure):
        AzureAuthenticator().ensure_extension()

        assert fake_azure.calls_matching("az", "extension", "add") == []

    def test_missing_extension_is_installed(self, make_fake_azure):
        fake = make_fake_azure(extension_installed=False)

        AzureAuthenticator().ensure_extension()

        add_calls = fake.calls_matching("az", "extension", "add")
        assert len(add_calls) == 1
        assert "ssh" in add_calls[0]

    def test_install_failure_is_fatal(self, make_fake_azure):
        fake = make_fake_azure(extension_installed=False, extension_add_succeeds=False)

        with pytest.raises(ExtensionInstallError, match="network unreachable"):
            AzureAuthenticator().ensure_extension()

        assert len(fake.calls_matching("az", "extension", "add")) == 1

    @patch("subprocess.run")
    def test_extension_check_timeout_raises_cli_error(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["az", "extension", "show"], timeout=60)

        with pytest.raises(AzureCLIError, match="Timed out checking az extension 'ssh'"):
            AzureAuthenticator().ensure_extension()

        assert mock_run.call_count == 1

    @patch("subprocess.run")
    def test_extension_install_timeout_raises(self, mock_run):
        mock_run.side_effect = [
            subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr=""),
            subprocess.TimeoutExpired(cmd=["az", "extension", "add"], timeout=300),
        ]

        with pytest.raises(ExtensionInstallError, match="Timed out installing"):
            AzureAuthenticator().ensure_extension()
