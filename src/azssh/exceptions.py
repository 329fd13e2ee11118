"""Exceptions raised across azssh.

Every failure surfaces as an AzsshError subclass and is reported once by
the command-line entry point.
"""


class AzsshError(Exception):
    """Base exception for azssh errors."""

    pass


class PrerequisiteError(AzsshError):
    """Required external tool is missing."""

    pass


class AuthenticationError(AzsshError):
    """No signed-in Azure account, even after a login attempt."""

    pass


class ExtensionInstallError(AzsshError):
    """The az ssh extension could not be installed."""

    pass


class AzureCLIError(AzsshError):
    """An az command failed or returned unparseable output."""

    pass


class EmptySelectionError(AzsshError):
    """Nothing to choose from."""

    pass


class NoSubscriptionsError(EmptySelectionError):
    """No subscriptions are visible to the signed-in account."""

    pass


class NoVMsError(EmptySelectionError):
    """No virtual machines are visible in the subscription."""

    pass


class IncompatibleClientError(AzsshError):
    """Selected SSH client cannot use OpenSSH certificates."""

    pass


class NoClientError(AzsshError):
    """No usable SSH client is installed."""

    pass


class ClientUnavailableError(AzsshError):
    """Explicitly requested SSH client is not installed."""

    pass


class UnknownClientError(AzsshError):
    """Resolved client value is not one azssh knows how to launch."""

    pass


class ProvisioningError(AzsshError):
    """az ssh config failed to issue a certificate or write the config."""

    pass


class HostAliasError(AzsshError):
    """Generated SSH config does not contain a Host stanza."""

    pass


class SSHConnectionError(AzsshError):
    """SSH client could not be started."""

    pass


class ConfigError(AzsshError):
    """Configuration file is unreadable or invalid."""

    pass


__all__ = [
    "AuthenticationError",
    "AzsshError",
    "AzureCLIError",
    "ClientUnavailableError",
    "ConfigError",
    "EmptySelectionError",
    "ExtensionInstallError",
    "HostAliasError",
    "IncompatibleClientError",
    "NoClientError",
    "NoSubscriptionsError",
    "NoVMsError",
    "PrerequisiteError",
    "ProvisioningError",
    "SSHConnectionError",
    "UnknownClientError",
]
