"""SSH client resolution.

Maps the detected clients and the user's --client preference to exactly
one client that can use an Entra ID certificate, or fails.

Auto-selection priority:
1. MobaXterm (built-in SSH)
2. OpenSSH (ssh)
PuTTY is detected only so it can be rejected with guidance: it cannot load
OpenSSH certificates.
"""

import logging
from enum import Enum

from azssh.exceptions import (
    ClientUnavailableError,
    IncompatibleClientError,
    NoClientError,
    UnknownClientError,
)
from azssh.modules.client_detector import ClientAvailability, SSHClient
from azssh.modules.interaction_handler import InteractionHandler, SelectableItem

logger = logging.getLogger(__name__)


class ClientChoice(Enum):
    """Values accepted by --client."""

    AUTO = "auto"
    OPENSSH = "openssh"
    MOBAXTERM = "mobaxterm"

    @classmethod
    def values(cls) -> list[str]:
        return [choice.value for choice in cls]


AUTO_PRIORITY = (SSHClient.MOBAXTERM, SSHClient.OPENSSH)

INCOMPATIBLE_MESSAGE = (
    "PuTTY does not support OpenSSH certificates and cannot be used for Entra ID SSH login."
)
NO_CLIENT_MESSAGE = "No SSH client found. Install OpenSSH (ssh) or MobaXterm and try again."


class ClientResolver:
    """Resolve a single usable SSH client."""

    @classmethod
    def resolve(cls, availability: ClientAvailability, choice: ClientChoice) -> SSHClient:
        """
        Resolve the client for a non-interactive run.

        Args:
            availability: Result of ClientDetector.detect()
            choice: Requested client (AUTO for priority order)

        Returns:
            SSHClient: OPENSSH or MOBAXTERM

        Raises:
            ClientUnavailableError: Explicit choice is not installed
            IncompatibleClientError: Only PuTTY is installed (auto)
            NoClientError: Nothing is installed (auto)
        """
        if choice is ClientChoice.AUTO:
            return cls._auto_select(availability)

        client = SSHClient(choice.value)
        if availability.is_available(client):
            logger.debug(f"Using requested client: {client.value}")
            return client

        raise ClientUnavailableError(
            f"Requested SSH client '{choice.value}' ({client.label}) is not installed. "
            f"Use --client auto to pick an installed client."
        )

    @classmethod
    def choose_interactively(
        cls, availability: ClientAvailability, handler: InteractionHandler
    ) -> SSHClient:
        """
        Let the user pick among detected clients.

        PuTTY is listed (marked unsupported) when present; picking it fails
        immediately.

        Raises:
            NoClientError: No client detected
            IncompatibleClientError: User picked PuTTY
        """
        detected = availability.detected()
        if not detected:
            raise NoClientError(NO_CLIENT_MESSAGE)

        items = SelectableItem.from_values(detected, label=lambda client: client.label)
        chosen = handler.select("Select SSH client:", items).value
        return cls.ensure_supported(chosen)

    @classmethod
    def ensure_supported(cls, client: object) -> SSHClient:
        """
        Reject clients that can't connect.

        Raises:
            UnknownClientError: client is not an SSHClient at all
            IncompatibleClientError: client cannot load OpenSSH certificates
        """
        if not isinstance(client, SSHClient):
            raise UnknownClientError(f"Unknown SSH client: {client!r}")
        if not client.supports_certificates:
            raise IncompatibleClientError(INCOMPATIBLE_MESSAGE)
        return client

    @classmethod
    def _auto_select(cls, availability: ClientAvailability) -> SSHClient:
        for client in AUTO_PRIORITY:
            if availability.is_available(client):
                logger.debug(f"Auto-selected client: {client.value}")
                return client

        if availability.putty:
            raise IncompatibleClientError(INCOMPATIBLE_MESSAGE)
        raise NoClientError(NO_CLIENT_MESSAGE)


__all__ = ["ClientChoice", "ClientResolver"]
