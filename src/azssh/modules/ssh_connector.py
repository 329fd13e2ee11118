"""
SSH Connector Module

Hand the terminal to an SSH client pointed at the generated config.

Security Requirements:
- Certificate-based authentication only (issued by az ssh config)
- No password handling
- No credential logging
"""

import logging
import shlex
import shutil
import subprocess
from pathlib import Path

from azssh.exceptions import SSHConnectionError
from azssh.modules.client_detector import ClientDetector, SSHClient

logger = logging.getLogger(__name__)


class SSHConnector:
    """
    Run an interactive SSH session.

    The session inherits stdin/stdout/stderr so the remote shell behaves
    like a normal terminal.
    """

    @classmethod
    def build_ssh_command(
        cls,
        client: SSHClient,
        config_path: Path,
        alias: str,
        detector: ClientDetector | None = None,
    ) -> list[str]:
        """
        Build the command line for a client.

        Args:
            client: OPENSSH or MOBAXTERM
            config_path: Generated SSH config
            alias: Host alias from the config

        Returns:
            list[str]: Command arguments

        Raises:
            SSHConnectionError: Client executable cannot be found or client unsupported
        """
        if client is SSHClient.OPENSSH:
            ssh_path = shutil.which("ssh") or "ssh"
            return [ssh_path, "-F", str(config_path), alias]

        if client is SSHClient.MOBAXTERM:
            executable = (detector or ClientDetector()).find_mobaxterm_executable()
            if executable is None:
                raise SSHConnectionError(
                    "MobaXterm profile found but MobaXterm.exe is not installed or not on PATH"
                )
            inner = f"ssh -F {shlex.quote(config_path.as_posix())} {shlex.quote(alias)}"
            return [str(executable), "-newtab", inner]

        raise SSHConnectionError(f"Cannot launch SSH client: {client}")

    @classmethod
    def connect(
        cls,
        client: SSHClient,
        config_path: Path,
        alias: str,
        detector: ClientDetector | None = None,
    ) -> int:
        """
        Connect and block until the session ends.

        Args:
            client: OPENSSH or MOBAXTERM
            config_path: Generated SSH config
            alias: Host alias from the config

        Returns:
            int: Session exit code (130 when interrupted)

        Raises:
            SSHConnectionError: If the client cannot be started
        """
        ssh_args = cls.build_ssh_command(client, config_path, alias, detector)
        logger.info(f"Connecting to {alias} with {client.label}...")
        logger.debug(f"Running: {' '.join(ssh_args)}")

        try:
            result = subprocess.run(ssh_args)
        except KeyboardInterrupt:
            logger.info("SSH session interrupted by user")
            return 130  # Standard exit code for Ctrl+C
        except OSError as e:
            raise SSHConnectionError(f"Failed to start {client.label}: {e}") from e

        if result.returncode == 0:
            logger.debug("SSH session ended successfully")
        else:
            logger.warning(f"SSH session ended with code {result.returncode}")
        return result.returncode


__all__ = ["SSHConnector"]
