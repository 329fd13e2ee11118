"""Standardized Azure CLI subprocess execution.

Provides run_az_command() - a thin wrapper around subprocess.run so every
az invocation in azssh is captured, decoded, and logged the same way.

Usage:
    from azssh.azure_cli_executor import run_az_command

    result = run_az_command(["az", "vm", "list", "--output", "json"])

    # Long-running commands (certificate issuance) run without a timeout
    result = run_az_command(["az", "ssh", "config", ...], timeout=None)
"""

import logging
import subprocess

logger = logging.getLogger(__name__)


def run_az_command(
    cmd: list[str],
    *,
    timeout: int | None = 60,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Execute an Azure CLI command and capture its output.

    Args:
        cmd: Command list starting with "az", e.g. ["az", "vm", "list"]
        timeout: Subprocess timeout in seconds, None to wait indefinitely
        check: If True, raise CalledProcessError on non-zero exit (default: True)

    Returns:
        subprocess.CompletedProcess with stdout/stderr

    Raises:
        subprocess.CalledProcessError: On non-zero exit (when check=True)
        subprocess.TimeoutExpired: If the command exceeds timeout
    """
    logger.debug(f"Running: {' '.join(cmd)}")
    return subprocess.run(cmd, capture_output=True, text=True, check=check, timeout=timeout)


__all__ = ["run_az_command"]
