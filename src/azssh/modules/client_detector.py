"""SSH client detection.

Philosophy:
- Single responsibility: Report which SSH clients are installed
- Standard library only (no external dependencies)
- Absence of a client is a normal outcome, never an error

Public API (the "studs"):
    SSHClient: Known SSH client enum
    ClientAvailability: Detection result dataclass
    ClientDetector: Main detector class
"""

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class SSHClient(Enum):
    """SSH clients azssh knows about."""

    OPENSSH = "openssh"
    MOBAXTERM = "mobaxterm"
    PUTTY = "putty"

    @property
    def label(self) -> str:
        return {
            SSHClient.OPENSSH: "OpenSSH (ssh)",
            SSHClient.MOBAXTERM: "MobaXterm (built-in SSH)",
            SSHClient.PUTTY: "PuTTY (unsupported: no OpenSSH certificate support)",
        }[self]

    @property
    def supports_certificates(self) -> bool:
        return self is not SSHClient.PUTTY


@dataclass(frozen=True)
class ClientAvailability:
    """Which SSH clients were found on this machine."""

    openssh: bool
    mobaxterm: bool
    putty: bool

    def detected(self) -> list[SSHClient]:
        """Detected clients, in auto-selection priority order."""
        found = []
        if self.mobaxterm:
            found.append(SSHClient.MOBAXTERM)
        if self.openssh:
            found.append(SSHClient.OPENSSH)
        if self.putty:
            found.append(SSHClient.PUTTY)
        return found

    def is_available(self, client: SSHClient) -> bool:
        return client in self.detected()


class ClientDetector:
    """Detects installed SSH clients."""

    MOBAXTERM_EXECUTABLE = "MobaXterm.exe"
    PUTTY_EXECUTABLES = ("putty", "plink")

    def detect(self) -> ClientAvailability:
        """
        Check PATH and well-known install locations.

        Returns:
            ClientAvailability with one flag per client

        Example:
            >>> availability = ClientDetector().detect()
            >>> availability.openssh
            True
        """
        availability = ClientAvailability(
            openssh=self._has_openssh(),
            mobaxterm=self._has_mobaxterm(),
            putty=self._has_putty(),
        )
        logger.debug(f"Detected SSH clients: {availability}")
        return availability

    def find_mobaxterm_executable(self) -> Path | None:
        """
        Locate the MobaXterm executable.

        Returns:
            Path to MobaXterm.exe, or None if only profile evidence exists
        """
        for install_dir in self._mobaxterm_install_dirs():
            candidate = install_dir / self.MOBAXTERM_EXECUTABLE
            if candidate.is_file():
                return candidate

        on_path = shutil.which("MobaXterm") or shutil.which(self.MOBAXTERM_EXECUTABLE)
        if on_path:
            return Path(on_path)
        return None

    def _has_openssh(self) -> bool:
        return shutil.which("ssh") is not None

    def _has_mobaxterm(self) -> bool:
        if self.find_mobaxterm_executable() is not None:
            return True
        return any(profile_dir.is_dir() for profile_dir in self._mobaxterm_profile_dirs())

    def _has_putty(self) -> bool:
        return any(shutil.which(name) for name in self.PUTTY_EXECUTABLES)

    def _mobaxterm_install_dirs(self) -> list[Path]:
        dirs = []
        for env_var, default in (
            ("ProgramFiles(x86)", r"C:\Program Files (x86)"),
            ("ProgramFiles", r"C:\Program Files"),
        ):
            base = os.environ.get(env_var, default)
            dirs.append(Path(base) / "Mobatek" / "MobaXterm")
        return dirs

    def _mobaxterm_profile_dirs(self) -> list[Path]:
        dirs = [Path.home() / "Documents" / "MobaXterm"]
        appdata = os.environ.get("APPDATA")
        if appdata:
            dirs.append(Path(appdata) / "MobaXterm")
        return dirs


__all__ = ["ClientAvailability", "ClientDetector", "SSHClient"]
