"""
Prerequisites Checker Module

Verifies the Azure CLI is installed before any az call is attempted.

Security Requirements:
- Read-only system checks
- No shell=True in subprocess calls
"""

import logging
import platform
import shutil
from dataclasses import dataclass
from typing import ClassVar

from azssh.exceptions import PrerequisiteError

logger = logging.getLogger(__name__)


@dataclass
class PrerequisiteResult:
    """Result of prerequisite checks."""

    all_available: bool
    missing: list[str]
    available: list[str]
    platform_name: str


class PrerequisiteChecker:
    """
    Check required external tools are installed.

    Required tools:
    - az (Azure CLI)

    SSH clients are detected separately by ClientDetector, since their
    absence is resolved later in the flow.
    """

    REQUIRED_TOOLS: ClassVar[list[str]] = ["az"]

    @classmethod
    def check_tool(cls, tool_name: str) -> bool:
        """
        Check if a single tool is available in PATH.

        Args:
            tool_name: Name of the tool to check

        Returns:
            bool: True if tool is available
        """
        result = shutil.which(tool_name)
        if result:
            logger.debug(f"Found {tool_name} at {result}")
            return True
        logger.debug(f"Tool not found: {tool_name}")
        return False

    @classmethod
    def check_all(cls) -> PrerequisiteResult:
        """
        Check all prerequisites and return comprehensive result.

        Returns:
            PrerequisiteResult: Detailed check results
        """
        missing: list[str] = []
        available: list[str] = []

        for tool in cls.REQUIRED_TOOLS:
            if cls.check_tool(tool):
                available.append(tool)
            else:
                missing.append(tool)

        platform_name = cls.detect_platform()

        result = PrerequisiteResult(
            all_available=(len(missing) == 0),
            missing=missing,
            available=available,
            platform_name=platform_name,
        )

        if not result.all_available:
            logger.debug(f"Missing prerequisites: {', '.join(missing)}")

        return result

    @classmethod
    def ensure_available(cls) -> PrerequisiteResult:
        """
        Check prerequisites and fail with install guidance if any are missing.

        Returns:
            PrerequisiteResult: Check results (always all_available)

        Raises:
            PrerequisiteError: If a required tool is missing
        """
        result = cls.check_all()
        if not result.all_available:
            raise PrerequisiteError(cls.format_missing_message(result.missing, result.platform_name))
        return result

    @classmethod
    def detect_platform(cls) -> str:
        """
        Detect the operating system platform.

        Returns:
            str: Platform name (macos, linux, wsl, windows, unknown)
        """
        system = platform.system().lower()

        if system == "darwin":
            return "macos"
        if system == "linux":
            if cls._is_wsl():
                return "wsl"
            return "linux"
        if system == "windows":
            return "windows"
        return "unknown"

    @classmethod
    def _is_wsl(cls) -> bool:
        """Check if running in Windows Subsystem for Linux."""
        try:
            with open("/proc/version") as f:
                version = f.read().lower()
                return "microsoft" in version or "wsl" in version
        except (FileNotFoundError, PermissionError) as e:
            logger.debug(f"Failed to check for WSL: {e}")
            return False

    @classmethod
    def format_missing_message(cls, missing: list[str], platform_name: str) -> str:
        """
        Format user-friendly installation instructions for missing tools.

        Args:
            missing: List of missing tool names
            platform_name: Platform name from detect_platform()

        Returns:
            str: Formatted installation instructions
        """
        if not missing:
            return "All prerequisites are installed."

        lines: list[str] = ["Missing required tools:", ""]
        lines.extend(f"  - {tool}" for tool in missing)
        lines.append("")
        lines.append(f"Platform: {platform_name}")
        lines.append("")

        if "az" in missing:
            lines.append("Install Azure CLI:")
            lines.append(f"  {cls._az_install_hint(platform_name)}")
            lines.append("")

        lines.append("After installing, run 'azssh' again.")
        return "\n".join(lines)

    @classmethod
    def _az_install_hint(cls, platform_name: str) -> str:
        if platform_name == "macos":
            return "brew install azure-cli"
        if platform_name in ("linux", "wsl"):
            return "curl -sL https://aka.ms/InstallAzureCLIDeb | sudo bash"
        if platform_name == "windows":
            return "winget install -e --id Microsoft.AzureCLI"
        return "See: https://learn.microsoft.com/cli/azure/install-azure-cli"

