"""
Installers for the Ollama CLI.

Each platform gets a `PlatformInstaller`; the supervisor only talks to that
interface so tests can substitute a fake.
"""

import abc
import logging
import shutil
import subprocess
import sys
from typing import Callable, Optional

from ollama_supervisor.settings import settings

logger = logging.getLogger(__name__)

OLLAMA_EXECUTABLE = "ollama"
MANUAL_INSTALL_URL = "https://ollama.com"

SUPPORTED_PLATFORMS = {
    "darwin": "macOS",
    "linux": "Linux",
}


class InstallationError(RuntimeError):
    """The CLI could not be installed or is still missing afterwards."""


class UnsupportedPlatformError(InstallationError):
    def __init__(self, platform: str):
        super().__init__(
            f"Unsupported platform: {platform}. "
            f"Please install Ollama manually from {MANUAL_INSTALL_URL}"
        )
        self.platform = platform


def is_cli_installed(executable: str = OLLAMA_EXECUTABLE) -> bool:
    """Check whether the CLI is on PATH; lookup failure means not installed."""
    try:
        return shutil.which(executable) is not None
    except OSError:
        return False


class PlatformInstaller(abc.ABC):
    """Capability to install the Ollama CLI on one platform."""

    platform: str = ""

    @abc.abstractmethod
    def install(self) -> None:
        """Run the installation.

        Raises:
            InstallationError: if the platform cannot be installed on
            subprocess.CalledProcessError: if the install command fails
        """


class ShellScriptInstaller(PlatformInstaller):
    """Pipes the vendor install script into sh."""

    def __init__(
        self,
        platform: str,
        script_url: str = None,
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.platform = platform
        self.script_url = script_url or settings.install_script_url
        self._run = run

    @property
    def command(self) -> str:
        return f"curl -fsSL {self.script_url} | sh"

    def install(self) -> None:
        label = SUPPORTED_PLATFORMS.get(self.platform, self.platform)
        logger.info(f"Detected {label}, installing via curl...")
        self._run(self.command, shell=True, check=True)


class UnsupportedPlatformInstaller(PlatformInstaller):
    def __init__(self, platform: str):
        self.platform = platform

    def install(self) -> None:
        raise UnsupportedPlatformError(self.platform)


def installer_for_platform(platform: Optional[str] = None) -> PlatformInstaller:
    """Pick the installer for `platform` (default: the running interpreter's)."""
    platform = platform or sys.platform
    # sys.platform was "linux2" on old interpreters
    normalized = "linux" if platform.startswith("linux") else platform
    if normalized in SUPPORTED_PLATFORMS:
        return ShellScriptInstaller(normalized)
    return UnsupportedPlatformInstaller(platform)
