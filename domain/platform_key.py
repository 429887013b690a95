"""Domain model for the (operating system, architecture) pair a download targets."""

import platform
from dataclasses import dataclass
from typing import Optional

from .constants import RELEASES_BASE_URL
from .errors import UnsupportedArchitectureError, UnsupportedPlatformError


ARCHITECTURES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "arm": "aarch64",
}

# system name -> (platform id, download suffix)
OPERATING_SYSTEMS = {
    "linux": ("linux", "pc-linux.gz"),
    "darwin": ("darwin", "apple-darwin.gz"),
    "windows": ("win32", "pc-win32.zip"),
}


@dataclass(frozen=True)
class PlatformKey:
    """Resolved platform of the running host."""
    os: str  # linux, darwin, win32
    arch: str  # x86_64, aarch64

    @property
    def download_suffix(self) -> str:
        for os_id, suffix in OPERATING_SYSTEMS.values():
            if os_id == self.os:
                return suffix
        raise UnsupportedPlatformError(self.os)

    @property
    def archive_extension(self) -> str:
        return ".zip" if self.download_suffix.endswith(".zip") else ".gz"

    @property
    def is_windows(self) -> bool:
        return self.os == "win32"

    @property
    def zip_member_name(self) -> str:
        """Name of the executable inside the Windows zip archive."""
        return f"cs-{self.arch}-pc-win32.exe"

    @property
    def binary_name(self) -> str:
        return "cs.exe" if self.is_windows else "cs"


def normalize_architecture(machine: str) -> str:
    key = machine.strip().lower()
    if key in ARCHITECTURES:
        return ARCHITECTURES[key]
    if key.startswith("armv"):
        return "aarch64"
    raise UnsupportedArchitectureError(machine)


def detect_platform(system: Optional[str] = None, machine: Optional[str] = None) -> PlatformKey:
    """
    Resolve the platform key for the given (or current) host.

    The architecture is checked first so an unsupported CPU fails before
    anything else happens.

    Raises:
        UnsupportedArchitectureError: CPU family is neither x86_64 nor aarch64
        UnsupportedPlatformError: OS is not Linux, macOS or Windows
    """
    system = platform.system() if system is None else system
    machine = platform.machine() if machine is None else machine

    arch = normalize_architecture(machine)

    entry = OPERATING_SYSTEMS.get(system.strip().lower())
    if entry is None:
        raise UnsupportedPlatformError(system)

    return PlatformKey(os=entry[0], arch=arch)


def download_url(version: str, platform_key: PlatformKey) -> str:
    """Release URL of the cs launcher for version on platform_key."""
    return (
        f"{RELEASES_BASE_URL}/v{version}/"
        f"cs-{platform_key.arch}-{platform_key.download_suffix}"
    )
