"""
Platform detection for OdinKit.

This module detects the current operating system and CPU architecture and maps
them onto the names used by Odin release assets.

Usage:
    from odinkit.core.platform import detect_platform

    platform_info = detect_platform()
    print(f"Running on {platform_info.platform_string()}")
    print(f"Release asset suffix: {platform_info.release_suffix()}")
"""

import functools
import platform
from dataclasses import dataclass
from typing import Optional

# Operating system names as they appear in Odin release asset names
RELEASE_OS_NAMES = {
    "macos": "macos",
    "linux": "ubuntu",
    "windows": "windows",
}

# Architecture names as they appear in Odin release asset names
RELEASE_ARCH_NAMES = {
    "x64": "amd64",
    "arm64": "arm64",
}


@dataclass(frozen=True)
class PlatformInfo:
    """
    Platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos', or the raw
            lowercased system name for anything else)
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm', or raw machine)
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'macos-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    @property
    def is_posix(self) -> bool:
        """Whether executables need the POSIX executable bit."""
        return self.os in ("linux", "macos")

    def release_os(self) -> Optional[str]:
        """OS name used by release assets, or None if releases don't cover it."""
        return RELEASE_OS_NAMES.get(self.os)

    def release_arch(self) -> Optional[str]:
        """Architecture name used by release assets, or None."""
        return RELEASE_ARCH_NAMES.get(self.arch)

    def release_suffix(self) -> Optional[str]:
        """
        Get the '<os>-<arch>' part of a release asset name.

        Returns:
            Suffix such as 'ubuntu-amd64', or None when no release can exist
            for this platform.

        Example:
            >>> PlatformInfo('macos', 'arm64').release_suffix()
            'macos-arm64'
        """
        release_os = self.release_os()
        release_arch = self.release_arch()
        if release_os is None or release_arch is None:
            return None
        return f"{release_os}-{release_arch}"

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Unsupported systems are returned as-is so that callers can report them;
    the dependency installer is the one that rejects them.
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "RELEASE_OS_NAMES",
    "RELEASE_ARCH_NAMES",
    "detect_platform",
    "clear_platform_cache",
]
