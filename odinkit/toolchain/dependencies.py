"""
Native build dependency installation.

Building Odin needs LLVM. Each supported operating system has an installer
object; get_dependency_installer() looks it up by OS name. Installers write
only to system package locations, never under the Odin install path, so they
can run next to the cache restorer or the source acquirer.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Type

from odinkit.cache.keys import darwin_cache_key, darwin_cache_paths
from odinkit.cache.store import ContentCache
from odinkit.core.exceptions import (
    CacheError,
    DependencyInstallError,
    UnsupportedPlatformError,
)
from odinkit.core.platform import PlatformInfo, detect_platform
from odinkit.core.process import run_command, which
from odinkit.core.state import RunState

logger = logging.getLogger(__name__)


class DependencyInstaller(ABC):
    """Installs LLVM for one operating system."""

    def __init__(
        self,
        run_state: RunState,
        cache: Optional[ContentCache] = None,
        platform: Optional[PlatformInfo] = None,
    ):
        self.run_state = run_state
        self.cache = cache
        self.platform = platform or detect_platform()

    @abstractmethod
    def install(self, llvm_version: str, caching_enabled: bool = False):
        """
        Make LLVM available on the execution search path.

        Args:
            llvm_version: LLVM major version (e.g., '17')
            caching_enabled: Whether the content cache may be used

        Raises:
            DependencyInstallError: If an install command exits non-zero
        """
        pass

    @staticmethod
    def _check(exit_code: int):
        if exit_code != 0:
            raise DependencyInstallError(exit_code)


class MacOSDependencyInstaller(DependencyInstaller):
    """Installs llvm@<version> with Homebrew."""

    def install_locations(self, llvm_version: str) -> List[Path]:
        """Both Homebrew prefixes: Apple silicon first, then Intel."""
        return [
            Path(f"/opt/homebrew/opt/llvm@{llvm_version}/bin"),
            Path(f"/usr/local/opt/llvm@{llvm_version}/bin"),
        ]

    def _restore_brew_cache(self, llvm_version: str):
        key = darwin_cache_key(llvm_version, self.platform)
        logger.info(f"LLVM/Brew cache key: {key}")
        self.run_state.save_state("darwin-llvm-version", llvm_version)

        try:
            restored = self.cache.restore(darwin_cache_paths(llvm_version), key)
        except CacheError as e:
            logger.warning(f"Failed to restore LLVM/Brew cache: {e}")
            restored = None

        if restored == key:
            logger.info("Got LLVM/Brew install caches")
            self.run_state.save_state("darwin-cache-hit", True)
        else:
            logger.info("Cache MISS on LLVM/Brew install caches")
            self.run_state.save_state("darwin-cache-hit", False)

    def install(self, llvm_version: str, caching_enabled: bool = False):
        if caching_enabled and self.cache is not None:
            self._restore_brew_cache(llvm_version)

        result = run_command(["brew", "install", f"llvm@{llvm_version}"])

        for location in self.install_locations(llvm_version):
            self.run_state.add_path(location)

        self._check(result.returncode)


class LinuxDependencyInstaller(DependencyInstaller):
    """Uses the runner's LLVM when present, otherwise installs it with apt-fast."""

    def install(self, llvm_version: str, caching_enabled: bool = False):
        self.run_state.add_path(f"/usr/lib/llvm-{llvm_version}/bin")

        if which(f"llvm-{llvm_version}") is not None:
            logger.info(f"LLVM {llvm_version} comes pre-installed on this runner")
            return

        result = run_command(
            [
                "sudo",
                "apt-fast",
                "install",
                f"llvm-{llvm_version}-dev",
                f"clang-{llvm_version}",
            ]
        )
        self._check(result.returncode)


class WindowsDependencyInstaller(DependencyInstaller):
    """Windows builds use the LLVM bundled with the Odin sources."""

    def install(self, llvm_version: str, caching_enabled: bool = False):
        logger.debug("No dependencies to install on Windows")


DEPENDENCY_INSTALLERS: Dict[str, Type[DependencyInstaller]] = {
    "macos": MacOSDependencyInstaller,
    "linux": LinuxDependencyInstaller,
    "windows": WindowsDependencyInstaller,
}


def get_dependency_installer(
    run_state: RunState,
    cache: Optional[ContentCache] = None,
    platform: Optional[PlatformInfo] = None,
) -> DependencyInstaller:
    """
    Get the dependency installer for a platform.

    Raises:
        UnsupportedPlatformError: If the OS has no installer
    """
    platform = platform or detect_platform()
    installer_cls = DEPENDENCY_INSTALLERS.get(platform.os)
    if installer_cls is None:
        raise UnsupportedPlatformError(platform.os)
    return installer_cls(run_state, cache=cache, platform=platform)


__all__ = [
    "DependencyInstaller",
    "MacOSDependencyInstaller",
    "LinuxDependencyInstaller",
    "WindowsDependencyInstaller",
    "DEPENDENCY_INSTALLERS",
    "get_dependency_installer",
]
