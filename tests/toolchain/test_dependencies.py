"""
Unit tests for native dependency installation.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from odinkit.cache.keys import darwin_cache_key
from odinkit.core.exceptions import DependencyInstallError, UnsupportedPlatformError
from odinkit.core.platform import PlatformInfo
from odinkit.core.process import CommandResult
from odinkit.toolchain.dependencies import (
    LinuxDependencyInstaller,
    MacOSDependencyInstaller,
    WindowsDependencyInstaller,
    get_dependency_installer,
)
from tests.mocks.cache import InMemoryContentCache


class TestGetDependencyInstaller:
    """Test the OS to installer lookup."""

    @pytest.mark.parametrize(
        "os_name,installer_cls",
        [
            ("linux", LinuxDependencyInstaller),
            ("macos", MacOSDependencyInstaller),
            ("windows", WindowsDependencyInstaller),
        ],
    )
    def test_supported(self, run_state, os_name, installer_cls):
        installer = get_dependency_installer(
            run_state, platform=PlatformInfo(os_name, "x64")
        )
        assert isinstance(installer, installer_cls)

    def test_unsupported(self, run_state):
        """Test unknown operating systems are rejected."""
        with pytest.raises(
            UnsupportedPlatformError,
            match="Operating system freebsd is not supported",
        ):
            get_dependency_installer(run_state, platform=PlatformInfo("freebsd", "x64"))


class TestLinuxDependencyInstaller:
    """Test LLVM installation on Linux."""

    @patch("odinkit.toolchain.dependencies.run_command")
    @patch("odinkit.toolchain.dependencies.which", return_value="/usr/bin/llvm-17")
    def test_preinstalled_llvm(self, mock_which, mock_run, run_state, linux_platform):
        """Test nothing is installed when the runner already has LLVM."""
        installer = LinuxDependencyInstaller(run_state, platform=linux_platform)

        installer.install("17")

        assert run_state.paths == ["/usr/lib/llvm-17/bin"]
        mock_which.assert_called_once_with("llvm-17")
        mock_run.assert_not_called()

    @patch("odinkit.toolchain.dependencies.run_command")
    @patch("odinkit.toolchain.dependencies.which", return_value=None)
    def test_installs_with_apt_fast(
        self, mock_which, mock_run, run_state, linux_platform
    ):
        """Test LLVM and clang are installed when missing."""
        mock_run.return_value = CommandResult(0)
        installer = LinuxDependencyInstaller(run_state, platform=linux_platform)

        installer.install("18")

        mock_run.assert_called_once_with(
            ["sudo", "apt-fast", "install", "llvm-18-dev", "clang-18"]
        )

    @patch("odinkit.toolchain.dependencies.run_command")
    @patch("odinkit.toolchain.dependencies.which", return_value=None)
    def test_install_failure(self, mock_which, mock_run, run_state, linux_platform):
        """Test a failing package manager raises DependencyInstallError."""
        mock_run.return_value = CommandResult(100)
        installer = LinuxDependencyInstaller(run_state, platform=linux_platform)

        with pytest.raises(DependencyInstallError) as exc_info:
            installer.install("17")

        assert exc_info.value.exit_code == 100
        assert str(exc_info.value) == (
            "Installing Odin dependencies failed with exit code: 100"
        )


class TestMacOSDependencyInstaller:
    """Test LLVM installation with Homebrew."""

    @patch("odinkit.toolchain.dependencies.run_command")
    def test_brew_install(self, mock_run, run_state, macos_platform):
        """Test brew install and both Homebrew prefixes on the path."""
        mock_run.return_value = CommandResult(0)
        installer = MacOSDependencyInstaller(run_state, platform=macos_platform)

        installer.install("17")

        mock_run.assert_called_once_with(["brew", "install", "llvm@17"])
        assert set(run_state.paths) == {
            "/opt/homebrew/opt/llvm@17/bin",
            "/usr/local/opt/llvm@17/bin",
        }
        assert "darwin-cache-hit" not in run_state.state

    @patch("odinkit.toolchain.dependencies.run_command")
    def test_brew_cache_hit(self, mock_run, run_state, macos_platform):
        """Test a restored Homebrew cache is recorded for the post step."""
        mock_run.return_value = CommandResult(0)
        cache = InMemoryContentCache(keys=[darwin_cache_key("17", macos_platform)])
        installer = MacOSDependencyInstaller(
            run_state, cache=cache, platform=macos_platform
        )

        installer.install("17", caching_enabled=True)

        assert run_state.get_state("darwin-cache-hit") == "true"
        restored_paths, key = cache.restore_calls[0]
        assert key == "llvm-brew-v1-macos-arm64-17"
        assert str(Path("/opt/homebrew/Cellar/llvm@17")) in restored_paths

    @patch("odinkit.toolchain.dependencies.run_command")
    def test_brew_cache_miss(self, mock_run, run_state, macos_platform):
        """Test a cache miss is recorded so the post step saves the cache."""
        mock_run.return_value = CommandResult(0)
        installer = MacOSDependencyInstaller(
            run_state, cache=InMemoryContentCache(), platform=macos_platform
        )

        installer.install("17", caching_enabled=True)

        assert run_state.get_state("darwin-cache-hit") == "false"

    @patch("odinkit.toolchain.dependencies.run_command")
    def test_brew_cache_records_llvm_version(self, mock_run, run_state, macos_platform):
        """Test the installed LLVM version is recorded for the post step."""
        mock_run.return_value = CommandResult(0)
        installer = MacOSDependencyInstaller(
            run_state, cache=InMemoryContentCache(), platform=macos_platform
        )

        installer.install("13", caching_enabled=True)

        assert run_state.get_state("darwin-llvm-version") == "13"
        assert run_state.get_state("darwin-cache-hit") == "false"

    @patch("odinkit.toolchain.dependencies.run_command")
    def test_brew_cache_failure_counts_as_miss(
        self, mock_run, run_state, macos_platform
    ):
        """Test a cache service failure does not fail the install."""
        mock_run.return_value = CommandResult(0)
        installer = MacOSDependencyInstaller(
            run_state,
            cache=InMemoryContentCache(fail_restore=True),
            platform=macos_platform,
        )

        installer.install("17", caching_enabled=True)

        assert run_state.get_state("darwin-cache-hit") == "false"
        mock_run.assert_called_once()

    @patch("odinkit.toolchain.dependencies.run_command")
    def test_caching_disabled_skips_cache(self, mock_run, run_state, macos_platform):
        """Test the cache is not consulted when caching is off."""
        mock_run.return_value = CommandResult(0)
        cache = InMemoryContentCache()
        installer = MacOSDependencyInstaller(
            run_state, cache=cache, platform=macos_platform
        )

        installer.install("17", caching_enabled=False)

        assert cache.restore_calls == []

    @patch("odinkit.toolchain.dependencies.run_command")
    def test_brew_failure(self, mock_run, run_state, macos_platform):
        """Test a failing brew install raises after registering paths."""
        mock_run.return_value = CommandResult(1)
        installer = MacOSDependencyInstaller(run_state, platform=macos_platform)

        with pytest.raises(DependencyInstallError):
            installer.install("13")

        assert len(run_state.paths) == 2


class TestWindowsDependencyInstaller:
    """Test Windows, which needs no native dependencies."""

    @patch("odinkit.toolchain.dependencies.run_command")
    def test_noop(self, mock_run, run_state, windows_platform):
        WindowsDependencyInstaller(run_state, platform=windows_platform).install("17")

        mock_run.assert_not_called()
        assert run_state.paths == []
