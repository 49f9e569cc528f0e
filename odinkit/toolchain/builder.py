"""
Platform build step for Odin sources.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from odinkit.core.exceptions import BuildFailedError, UnsupportedPlatformError
from odinkit.core.platform import PlatformInfo, detect_platform
from odinkit.core.process import run_command

logger = logging.getLogger(__name__)

BUILD_SCRIPTS: Dict[str, str] = {
    "macos": "build_odin.sh",
    "linux": "build_odin.sh",
    "windows": "build.bat",
}


def build_command(
    build_type: str, install_path: Path, platform: Optional[PlatformInfo] = None
) -> List[str]:
    """
    Get the build command for a platform.

    The script is addressed by its absolute path inside the checkout. A bare
    name is resolved against the parent process directory on Windows, not
    against the child's working directory.

    Raises:
        UnsupportedPlatformError: If there is no build script for the OS
    """
    platform = platform or detect_platform()
    script = BUILD_SCRIPTS.get(platform.os)
    if script is None:
        raise UnsupportedPlatformError(platform.os)
    return [str(Path(install_path).absolute() / script), build_type]


def build_odin(
    install_path: Path, build_type: str, platform: Optional[PlatformInfo] = None
):
    """
    Build the compiler in the checkout at install_path.

    Raises:
        BuildFailedError: If the build script exits non-zero
    """
    command = build_command(build_type, install_path, platform)
    logger.info(f"Building Odin ({build_type})")

    result = run_command(command, cwd=install_path)
    if result.returncode != 0:
        raise BuildFailedError(result.returncode)


__all__ = ["BUILD_SCRIPTS", "build_command", "build_odin"]
