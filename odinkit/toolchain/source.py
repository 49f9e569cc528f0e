"""
Source acquisition with git.

Clones a single ref of the Odin repository into the install path, and checks
whether a restored checkout is still current.
"""

import logging
from pathlib import Path

from odinkit.core.exceptions import CloneFailedError
from odinkit.core.process import run_command

logger = logging.getLogger(__name__)

UP_TO_DATE_MARKER = "Already up to date."


class SourceAcquirer:
    """Shallow, single-branch, tagless clone of one ref."""

    def __init__(self, repository: str, install_path: Path):
        self.repository = repository
        self.install_path = Path(install_path)

    def clone(self, version: str):
        """
        Clone the repository at ref `version` into the install path.

        Raises:
            CloneFailedError: If git exits non-zero
        """
        logger.info(f"Cloning {self.repository} at {version}")

        result = run_command(
            [
                "git",
                "clone",
                self.repository,
                str(self.install_path),
                "--branch",
                version,
                "--depth=1",
                "--single-branch",
                "--no-tags",
            ]
        )

        if result.returncode != 0:
            raise CloneFailedError(result.returncode)


def pull_updates(path: Path, version: str) -> bool:
    """
    Pull `version` from origin inside a checkout.

    The checkout is updated in place when it was behind.

    Returns:
        True if git reported the checkout was already up to date
    """
    result = run_command(
        ["git", "pull", "origin", version], cwd=path, capture_output=True
    )
    return UP_TO_DATE_MARKER in result.stdout


__all__ = ["SourceAcquirer", "pull_updates", "UP_TO_DATE_MARKER"]
