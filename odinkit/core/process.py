"""
External command execution.

Thin wrappers around subprocess used for git, the build scripts and the
native package managers. Commands inherit the current environment, so paths
registered with the run state are visible to them.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of running an external command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""


def run_command(
    args: List[str],
    cwd: Optional[Union[str, Path]] = None,
    capture_output: bool = False,
) -> CommandResult:
    """
    Run an external command and return its exit code.

    Args:
        args: Command and arguments
        cwd: Working directory
        capture_output: Capture stdout/stderr instead of streaming them

    Returns:
        CommandResult with the exit code (and output when captured)

    Raises:
        FileNotFoundError: If the executable does not exist
    """
    logger.info(f"[command]{' '.join(args)}")
    result = subprocess.run(
        args,
        cwd=str(cwd) if cwd is not None else None,
        capture_output=capture_output,
        text=True,
        env=os.environ.copy(),
    )

    if capture_output:
        if result.stdout:
            logger.debug(result.stdout.rstrip())
        if result.stderr:
            logger.debug(result.stderr.rstrip())
        return CommandResult(result.returncode, result.stdout, result.stderr)

    return CommandResult(result.returncode)


def which(executable: str) -> Optional[str]:
    """Resolve an executable on the current PATH."""
    return shutil.which(executable, path=os.environ.get("PATH"))


__all__ = ["CommandResult", "run_command", "which"]
