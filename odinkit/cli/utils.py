"""
Shared utilities for CLI commands.
"""

import logging
import sys
import traceback
from typing import Any, Dict

from odinkit.config.inputs import OdinKitConfig, load_config
from odinkit.core.state import RunState, create_run_state, running_in_actions

logger = logging.getLogger(__name__)

# Parsed argument name -> input name
_ARGUMENT_INPUTS = {
    "repository": "repository",
    "odin_version": "odin-version",
    "release": "release",
    "token": "token",
    "build_type": "build-type",
    "llvm_version": "llvm-version",
    "cache": "cache",
    "asset_name": "asset-name",
    "install_path": "install-path",
    "cache_dir": "cache-dir",
}


def input_overrides(args) -> Dict[str, Any]:
    """Collect inputs given on the command line (unset flags are skipped)."""
    overrides = {}
    for attribute, input_name in _ARGUMENT_INPUTS.items():
        value = getattr(args, attribute, None)
        if value is not None:
            overrides[input_name] = value
    return overrides


def load_command_config(args) -> OdinKitConfig:
    """Load configuration for a command from file, environment and flags."""
    return load_config(config_file=args.config, overrides=input_overrides(args))


def command_run_state(args) -> RunState:
    return create_run_state(getattr(args, "state_file", None))


def report_failure(error: Exception, verbose: bool = False):
    """
    Report a fatal error as the single failure message of the run.

    Under GitHub Actions the message is also emitted as an error annotation.
    """
    message = str(error)
    logger.error(f"Error: {message}")

    if running_in_actions():
        print(f"::error::{message}", file=sys.stdout)

    if verbose:
        traceback.print_exc()
