"""
Setup command implementation.

Installs the Odin compiler and its build dependencies.
"""

import logging

from odinkit.cli.utils import command_run_state, load_command_config, report_failure
from odinkit.toolchain.orchestrator import acquire_toolchain

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the setup command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 on any fatal error)
    """
    try:
        config = load_command_config(args)
        run_state = command_run_state(args)

        outcome = acquire_toolchain(config.request, run_state, config.cache_dir)
    except Exception as e:
        report_failure(e, verbose=args.verbose)
        return 1

    logger.debug(f"Outcome: {outcome}")
    return 0
