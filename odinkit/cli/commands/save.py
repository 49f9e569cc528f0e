"""
Save command implementation.

Post-job step storing build caches for the next run.
"""

import logging

from odinkit.cache.store import LocalContentCache
from odinkit.cli.utils import command_run_state, load_command_config, report_failure
from odinkit.toolchain.saver import CacheSaver

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the save command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        config = load_command_config(args)
        saver = CacheSaver(LocalContentCache(config.cache_dir), command_run_state(args))
        result = saver.save(config.request)
    except Exception as e:
        report_failure(e, verbose=args.verbose)
        return 1

    logger.debug(f"Saved: {result}")
    return 0
