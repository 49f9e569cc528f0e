"""
OdinKit CLI argument parser.

This module implements the command-line interface for OdinKit using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

try:
    from importlib.metadata import version

    __version__ = version("odinkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """OdinKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="odinkit",
            description="OdinKit - Odin compiler setup for CI runners",
            epilog='Use "odinkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"OdinKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./odinkit.yaml)",
        )
        parser.add_argument(
            "--state-file",
            type=Path,
            metavar="PATH",
            help="Run state file for local runs (default: ~/.odinkit/state.json)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_setup_command(subparsers)
        self._add_save_command(subparsers)

        return parser

    def _add_input_arguments(self, parser):
        """Inputs shared by 'setup' and 'save'; they override the config file."""
        parser.add_argument(
            "--repository",
            metavar="REPO",
            help="Odin repository, 'owner/repo' or URL",
        )
        parser.add_argument(
            "--odin-version",
            "--branch",
            dest="odin_version",
            metavar="REF",
            help="Branch, tag or commit to install (default: master)",
        )
        parser.add_argument(
            "--build-type",
            metavar="TYPE",
            help="Argument passed to the build script (default: release)",
        )
        parser.add_argument(
            "--llvm-version",
            metavar="VERSION",
            help="LLVM version to install (default: 17)",
        )
        parser.add_argument(
            "--install-path",
            metavar="DIR",
            help="Directory to install Odin into",
        )
        parser.add_argument(
            "--cache-dir",
            metavar="DIR",
            help="Local content cache directory (default: ~/.odinkit/cache)",
        )
        parser.add_argument(
            "--no-cache",
            dest="cache",
            action="store_const",
            const="false",
            help="Disable the content cache",
        )

    def _add_setup_command(self, subparsers):
        """Add 'setup' subcommand."""
        parser = subparsers.add_parser(
            "setup",
            help="Install the Odin compiler",
            description="Install Odin from a release, the cache, or source",
        )
        self._add_input_arguments(parser)
        parser.add_argument(
            "--release",
            metavar="TAG",
            help="Release tag to download, 'latest', or '' to build from source",
        )
        parser.add_argument(
            "--token",
            metavar="TOKEN",
            help="GitHub token for release lookups (default: $GITHUB_TOKEN)",
        )
        parser.add_argument(
            "--asset-name",
            metavar="NAME",
            help="Release asset name prefix (default: repository name)",
        )

    def _add_save_command(self, subparsers):
        """Add 'save' subcommand."""
        parser = subparsers.add_parser(
            "save",
            help="Save build caches after the job",
            description="Store freshly built Odin and LLVM caches",
        )
        self._add_input_arguments(parser)

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "setup": "odinkit.cli.commands.setup",
            "save": "odinkit.cli.commands.save",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        import importlib

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
