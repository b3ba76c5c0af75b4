"""
tgenv CLI argument parser.

This module implements the command-line interface for tgenv using argparse.
"""

import argparse
import importlib
import logging
import sys
from typing import List, Optional

from tgenv.config.settings import Settings
from tgenv.core.exceptions import TgenvError
from tgenv.cli.utils import print_error

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("tgenv")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """tgenv command-line interface."""

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize CLI with argument parser.

        Args:
            settings: Runtime settings (default: read from the environment)
        """
        self.settings = settings
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="tgenv",
            description="tgenv - Terragrunt version manager",
            epilog='Use "tgenv COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"tgenv {__version__}"
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

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        install = subparsers.add_parser(
            "install",
            help="Install a specific version of Terragrunt",
            description=(
                "Install a Terragrunt version. VERSION may be an exact version, "
                "'latest', 'latest:<regex>' or 'min-required'. Without VERSION "
                "the nearest .terragrunt-version file is used."
            ),
        )
        # Collected as a list so extra arguments become a tgenv usage error
        install.add_argument("version", nargs="*", metavar="VERSION")

        use = subparsers.add_parser(
            "use",
            help="Switch the default version",
            description="Set the default Terragrunt version from installed versions",
        )
        use.add_argument("version", metavar="VERSION")

        uninstall = subparsers.add_parser(
            "uninstall",
            help="Uninstall a specific version",
            description="Remove an installed Terragrunt version",
        )
        uninstall.add_argument("version", metavar="VERSION")

        subparsers.add_parser(
            "list",
            help="List installed versions",
            description="List all installed Terragrunt versions",
        )
        subparsers.add_parser(
            "list-remote",
            help="List installable versions",
            description="List all Terragrunt versions available for install",
        )
        subparsers.add_parser(
            "version-name",
            help="Print the current version",
            description="Print the version selected by the version file",
        )

        return parser

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

        try:
            settings = self.settings or Settings.from_env()
        except ValueError as e:
            print_error(str(e))
            return 1
        parsed_args.settings = settings

        self._configure_logging(parsed_args, settings)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except TgenvError as e:
            print_error(str(e))
            return e.exit_code
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose or settings.debug:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args, settings: Settings):
        """
        Configure logging based on verbose/quiet flags and TGENV_DEBUG.

        Args:
            args: Parsed arguments with verbose/quiet flags
            settings: Runtime settings (debug flag)
        """
        if args.verbose or settings.debug:
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
            force=True,  # Reconfigure if already configured
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
            "install": "tgenv.cli.commands.install",
            "use": "tgenv.cli.commands.use",
            "uninstall": "tgenv.cli.commands.uninstall",
            "list": "tgenv.cli.commands.list",
            "list-remote": "tgenv.cli.commands.list_remote",
            "version-name": "tgenv.cli.commands.version_name",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
