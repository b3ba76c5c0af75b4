"""
Uninstall command implementation.

Removes an installed version: tgenv uninstall VERSION
"""

from tgenv.core.platform import detect_platform_key
from tgenv.versions.installer import Installer
from tgenv.cli.commands.use import resolve_installed


def run(args) -> int:
    """
    Run the uninstall command.

    Args:
        args: Parsed command-line arguments with version and settings

    Returns:
        Exit code (0 for success)
    """
    settings = args.settings
    version = resolve_installed(args.version, settings)

    installer = Installer(settings, detect_platform_key(settings.arch))
    installer.uninstall(version)
    print(f"Terragrunt v{version} is successfully uninstalled")
    return 0
