"""
List-remote command implementation.

Prints every installable version in listing order.
"""

from tgenv.core.remote import list_remote_versions


def run(args) -> int:
    """
    Run the list-remote command.

    Args:
        args: Parsed command-line arguments with settings

    Returns:
        Exit code (0 for success)
    """
    for version in list_remote_versions(args.settings):
        print(version)
    return 0
