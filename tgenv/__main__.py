"""
Entry point for running tgenv as a module.

Usage: python -m tgenv [command] [options]
"""

from tgenv.cli.parser import main

if __name__ == "__main__":
    main()
