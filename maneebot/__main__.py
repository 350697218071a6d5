"""Main entry point when executing maneebot as a package.

This allows running the package using python -m maneebot.
"""

from maneebot.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
