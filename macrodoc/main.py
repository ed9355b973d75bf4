"""Entry point for the Macro Documentation Generator.

Delegates to the Click command group, which loads configuration and
sets up logging before running a subcommand.
"""

from macrodoc.cli.commands import macrodoc


def main() -> None:
    """Launch the CLI."""
    macrodoc()


if __name__ == "__main__":
    main()
