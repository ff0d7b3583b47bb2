"""Command line argument parser for the telnet runner.

This module builds the argument parser from the declarative argument table in
``telnet_runner.constants`` and applies the requested log verbosity.
"""

from __future__ import annotations

from argparse import (
    ArgumentParser,
    Namespace as Arguments,
    RawDescriptionHelpFormatter as Formatter,
)
from sys import argv as sys_argv, exit as sys_exit

from telnet_runner.constants import (
    CLI_ARGUMENTS,
    CLI_HELP_DESCRIPTION,
    CLI_HELP_EPILOGUE,
    CLI_HELP_NAME,
    MAX_PORT,
    MIN_PORT,
)

from .console import set_verbosity


def build_parser() -> ArgumentParser:
    """Create the argument parser with every argument group.

    Returns:
        Configured ArgumentParser instance
    """
    parser = ArgumentParser(
        description=CLI_HELP_DESCRIPTION,
        epilog=CLI_HELP_EPILOGUE,
        prog=CLI_HELP_NAME,
        formatter_class=Formatter,
    )
    for category_name, args in CLI_ARGUMENTS.items():
        category = parser.add_argument_group(category_name)
        [category.add_argument(*flags, **kwargs) for flags, kwargs in args]
    return parser


def parse_args(argv: list[str] | None = None) -> Arguments:
    """Parse command line arguments and configure logging.

    Args:
        argv: Arguments to parse, defaults to the process arguments

    Returns:
        The parsed arguments
    """
    if argv is None:
        argv = sys_argv[1:]

    parser = build_parser()

    # Show help rather than an error when run bare
    if not argv:
        parser.print_help()
        sys_exit(0)

    parsed_args = parser.parse_args(argv)

    if not MIN_PORT <= parsed_args.port <= MAX_PORT:
        parser.error(f"port must be between {MIN_PORT} and {MAX_PORT}")
    if not parsed_args.commands and parsed_args.script is None:
        parser.error("at least one --command or a --script is required")

    set_verbosity(parsed_args.verbose)

    return parsed_args
