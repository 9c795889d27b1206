"""Command-line entry point for hookgen."""

import argparse
import sys

from .codegen import __version__
from .codegen.cli_integration import (
    build_config,
    console,
    create_generate_subparser,
    create_init_config_subparser,
    create_openapi_subparser,
)
from .codegen.core.config import ConfigError
from .codegen.interactive import InteractiveSession
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookgen",
        description="Generate typed React Query hooks from endpoint examples, "
        "JSON Schemas and OpenAPI documents",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log errors")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    create_generate_subparser(subparsers)
    create_openapi_subparser(subparsers)
    create_init_config_subparser(subparsers)

    interactive = subparsers.add_parser(
        "interactive", help="Describe an endpoint step by step"
    )
    interactive.add_argument("--config", metavar="FILE", help="JSON configuration file")
    interactive.set_defaults(func=handle_interactive_command)

    return parser


def handle_interactive_command(args: argparse.Namespace) -> int:
    try:
        config = build_config(args)
    except ConfigError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    return 0 if InteractiveSession(config, console).run_interactive() else 1


def main(argv=None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    logger.debug("Running command %s", args.command)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
