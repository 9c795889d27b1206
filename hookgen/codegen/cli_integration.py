"""
CLI integration for hook generation.

Provides the generate, openapi and init-config subcommands.
"""

import argparse
from pathlib import Path
from typing import Dict, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.syntax import Syntax
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from .core.config import ConfigError, GeneratorConfig, get_config_manager, load_config
from .core.generator import GeneratorError
from .core.templates import TemplateError
from .models import GenerateFileResponse, GenerateRequest
from .openapi import import_endpoints
from .pipeline import HookGenerator
from ..logging_config import get_logger

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()

# Fragment kind -> output file name
OUTPUT_FILES: Dict[str, str] = {
    "model": "model.ts",
    "api": "api.ts",
    "query_key": "queryKey.ts",
    "hook": "hook.ts",
}

HANDLED_ERRORS = (GeneratorError, ConfigError, TemplateError, CLIError)


def create_generate_subparser(subparsers) -> argparse.ArgumentParser:
    """
    Create the ``generate`` subcommand parser.

    Args:
        subparsers: Subparser group from main parser

    Returns:
        Configured subparser for the generate command
    """
    parser = subparsers.add_parser(
        "generate",
        help="Generate hook fragments for one endpoint",
        description="Generate model, api, queryKey and hook fragments for one endpoint",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hookgen generate --name getUser --method GET --url "/users/{id}" --hook query
  hookgen generate -n getUsers -m POST -u /users/search --hook infiniteQuery \\
      --example-file users.json --params '{"pageNo": 1, "pageSize": 20}'
  hookgen generate -n createUser -m POST -u /users --hook mutation -o src/users
        """.strip(),
    )

    parser.add_argument("--name", "-n", required=True, help="Feature name (e.g. getUsers)")
    parser.add_argument("--method", "-m", required=True, help="HTTP method")
    parser.add_argument("--url", "-u", required=True, help="API URL template")
    parser.add_argument(
        "--hook",
        required=True,
        help="Hook type: query, mutation or infiniteQuery",
    )

    example_group = parser.add_mutually_exclusive_group()
    example_group.add_argument("--example", help="Example response as JSON text")
    example_group.add_argument("--example-file", help="File holding an example response")

    params_group = parser.add_mutually_exclusive_group()
    params_group.add_argument("--params", help="Example params as JSON text")
    params_group.add_argument("--params-file", help="File holding example params")

    parser.add_argument("--response-schema-file", help="JSON Schema of the response")
    parser.add_argument("--params-schema-file", help="JSON Schema of the params")
    parser.add_argument("--wrapper", help="Envelope type wrapping the response")
    parser.add_argument(
        "--skip-models",
        action="store_true",
        help="Don't generate the model fragment",
    )

    _add_output_args(parser)
    parser.set_defaults(func=handle_generate_command)
    return parser


def create_openapi_subparser(subparsers) -> argparse.ArgumentParser:
    """Create the ``openapi`` subcommand parser."""
    parser = subparsers.add_parser(
        "openapi",
        help="Generate hooks for the operations of an OpenAPI document",
        description="Generate hooks for every (or selected) OpenAPI operation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hookgen openapi openapi.json
  hookgen openapi https://example.com/openapi.json --select "GET /users"
        """.strip(),
    )
    parser.add_argument("source", help="File path, URL or inline JSON text")
    parser.add_argument(
        "--select",
        action="append",
        metavar="OPERATION",
        help='Only generate this operation ("METHOD /path" or feature name); repeatable',
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the operations in the document and exit",
    )
    _add_output_args(parser)
    parser.set_defaults(func=handle_openapi_command)
    return parser


def create_init_config_subparser(subparsers) -> argparse.ArgumentParser:
    """Create the ``init-config`` subcommand parser."""
    parser = subparsers.add_parser(
        "init-config",
        help="Write the default configuration to a JSON file",
    )
    parser.add_argument("file", help="Configuration file to create")
    parser.add_argument(
        "--force", action="store_true", help="Overwrite an existing file"
    )
    parser.set_defaults(func=handle_init_config_command)
    return parser


def _add_output_args(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--output-dir",
        "-o",
        metavar="DIR",
        help="Write model.ts, api.ts, queryKey.ts and hook.ts here (default: print)",
    )
    parser.add_argument("--config", metavar="FILE", help="JSON configuration file")


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Load configuration from ``--config`` and report validation warnings."""
    config = load_config(config_file=getattr(args, "config", None))
    for warning in get_config_manager().validate_config(config):
        logger.warning(warning)
    return config


def _read_text(path: Optional[str], label: str) -> Optional[str]:
    if not path:
        return None
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise CLIError(f"Cannot read {label} file {path}: {e}") from e


def request_from_args(args: argparse.Namespace) -> GenerateRequest:
    """Build a GenerateRequest from parsed ``generate`` arguments."""
    return GenerateRequest(
        feature_name=args.name,
        method_type=args.method,
        api_url=args.url,
        hook_type=args.hook,
        example_response=args.example or _read_text(args.example_file, "example") or "",
        params=args.params or _read_text(args.params_file, "params") or "",
        response_schema=_read_text(args.response_schema_file, "response schema"),
        params_schema=_read_text(args.params_schema_file, "params schema"),
        skip_model_generation=args.skip_models,
        wrapper_args=args.wrapper,
    )


def handle_generate_command(args: argparse.Namespace) -> int:
    """
    Handle the generate subcommand.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        config = build_config(args)
        request = request_from_args(args)
        response = HookGenerator(config).generate(request)
        return output_response(response, args.output_dir)
    except HANDLED_ERRORS as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def handle_openapi_command(args: argparse.Namespace) -> int:
    """Handle the openapi subcommand."""
    try:
        config = build_config(args)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("[cyan]Loading API description...", total=None)
            endpoints = import_endpoints(args.source, config, args.select)
            progress.remove_task(task)

            if args.list:
                progress.stop()
                _print_endpoints(endpoints)
                return 0

            if not endpoints:
                raise CLIError("No matching operations found")

            progress.add_task(
                f"[green]Generating {len(endpoints)} endpoints...", total=None
            )
            response = HookGenerator(config).generate_batch(endpoints)

        return output_response(response, args.output_dir)
    except HANDLED_ERRORS as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def handle_init_config_command(args: argparse.Namespace) -> int:
    """Handle the init-config subcommand."""
    path = Path(args.file)
    if path.exists() and not args.force:
        console.print(f"[red]✗[/red] {path} already exists (use --force to overwrite)")
        return 1
    try:
        get_config_manager().save_config(GeneratorConfig(), path)
    except ConfigError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    console.print(f"[green]✓[/green] Default configuration written to [cyan]{path}[/cyan]")
    return 0


def _print_endpoints(endpoints) -> None:
    table = Table(title="📋 Operations", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Method", style="bold green", no_wrap=True)
    table.add_column("Path", style="cyan")
    table.add_column("Feature", style="bold")
    table.add_column("Hook", style="blue")
    table.add_column("Summary", style="dim")

    for endpoint in endpoints:
        table.add_row(
            endpoint.method,
            endpoint.path,
            endpoint.feature_name,
            endpoint.hook_type,
            endpoint.summary or "",
        )

    console.print()
    console.print(table)


def write_response(response: GenerateFileResponse, output_dir: Path) -> Dict[str, Path]:
    """
    Write each non-empty fragment to its file in ``output_dir``.

    Returns:
        Mapping of fragment kind to the written path
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written = {}
    for kind, text in response.fragments():
        path = output_dir / OUTPUT_FILES[kind]
        path.write_text(text + "\n", encoding="utf-8")
        written[kind] = path
    return written


def display_response(response: GenerateFileResponse, out: Optional[Console] = None) -> None:
    """Print every non-empty fragment with TypeScript highlighting."""
    out = out or console
    for kind, text in response.fragments():
        out.print()
        out.print(
            Panel(
                Syntax(text, "typescript", theme="monokai", line_numbers=False),
                title=f"📄 {OUTPUT_FILES[kind]}",
                border_style="green",
            )
        )


def output_response(response: GenerateFileResponse, output_dir: Optional[str]) -> int:
    """Print the fragments or write them to ``output_dir``."""
    if not output_dir:
        display_response(response)
        return 0

    try:
        written = write_response(response, Path(output_dir))
    except OSError as e:
        console.print(f"[red]✗ Failed to write to {output_dir}:[/red] {e}")
        return 1

    for path in written.values():
        console.print(f"[green]✓[/green] Wrote [cyan]{path}[/cyan]")
    return 0
