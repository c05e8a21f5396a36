"""
ReviewWeb CLI - one subcommand per ReviewWeb.site operation.

Run `reviewweb --help` for the list of commands. Every operation command is
generated from the operation table, so its flags mirror the tool arguments
(kebab-case): `reviewweb convert-to-markdown --url https://example.com`.
"""

import asyncio
import re
import sys
import typing
from typing import Any, Dict, List, Optional, Type

import click
from rich.console import Console
from rich.table import Table

from reviewweb import __version__
from reviewweb.core.controller import run_operation
from reviewweb.core.errors import ReviewWebError, format_error_for_cli
from reviewweb.core.logging import configure_logging
from reviewweb.tools.registry import Operation, registry
from reviewweb.tools.schema import ToolArgs
from reviewweb.validation.config import Config, ConfigError

console = Console()
err_console = Console(stderr=True)


def _kebab(name: str) -> str:
    """``delayAfterLoad`` / ``review_id`` -> ``delay-after-load`` / ``review-id``."""
    return re.sub(r"(?<!^)(?=[A-Z])", "-", name).replace("_", "-").lower()


def _unwrap_optional(annotation: Any) -> Any:
    """``Optional[Annotated[int, ...]]`` -> ``int``."""
    if typing.get_origin(annotation) is typing.Union:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            annotation = args[0]
    if typing.get_origin(annotation) is typing.Annotated:
        annotation = typing.get_args(annotation)[0]
    return annotation


def _build_options(model: Type[ToolArgs]) -> List[click.Option]:
    """Translate an argument model into click options, in declaration order."""
    options: List[click.Option] = []

    for name, info in model.model_fields.items():
        wire = info.alias or name
        decls = [f"--{_kebab(wire)}", name]
        help_text = info.description or ""
        required = info.is_required()
        annotation = _unwrap_optional(info.annotation)
        origin = typing.get_origin(annotation)

        if annotation is bool:
            options.append(click.Option(decls, is_flag=True, default=False, help=help_text))
        elif annotation is int:
            options.append(click.Option(decls, type=click.INT, required=required, help=help_text))
        elif origin is typing.Literal:
            choices = [str(choice) for choice in typing.get_args(annotation)]
            options.append(click.Option(decls, type=click.Choice(choices), required=required, help=help_text))
        elif origin in (list, List):
            options.append(
                click.Option(
                    decls,
                    multiple=True,
                    required=required,
                    help=f"{help_text} (repeat the flag for each value)",
                )
            )
        else:
            options.append(click.Option(decls, type=click.STRING, required=required, help=help_text))

    return options


def _collect_arguments(model: Type[ToolArgs], params: Dict[str, Any]) -> Dict[str, Any]:
    """Parsed click values -> wire-keyed arguments, leaving out flags that were not given."""
    arguments: Dict[str, Any] = {}
    for name, info in model.model_fields.items():
        value = params.get(name)
        if value is None or value is False or value == ():
            continue
        if isinstance(value, tuple):
            value = list(value)
        arguments[info.alias or name] = value
    return arguments


def _load_config(ctx: click.Context) -> Config:
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = Config.load()
        except ConfigError as e:
            err_console.print(f"Error: {e}", style="red", markup=False)
            sys.exit(1)
    return ctx.obj["config"]


def _make_operation_command(operation: Operation) -> click.Command:
    """Build the subcommand for one operation."""

    @click.pass_context
    def callback(ctx: click.Context, **params: Any) -> None:
        config = ctx.obj["config"]
        arguments = _collect_arguments(operation.args_model, params)

        try:
            response = asyncio.run(run_operation(config, operation.name, arguments))
        except ReviewWebError as error:
            err_console.print(format_error_for_cli(error), style="red", markup=False, highlight=False)
            sys.exit(1)

        click.echo(response.content)

    return click.Command(
        operation.command_name,
        callback=callback,
        params=_build_options(operation.args_model),
        help=operation.description,
        short_help=operation.summary,
    )


@click.group()
@click.version_option(__version__, "--version", "-v", prog_name="reviewweb")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Local log level (logs go to stderr)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]) -> None:
    """
    ReviewWeb - ReviewWeb.site tools from the terminal, or as an MCP server.

    The API key comes from --api-key, REVIEWWEBSITE_API_KEY, or
    .reviewweb/config.yaml.

    \b
    Examples:
        reviewweb convert-to-markdown --url https://example.com
        reviewweb get-review --review-id abc123
        reviewweb serve --transport http --port 8080
    """
    config = _load_config(ctx)
    if log_level:
        config.set("logging.level", log_level.upper())
    try:
        configure_logging(config.merged.logging.level)
    except ConfigError as e:
        err_console.print(f"Error: {e}", style="red", markup=False)
        sys.exit(1)


for _operation in registry:
    cli.add_command(_make_operation_command(_operation))


@cli.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http", "sse"]),
    default=None,
    help="MCP transport (default from config: stdio)",
)
@click.option("--host", default=None, help="Bind address for http/sse")
@click.option("--port", type=click.INT, default=None, help="Port for http/sse")
@click.pass_context
def serve(ctx: click.Context, transport: Optional[str], host: Optional[str], port: Optional[int]) -> None:
    """Start the MCP server."""
    from reviewweb.server.app import run_server

    run_server(ctx.obj["config"], transport=transport, host=host, port=port)


@cli.command()
def operations() -> None:
    """List every available operation."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Command", style="cyan")
    table.add_column("Method", style="dim")
    table.add_column("Path", style="dim")
    table.add_column("Description")

    for operation in registry:
        table.add_row(operation.command_name, operation.method, operation.path, operation.summary)

    console.print(table)


@cli.command()
@click.option("--api-key", required=True, help="Your ReviewWebsite API key")
@click.option("--global", "global_", is_flag=True, help="Store in ~/.reviewweb instead of the project")
@click.pass_context
def configure(ctx: click.Context, api_key: str, global_: bool) -> None:
    """Store the API key in a config file."""
    config: Config = ctx.obj["config"]
    config.set_api_key(api_key, global_=global_)
    path = config.save(global_=global_)
    console.print(f"[green]API key saved to {path}[/green]")


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
