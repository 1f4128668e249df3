"""Main CLI entry point for provcat.

This module provides the ``provcat`` command group for inspecting the
normalized provider catalog.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from provcat import __version__
from provcat.core.catalog import Provider, index_by_id
from provcat.core.client import CatalogClient, CatalogFailed
from provcat.core.config import load_settings
from provcat.utils.log import get_logger, init_logger
from provcat.utils.user_agent import build_user_agent

console = Console()
logger = get_logger()


def _load_providers(ctx: click.Context) -> Tuple[Provider, ...]:
    obj: Dict[str, Any] = ctx.ensure_object(dict)
    client = CatalogClient(settings=obj["settings"], transport=obj.get("transport"))
    result = client.load()
    if isinstance(result, CatalogFailed):
        raise click.ClickException(str(result.error))
    return result.providers


def _format_cost(value: float) -> str:
    return f"{value:g}"


@click.group()
@click.version_option(version=__version__)
@click.option("--url", type=str, help="Catalog URL (defaults to models.dev)")
@click.option("--timeout", type=float, help="Request timeout in seconds")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write debug logs to this file",
)
@click.pass_context
def cli(
    ctx: click.Context, url: Optional[str], timeout: Optional[float], log_file: Optional[Path]
) -> None:
    """provcat - LLM provider catalog"""
    init_logger(log_file=log_file)

    try:
        settings = load_settings(url=url, timeout=timeout, user_agent=build_user_agent("cli"))
    except ValidationError as e:
        raise click.ClickException(f"Invalid settings: {e}") from e

    obj: Dict[str, Any] = ctx.ensure_object(dict)
    obj["settings"] = settings
    logger.debug(
        "[cli] Settings resolved",
        extra={"url": settings.url, "timeout": settings.timeout},
    )


@cli.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Print providers as JSON")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List providers with their default models"""
    providers = _load_providers(ctx)

    if as_json:
        click.echo(json.dumps([provider.model_dump(mode="json") for provider in providers], indent=2))
        return

    table = Table(title=f"Providers ({len(providers)})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Models", justify="right")
    table.add_column("Large")
    table.add_column("Small")
    for provider in providers:
        table.add_row(
            escape(provider.id),
            escape(provider.name),
            str(len(provider.models)),
            escape(provider.default_large_model_id) or "-",
            escape(provider.default_small_model_id) or "-",
        )
    console.print(table)


@cli.command(name="show")
@click.argument("provider_id")
@click.option("--json", "as_json", is_flag=True, help="Print the provider as JSON")
@click.pass_context
def show_cmd(ctx: click.Context, provider_id: str, as_json: bool) -> None:
    """Show the models offered by one provider"""
    provider = index_by_id(_load_providers(ctx)).get(provider_id)
    if provider is None:
        raise click.ClickException(f"Unknown provider '{provider_id}'.")

    if as_json:
        click.echo(provider.model_dump_json(indent=2))
        return

    console.print(f"\n[bold]{escape(provider.name or provider.id)}[/bold] ({escape(provider.id)})")
    console.print(f"API endpoint: {escape(provider.api_endpoint) or '-'}")
    console.print(f"Default large model: {escape(provider.default_large_model_id) or '-'}")
    console.print(f"Default small model: {escape(provider.default_small_model_id) or '-'}\n")

    table = Table()
    table.add_column("Model", style="cyan", no_wrap=True)
    table.add_column("Context", justify="right")
    table.add_column("Max out", justify="right")
    table.add_column("$/1M in", justify="right")
    table.add_column("$/1M out", justify="right")
    table.add_column("Reasoning")
    table.add_column("Images")
    for model in provider.models:
        table.add_row(
            escape(model.id),
            str(model.context_window),
            str(model.default_max_tokens),
            _format_cost(model.cost_per_1m_in),
            _format_cost(model.cost_per_1m_out),
            "yes" if model.can_reason else "no",
            "yes" if model.supports_images else "no",
        )
    console.print(table)


@cli.command(name="version")
def version_cmd() -> None:
    """Show version information"""
    console.print(f"provcat version {__version__}")


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
