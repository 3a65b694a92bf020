"""CLI entry point for litsearch."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

import click
from rich.console import Console

console = Console()


@click.group()
@click.version_option(package_name="litsearch")
@click.option("--verbose", "-v", is_flag=True, help="Log upstream calls and failures.")
def cli(verbose: bool):
    """litsearch - Search Semantic Scholar and arXiv at once, with AI summaries."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(message)s",
    )


# ---------------------------------------------------------------------------
# litsearch search
# ---------------------------------------------------------------------------


async def _run_search(query: str):
    from litsearch.aggregator import build_aggregator
    from litsearch.backends.http import build_http_client
    from litsearch.config import load_settings

    settings = load_settings()
    async with build_http_client(settings) as http_client:
        return await build_aggregator(settings, http_client).search(query)


@cli.command()
@click.argument("query")
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON response.")
def search(query: str, as_json: bool):
    """Search every source and summarize the results.

    QUERY: the search query string
    """
    from litsearch.models import InvalidQueryError
    from litsearch.renderer import render_response

    try:
        response = asyncio.run(_run_search(query))
    except InvalidQueryError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(2)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(response.to_dict(), indent=2))
    else:
        render_response(response)


# ---------------------------------------------------------------------------
# litsearch serve
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--host", default=None, help="Bind address (default: $HOST or 0.0.0.0).")
@click.option("--port", "-p", default=None, type=int, help="Port (default: $PORT or 3000).")
def serve(host: Optional[str], port: Optional[int]):
    """Run the HTTP API (POST /search)."""
    from litsearch.server import run

    logging.getLogger().setLevel(logging.INFO)
    run(host=host, port=port)


# ---------------------------------------------------------------------------
# litsearch env
# ---------------------------------------------------------------------------


@cli.group(invoke_without_command=True)
@click.pass_context
def env(ctx):
    """Show which optional keys are configured.

    `litsearch env set KEY value` stores a key in ~/.litsearch/.env.
    """
    if ctx.invoked_subcommand is not None:
        return

    from rich.table import Table

    from litsearch.config import PERSISTENT_ENV, check_env

    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Key", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Service")
    table.add_column("Enables")
    for var, is_set, info in check_env():
        table.add_row(
            var,
            "[green]set[/green]" if is_set else "[dim]unset[/dim]",
            info["description"],
            "; ".join(info["required_by"]),
        )
    console.print(table)
    console.print(f"Persistent keys: {PERSISTENT_ENV}", style="dim")


@env.command("set")
@click.argument("key")
@click.argument("value")
def env_set(key: str, value: str):
    """Store KEY=VALUE in ~/.litsearch/.env (keys are case-insensitive)."""
    from litsearch.config import VALID_KEYS, save_key

    name = key.upper()
    if name not in VALID_KEYS:
        console.print(f"[red]Unknown key: {name}[/red] (expected one of {', '.join(sorted(VALID_KEYS))})")
        raise SystemExit(1)

    console.print(f"{name} written to {save_key(name, value)}")
