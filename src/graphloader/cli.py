#!/usr/bin/env python3
"""
Main CLI entry point for graphloader.
"""

import asyncio
import json
import sys

import click

from graphloader import __version__
from graphloader.config import settings
from graphloader.logging import configure_logging, get_logger

logger = get_logger(__name__)

DEFAULT_QUERY = '{ user(id: "1") { id, name, email } }'


@click.group()
@click.version_option(version=__version__, prog_name="graphloader")
def cli() -> None:
    """graphloader CLI - run queries against the cached user schema."""
    pass


@cli.command()
@click.argument("query_text", metavar="QUERY", default=DEFAULT_QUERY)
@click.option(
    "--variables",
    default=None,
    help="Query variables as a JSON object",
)
@click.option(
    "--operation",
    "operation_name",
    default=None,
    help="Operation to run when the document defines several",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["debug", "info", "warning", "error", "critical"], case_sensitive=False),
    help="Log level (default: GRAPHLOADER_LOG_LEVEL, else info)",
)
def query(
    query_text: str,
    variables: str | None,
    operation_name: str | None,
    log_level: str | None,
) -> None:
    """Execute QUERY and print the JSON response."""
    from graphloader.graphql import QueryEngine

    configure_logging(debug=settings.debug, log_level=log_level or settings.log_level)

    parsed_variables = None
    if variables is not None:
        try:
            parsed_variables = json.loads(variables)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"not valid JSON: {e}", param_hint="--variables") from e
        if not isinstance(parsed_variables, dict):
            raise click.BadParameter("must be a JSON object", param_hint="--variables")

    async def do_query():
        with QueryEngine() as engine:
            return await engine.execute(query_text, parsed_variables, operation_name)

    response = asyncio.run(do_query())
    click.echo(json.dumps(response.formatted, indent=2))

    if not response.ok:
        logger.error("Query returned errors", errors=len(response.errors))
        sys.exit(1)


@cli.command()
def schema() -> None:
    """Print the schema definition."""
    from graphloader.graphql import SCHEMA_SDL

    click.echo(SCHEMA_SDL.strip())


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
