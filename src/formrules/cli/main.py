"""formrules CLI entry point."""

import logging

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """formrules — declarative form validation CLI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Register subcommands
from formrules.cli.form_cmd import check, lint  # noqa: E402

cli.add_command(lint)
cli.add_command(check)
