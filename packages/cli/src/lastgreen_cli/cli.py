"""CLI entry point for lastgreen.

Commands:
  resolve     print (and export as an Actions output) the last green commit
  candidates  show the runs still on the branch that resolution would consider
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from lastgreen_cli.commands.candidates import candidates_cmd
from lastgreen_cli.commands.resolve import resolve_cmd

# stdout is reserved for the resolved commit id.
console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # PyGithub and urllib3 log every request at DEBUG.
    for noisy in ("github", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("lastgreen"),
    prog_name="lastgreen",
)
@click.option(
    "--config",
    "config_path",
    default=".lastgreen.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="LASTGREEN_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every run and job inspected.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Find the commit of the last successful CI run on a branch."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(resolve_cmd)
main.add_command(candidates_cmd)
