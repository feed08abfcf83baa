"""resolve command: find the last green commit and export it."""

from __future__ import annotations

import click
from rich.console import Console

from lastgreen_cli.actions import set_output
from lastgreen_cli.commands.common import load_run_config, open_source, run_options
from lastgreen_core.errors import LastGreenError
from lastgreen_core.resolver import resolve_last_successful_commit

console = Console(stderr=True)


@click.command("resolve")
@run_options
@click.option(
    "--job",
    envvar="INPUT_JOB",
    default=None,
    show_envvar=True,
    help="Find the last run in which this job succeeded instead of the last successful run.",
)
@click.option(
    "--output-name",
    default=None,
    help="Name of the GitHub Actions output. Defaults to output_name in the config file, else sha.",
)
@click.pass_context
def resolve_cmd(ctx, repo: str, workflow_id: str | None, event, job: str | None, output_name: str | None):
    """Print the commit of the last successful run on the current branch.

    Prints an empty line when no earlier success exists (first run, or every
    green commit was rebased away). Inside GitHub Actions the commit is also
    written to the step output ``sha``.
    """
    config = load_run_config(ctx, {"job": job, "workflow_id": workflow_id, "output_name": output_name})

    try:
        source = open_source(repo, config)
        resolution = resolve_last_successful_commit(
            source,
            event,
            job_name=config["job"],
            workflow_id=config["workflow_id"],
            page_size=config["page_size"],
            max_pages=config["max_pages"],
        )
    except LastGreenError as e:
        raise click.ClickException(str(e)) from e

    if not resolution.found:
        console.print(f"[yellow]No earlier success found on {resolution.branch}.[/yellow]")

    set_output(config["output_name"], resolution.commit_id)
    click.echo(resolution.commit_id)
