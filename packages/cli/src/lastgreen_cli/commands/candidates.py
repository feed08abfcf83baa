"""candidates command: show the runs resolution would consider."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from lastgreen_cli.commands.common import load_run_config, open_source, run_options
from lastgreen_core.branch import resolve_branch_name
from lastgreen_core.errors import LastGreenError
from lastgreen_core.history import filter_reachable_runs
from lastgreen_core.models import RunScope

console = Console()

_conclusion_style = {
    "success": "green",
    "failure": "red",
    "cancelled": "yellow",
}


@click.command("candidates")
@run_options
@click.option("--successful-only", is_flag=True, help="Only list runs that concluded successfully.")
@click.option(
    "--page",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Page of runs to inspect, newest first.",
)
@click.pass_context
def candidates_cmd(ctx, repo: str, workflow_id: str | None, event, successful_only: bool, page: int):
    """List the runs on the branch whose commit is still in its history.

    Runs attached to the branch whose commit was rebased or force-pushed away
    are counted but not shown.
    """
    config = load_run_config(ctx, {"workflow_id": workflow_id})

    try:
        branch = resolve_branch_name(event)
        source = open_source(repo, config)
        scope = RunScope(
            branch=branch,
            workflow_id=config["workflow_id"],
            status="success" if successful_only else None,
            page=page,
            page_size=config["page_size"],
        )
        runs = source.list_runs(scope)
        candidates = filter_reachable_runs(runs, branch, source)
    except LastGreenError as e:
        raise click.ClickException(str(e)) from e

    if not candidates:
        console.print(f"[yellow]No runs on {branch} with a commit still in its history.[/yellow]")
        return

    table = Table(title=f"Candidate runs: {repo}@{branch}", show_header=True, header_style="bold cyan")
    table.add_column("Run", style="bold", width=12)
    table.add_column("Workflow", max_width=30)
    table.add_column("SHA", width=8, no_wrap=True)
    table.add_column("Status", width=12)
    table.add_column("Conclusion", width=12)
    table.add_column("Created At", width=20)

    for run in candidates:
        conclusion = run.conclusion or "-"
        style = _conclusion_style.get(conclusion, "white")
        table.add_row(
            str(run.id),
            run.name,
            run.commit_id[:7],
            run.status,
            f"[{style}]{conclusion}[/{style}]",
            run.created_at.strftime("%Y-%m-%d %H:%M:%S") if run.created_at else "",
        )

    console.print(table)
    dropped = len(runs) - len(candidates)
    if dropped:
        console.print(f"[dim]{dropped} run(s) hidden: commit no longer on {branch}.[/dim]")
