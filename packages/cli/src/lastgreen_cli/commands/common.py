"""Options and setup shared by the commands that talk to GitHub."""

from __future__ import annotations

import functools

import click

from lastgreen_core.branch import EventContext
from lastgreen_core.sources.github import GitHubRunSource, get_repo


def run_options(f):
    """Repository, workflow and event-context options, each defaulting to the Actions runner environment."""

    @click.option(
        "--repo",
        envvar="GITHUB_REPOSITORY",
        required=True,
        show_envvar=True,
        help="GitHub repository in owner/name format.",
    )
    @click.option(
        "--workflow-id",
        "workflow_id",
        envvar="INPUT_WORKFLOW_ID",
        default=None,
        show_envvar=True,
        help="Only consider runs of this workflow (id or file name, e.g. ci.yml).",
    )
    @click.option("--event-name", envvar="GITHUB_EVENT_NAME", default=None, show_envvar=True)
    @click.option(
        "--ref",
        envvar="GITHUB_REF",
        default=None,
        show_envvar=True,
        help="Branch ref, e.g. refs/heads/main.",
    )
    @click.option(
        "--head-ref",
        envvar="GITHUB_HEAD_REF",
        default=None,
        show_envvar=True,
        help="Pull request source branch.",
    )
    @functools.wraps(f)
    def wrapper(*args, event_name, ref, head_ref, **kwargs):
        event = EventContext(event_name=event_name, ref=ref, head_ref=head_ref)
        return f(*args, event=event, **kwargs)

    return wrapper


def load_run_config(ctx: click.Context, overrides: dict) -> dict:
    """Load the layered config and attach a GitHub token, or fail with a usage error."""
    from lastgreen_core.config import load_config
    from lastgreen_cli.auth import resolve_github_token

    config_path = (ctx.obj or {}).get("config_path", ".lastgreen.yml")
    config = load_config(config_path, cli_overrides=overrides)

    token = resolve_github_token()
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set the action's token input, GITHUB_TOKEN, or run `gh auth login` first."
        )
    config["github_token"] = token
    return config


def open_source(repo: str, config: dict) -> GitHubRunSource:
    return GitHubRunSource(get_repo(repo, token=config["github_token"]))
