"""GitHub Actions run source backed by PyGithub."""

from __future__ import annotations

import logging
from itertools import islice

import requests
from github import Auth, Github, GithubException

from lastgreen_core.errors import ConfigurationError, RetrievalError
from lastgreen_core.models import JobRecord, RunRecord, RunScope
from lastgreen_core.sources.base import MAX_PAGE_SIZE, BaseRunSource

logger = logging.getLogger(__name__)

# PyGithub raises GithubException (and subclasses: bad credentials, rate limit,
# unknown object) for API errors, and lets requests errors through for network failures.
_API_ERRORS = (GithubException, requests.RequestException)


def get_repo(repo_name: str, token: str):
    """Return the PyGithub Repository for ``owner/name``.

    The client always lists MAX_PAGE_SIZE items per request; smaller run pages
    are cut out of those by GitHubRunSource.list_runs.
    """
    if not repo_name or repo_name.count("/") != 1:
        raise ConfigurationError(f"Repository must be in owner/name format, got {repo_name!r}.")
    try:
        return Github(auth=Auth.Token(token), per_page=MAX_PAGE_SIZE).get_repo(repo_name)
    except _API_ERRORS as e:
        raise RetrievalError(f"Error getting repository {repo_name}: {e}") from e


def _to_run_record(run) -> RunRecord:
    return RunRecord(
        id=run.id,
        commit_id=run.head_sha,
        status=run.status,
        conclusion=run.conclusion,
        name=run.name or "",
        workflow_id=run.workflow_id,
        created_at=run.created_at,
        url=run.html_url or "",
    )


def _to_job_record(job) -> JobRecord:
    return JobRecord(
        name=job.name,
        status=job.status,
        conclusion=job.conclusion,
        id=job.id,
        run_id=job.run_id,
    )


def _slice_page(paginated, start: int, size: int) -> list:
    """Return items ``start`` to ``start + size`` of a PaginatedList fetched MAX_PAGE_SIZE at a time.

    With ``size`` <= MAX_PAGE_SIZE the slice spans at most two API pages.
    """
    # PaginatedList pages are 0-based.
    api_page, offset = divmod(start, MAX_PAGE_SIZE)
    items = list(paginated.get_page(api_page))
    if offset + size > len(items) and len(items) == MAX_PAGE_SIZE:
        items += paginated.get_page(api_page + 1)
    return items[offset : offset + size]


def _newest_first(runs: list[RunRecord]) -> list[RunRecord]:
    # GitHub lists runs by creation time descending; the stable sort keeps API order on ties.
    return sorted(runs, key=lambda r: r.created_at.timestamp() if r.created_at else 0.0, reverse=True)


class GitHubRunSource(BaseRunSource):
    """Lists workflow runs, jobs and branch commits of one repository."""

    def __init__(self, repo):
        self._repo = repo

    def list_runs(self, scope: RunScope) -> list[RunRecord]:
        kwargs = {"branch": scope.branch}
        if scope.status:
            kwargs["status"] = scope.status
        page_size = max(1, min(scope.page_size, MAX_PAGE_SIZE))

        try:
            if scope.workflow_id:
                paginated = self._repo.get_workflow(scope.workflow_id).get_runs(**kwargs)
            else:
                paginated = self._repo.get_workflow_runs(**kwargs)
            page = _slice_page(paginated, (scope.page - 1) * page_size, page_size)
        except _API_ERRORS as e:
            raise RetrievalError(f"Error getting workflow runs: {e}") from e

        runs = _newest_first([_to_run_record(run) for run in page])
        logger.debug(
            "Fetched %d run(s) for branch %s (workflow=%s, status=%s, page=%d)",
            len(runs),
            scope.branch,
            scope.workflow_id or "any",
            scope.status or "any",
            scope.page,
        )
        return runs

    def list_jobs(self, run_id: int) -> list[JobRecord]:
        try:
            run = self._repo.get_workflow_run(run_id)
            # Iterating the PaginatedList fetches every page of jobs.
            return [_to_job_record(job) for job in run.jobs()]
        except _API_ERRORS as e:
            raise RetrievalError(f"Error getting workflow run jobs: {e}") from e

    def list_commits(self, branch: str, limit: int) -> list[str]:
        try:
            # Iteration stops after ``limit`` commits: one request while limit <= MAX_PAGE_SIZE.
            return [commit.sha for commit in islice(self._repo.get_commits(sha=branch), limit)]
        except _API_ERRORS as e:
            raise RetrievalError(f"Error getting commits of branch {branch}: {e}") from e
