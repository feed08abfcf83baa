"""Resolve the commit of the most recent relevant successful run on a branch.

Two strategies, chosen by whether a job name is given:

  workflow-level  newest run with status=success whose commit is still on the branch.
  job-level       newest run (any conclusion) containing a completed, successful
                  job with exactly that name. A run can fail overall while the job
                  we care about succeeded, so runs are not filtered by status.

Either way an empty commit id means "no prior success", which callers treat as
"build everything". Misconfiguration and API failures raise.
"""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Iterable, Iterator

from lastgreen_core.branch import EventContext, resolve_branch_name
from lastgreen_core.history import RunHistoryFilter, filter_reachable_runs
from lastgreen_core.models import STRATEGY_JOB, STRATEGY_WORKFLOW, JobRecord, Resolution, RunRecord, RunScope
from lastgreen_core.sources.base import MAX_PAGE_SIZE

if TYPE_CHECKING:
    from lastgreen_core.sources.base import BaseRunSource

logger = logging.getLogger(__name__)

def job_succeeded(job: JobRecord, job_name: str) -> bool:
    return job.name == job_name and job.status == "completed" and job.conclusion == "success"


def iter_candidate_runs(
    source: BaseRunSource,
    history: RunHistoryFilter,
    branch: str,
    workflow_id: str | None = None,
    status: str | None = None,
    page_size: int = MAX_PAGE_SIZE,
    max_pages: int | None = None,
) -> Iterator[RunRecord]:
    """Yield reconciled runs newest-first, fetching the next page only when needed.

    Stops at the first short page (no more runs), or after ``max_pages`` pages when a cap is given.
    """
    pages = itertools.count(1) if max_pages is None else range(1, max_pages + 1)
    for page in pages:
        scope = RunScope(branch=branch, workflow_id=workflow_id, status=status, page=page, page_size=page_size)
        runs = source.list_runs(scope)
        yield from history.filter(runs)
        if len(runs) < page_size:
            return


def iter_run_jobs(source: BaseRunSource, runs: Iterable[RunRecord]) -> Iterator[tuple[RunRecord, list[JobRecord]]]:
    """Yield ``(run, jobs)`` pairs, listing a run's jobs only when the pair is requested."""
    for run in runs:
        yield run, source.list_jobs(run.id)


def _resolve_workflow_level(
    source: BaseRunSource, branch: str, workflow_id: str | None, page_size: int
) -> Resolution:
    scope = RunScope(branch=branch, workflow_id=workflow_id, status="success", page=1, page_size=page_size)
    runs = source.list_runs(scope)
    candidates = filter_reachable_runs(runs, branch, source)
    logger.info("%d of %d successful run(s) are still on %s", len(candidates), len(runs), branch)

    if not candidates:
        logger.info("No successful workflow runs found, defaulting to empty string")
        return Resolution(commit_id="", branch=branch, strategy=STRATEGY_WORKFLOW)

    latest = candidates[0]
    logger.info("Latest successful workflow run commit hash: %s (run %d)", latest.commit_id, latest.id)
    return Resolution(commit_id=latest.commit_id, branch=branch, strategy=STRATEGY_WORKFLOW, run_id=latest.id)


def _resolve_job_level(
    source: BaseRunSource,
    branch: str,
    job_name: str,
    workflow_id: str | None,
    page_size: int,
    max_pages: int | None,
) -> Resolution:
    history = RunHistoryFilter(source, branch)
    runs = iter_candidate_runs(
        source, history, branch, workflow_id=workflow_id, page_size=page_size, max_pages=max_pages
    )

    for run, jobs in iter_run_jobs(source, runs):
        logger.debug("Checking %d job(s) of run %d at commit %s", len(jobs), run.id, run.commit_id)
        for job in jobs:
            logger.debug("Job %r: status=%s conclusion=%s", job.name, job.status, job.conclusion)
            if job_succeeded(job, job_name):
                logger.info(
                    "The hash of the latest commit in which job %r was successful: %s (run %d)",
                    job_name,
                    run.commit_id,
                    run.id,
                )
                return Resolution(commit_id=run.commit_id, branch=branch, strategy=STRATEGY_JOB, run_id=run.id)

    logger.info("Job %r never succeeded in a run still on %s, defaulting to empty string", job_name, branch)
    return Resolution(commit_id="", branch=branch, strategy=STRATEGY_JOB)


def resolve_last_successful_commit(
    source: BaseRunSource,
    event: EventContext,
    job_name: str | None = None,
    workflow_id: str | None = None,
    page_size: int = MAX_PAGE_SIZE,
    max_pages: int | None = None,
) -> Resolution:
    """Return the Resolution for the branch identified by ``event``.

    Raises ConfigurationError if the branch cannot be derived and RetrievalError
    if any call to ``source`` fails; never returns a partial result.
    """
    branch = resolve_branch_name(event)
    page_size = max(1, min(page_size, MAX_PAGE_SIZE))
    logger.info("Resolving on branch %s (workflow: %s)", branch, workflow_id or "all")

    if not job_name:
        logger.info("Job name not provided, using the latest successful workflow run")
        return _resolve_workflow_level(source, branch, workflow_id, page_size)

    logger.info("Looking for the latest run in which job %r succeeded", job_name)
    return _resolve_job_level(source, branch, job_name, workflow_id, page_size, max_pages)
