"""Abstract run source interface.

The resolver depends on BaseRunSource, not on a concrete client, so the GitHub
implementation can be swapped for an in-memory fake in tests (or another CI
provider) without touching the resolution logic.

Contract shared by every implementation:
  - list_runs returns one page, newest run first.
  - Every backing-call failure surfaces as RetrievalError. No retries: a
    transient failure fails the step and the CI system decides whether to re-run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lastgreen_core.models import JobRecord, RunRecord, RunScope

# GitHub rejects per_page above 100.
MAX_PAGE_SIZE = 100


class BaseRunSource(ABC):
    @abstractmethod
    def list_runs(self, scope: RunScope) -> list[RunRecord]:
        """Return one page of runs on ``scope.branch``, newest first.

        When ``scope.workflow_id`` is set only runs of that workflow are returned;
        when ``scope.status`` is set only runs with that status/conclusion are.
        """

    @abstractmethod
    def list_jobs(self, run_id: int) -> list[JobRecord]:
        """Return every job of one run."""

    @abstractmethod
    def list_commits(self, branch: str, limit: int) -> list[str]:
        """Return the ids of the ``limit`` most recent commits on ``branch``, newest first."""
