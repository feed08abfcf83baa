"""Request-scoped value types shared by the run source, the history filter and the resolver.

Nothing here is persisted; every resolution builds these from scratch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

STRATEGY_WORKFLOW = "workflow"
STRATEGY_JOB = "job"


@dataclass(frozen=True)
class RunRecord:
    """One workflow run attached to a commit."""

    id: int
    commit_id: str
    status: str
    conclusion: str | None = None  # None while the run is not completed
    name: str = ""
    workflow_id: int | None = None
    created_at: datetime | None = None
    url: str = ""


@dataclass(frozen=True)
class JobRecord:
    """One job inside a workflow run. Names are compared by exact equality."""

    name: str
    status: str
    conclusion: str | None = None
    id: int | None = None
    run_id: int | None = None


@dataclass(frozen=True)
class RunScope:
    """Query parameters for a single page of runs.

    ``status`` is either "success" or None (any status). ``page`` is 1-based.
    """

    branch: str
    workflow_id: str | None = None
    status: str | None = None
    page: int = 1
    page_size: int = 100


@dataclass(frozen=True)
class Resolution:
    """Outcome of one resolution.

    ``commit_id`` is the empty string when no prior success was found; that is a
    normal result, not a failure.
    """

    commit_id: str
    branch: str
    strategy: str  # STRATEGY_WORKFLOW | STRATEGY_JOB
    run_id: int | None = None

    @property
    def found(self) -> bool:
        return bool(self.commit_id)
