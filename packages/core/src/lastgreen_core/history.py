"""Reconcile runs against the branch's actual history.

GitHub keeps a run attached to its branch name even after a rebase or
force-push rewrites the run's commit out of that branch. Diffing against such
a commit fails (or silently diffs against unrelated history), so a run only
counts if its commit is among the branch's most recent HISTORY_WINDOW commits,
fetched as a single page.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Collection, Iterable

if TYPE_CHECKING:
    from lastgreen_core.models import RunRecord
    from lastgreen_core.sources.base import BaseRunSource

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 100


def retain_reachable(runs: Iterable[RunRecord], commit_ids: Collection[str]) -> list[RunRecord]:
    """Keep the runs whose commit is in ``commit_ids``, preserving order."""
    return [run for run in runs if run.commit_id in commit_ids]


class RunHistoryFilter:
    """Filters runs against one branch's history window.

    The window is fetched on the first call to ``filter`` and reused afterwards,
    so paging through runs costs a single history fetch.
    """

    def __init__(self, source: BaseRunSource, branch: str, window: int = HISTORY_WINDOW):
        self._source = source
        self._branch = branch
        self._window = window
        self._commit_ids: frozenset[str] | None = None

    @property
    def commit_ids(self) -> frozenset[str]:
        if self._commit_ids is None:
            commits = self._source.list_commits(self._branch, self._window)
            self._commit_ids = frozenset(commits)
            logger.debug("Loaded %d commit(s) of branch %s", len(self._commit_ids), self._branch)
        return self._commit_ids

    def filter(self, runs: Iterable[RunRecord]) -> list[RunRecord]:
        runs = list(runs)
        kept = retain_reachable(runs, self.commit_ids)
        dropped = len(runs) - len(kept)
        if dropped:
            logger.info(
                "Discarded %d run(s) whose commit is not in the last %d commits of %s (rebased or force-pushed)",
                dropped,
                self._window,
                self._branch,
            )
        return kept


def filter_reachable_runs(runs: Iterable[RunRecord], branch: str, source: BaseRunSource) -> list[RunRecord]:
    """One-shot form of RunHistoryFilter: fetch the window and filter ``runs`` against it."""
    return RunHistoryFilter(source, branch).filter(runs)
