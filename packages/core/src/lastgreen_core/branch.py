"""Branch identity derived from the triggering event.

On pull_request events GITHUB_REF points at the synthetic merge ref
(refs/pull/<n>/merge), which never has runs of its own. The branch we care
about is the PR's source branch, carried in GITHUB_HEAD_REF. Every other event
carries the branch in GITHUB_REF as refs/heads/<name>.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from lastgreen_core.errors import ConfigurationError

logger = logging.getLogger(__name__)

PULL_REQUEST_EVENT = "pull_request"
BRANCH_REF_PREFIX = "refs/heads/"


@dataclass(frozen=True)
class EventContext:
    event_name: str | None = None
    ref: str | None = None
    head_ref: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EventContext:
        """Build the context from the GitHub Actions runner environment."""
        env = os.environ if environ is None else environ
        return cls(
            event_name=env.get("GITHUB_EVENT_NAME"),
            ref=env.get("GITHUB_REF"),
            head_ref=env.get("GITHUB_HEAD_REF"),
        )


def resolve_branch_name(event: EventContext) -> str:
    """Return the branch name the resolution operates on.

    Raises ConfigurationError when the field required for this event kind is
    missing or empty, or when the ref does not name a branch (e.g. a tag push).
    """
    if event.event_name == PULL_REQUEST_EVENT:
        logger.info("Event is pull request, using head ref")
        if not event.head_ref:
            raise ConfigurationError(
                "Branch name unresolvable: pull request event without a head ref (GITHUB_HEAD_REF)."
            )
        return event.head_ref

    logger.info("Event is %s, using ref", event.event_name or "unknown")
    ref = event.ref or ""
    if not ref.startswith(BRANCH_REF_PREFIX):
        raise ConfigurationError(f"Branch name unresolvable: ref {ref!r} is not a branch ref (GITHUB_REF).")
    branch = ref[len(BRANCH_REF_PREFIX) :]
    if not branch:
        raise ConfigurationError("Branch name unresolvable: empty branch ref (GITHUB_REF).")
    return branch
