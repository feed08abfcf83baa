"""Token lookup: action input, then GITHUB_TOKEN, then the local gh session."""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

# INPUT_TOKEN is how a workflow's `with: token:` reaches the step.
TOKEN_ENV_VARS = ("INPUT_TOKEN", "GITHUB_TOKEN")


def _gh_cli_token() -> str | None:
    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        logger.debug("gh CLI unavailable; no token from gh session.")
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_github_token() -> str | None:
    """Return the first token found, or None. Callers turn None into a UsageError."""
    for var in TOKEN_ENV_VARS:
        if os.environ.get(var):
            return os.environ[var]

    token = _gh_cli_token()
    if token:
        logger.debug("Resolved GitHub token via gh CLI session.")
    return token
