"""GitHub Actions step outputs.

Outputs are appended to the file named by GITHUB_OUTPUT as ``name=value``
lines. Outside Actions the variable is unset and nothing is written.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def set_output(name: str, value: str) -> bool:
    """Append ``name=value`` to $GITHUB_OUTPUT. Return False when not running in Actions."""
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        logger.debug("GITHUB_OUTPUT not set; skipping output %s", name)
        return False
    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"{name}={value}\n")
    return True
