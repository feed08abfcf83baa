import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "job": None,  # None = latest successful workflow run; a job name switches to the job-level search
    "workflow_id": None,  # None = runs of every workflow in the repository
    "page_size": 100,  # runs per page, capped at 100 by the GitHub API
    "max_pages": None,  # None = job-level search pages until the run list is exhausted
    "output_name": "sha",
}


def load_config(config_path: str = ".lastgreen.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .lastgreen.yml in the current directory
      3. CLI argument / action input overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Action input first so a workflow can pass a PAT distinct from the runner's GITHUB_TOKEN.
    config["github_token"] = os.environ.get("INPUT_TOKEN") or os.environ.get("GITHUB_TOKEN")

    return config
