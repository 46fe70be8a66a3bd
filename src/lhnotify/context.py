from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .constants import DEFAULT_SERVER_URL, RESULTS_DIR_NAME
from .errors import ConfigError


@dataclass(frozen=True)
class RunContext:
    """Immutable identifiers of the workflow run being reported."""

    repo_owner: str
    repo_name: str
    repo_full_name: str  # "owner/name"
    sha: str
    server_url: str
    results_dir: Path

    @classmethod
    def from_environment(cls) -> "RunContext":
        """Load context from GitHub Actions environment."""
        repo_full_name = os.environ.get("GITHUB_REPOSITORY", "").strip()
        if not repo_full_name or "/" not in repo_full_name:
            raise ConfigError("Missing or invalid GITHUB_REPOSITORY")
        repo_owner, repo_name = repo_full_name.split("/", 1)

        sha = os.environ.get("GITHUB_SHA", "").strip()
        if not sha:
            raise ConfigError("Missing GITHUB_SHA")

        server_url = (os.environ.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL).rstrip("/")
        workspace = Path(os.environ.get("GITHUB_WORKSPACE") or os.getcwd())

        return cls(
            repo_owner=repo_owner,
            repo_name=repo_name,
            repo_full_name=repo_full_name,
            sha=sha,
            server_url=server_url,
            results_dir=workspace / RESULTS_DIR_NAME,
        )
