from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from lhnotify.context import RunContext


@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    """Restrict anyio tests to asyncio only (trio is not installed)."""
    return request.param


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def results_dir(tmp_path: Path, fixtures_dir: Path) -> Path:
    """A copy of a Lighthouse CI output directory: assertions, two LHRs, a manifest."""
    target = tmp_path / ".lighthouseci"
    shutil.copytree(fixtures_dir / "lighthouseci", target)
    return target


@pytest.fixture
def run_context(results_dir: Path) -> RunContext:
    return RunContext(
        repo_owner="octo",
        repo_name="site",
        repo_full_name="octo/site",
        sha="headsha123",
        server_url="https://github.com",
        results_dir=results_dir,
    )


class DummyGitHub:
    """In-memory stand-in for GitHubClient that records every call."""

    def __init__(
        self,
        gists: Optional[List[Dict[str, Any]]] = None,
        pulls: Optional[List[Dict[str, Any]]] = None,
        fail_on: Optional[set] = None,
    ) -> None:
        self.gists = list(gists or [])
        self.pulls = list(pulls or [])
        self.fail_on = set(fail_on or ())
        self.calls: List[tuple] = []
        self._next_id = 1

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")

    def list_gists(self) -> List[Dict[str, Any]]:
        self.calls.append(("list_gists",))
        self._maybe_fail("list_gists")
        return self.gists

    def create_gist(self, files) -> Dict[str, Any]:
        self.calls.append(("create_gist", tuple(files)))
        self._maybe_fail("create_gist")
        gist_id = f"new{self._next_id}"
        self._next_id += 1
        self.gists.append({"id": gist_id, "files": {name: {} for name in files}})
        return {"id": gist_id, "history": [{"version": f"{gist_id}-v1"}]}

    def update_gist(self, gist_id, files) -> Dict[str, Any]:
        self.calls.append(("update_gist", gist_id, tuple(files)))
        self._maybe_fail("update_gist")
        return {"id": gist_id, "history": [{"version": f"{gist_id}-v2"}, {"version": f"{gist_id}-v1"}]}

    def list_pull_requests(self) -> List[Dict[str, Any]]:
        self.calls.append(("list_pull_requests",))
        self._maybe_fail("list_pull_requests")
        return self.pulls

    def create_check_suite(self, head_sha: str) -> Dict[str, Any]:
        self.calls.append(("create_check_suite", head_sha))
        self._maybe_fail("create_check_suite")
        return {"id": 1}

    def create_check_run(self, name, head_sha, conclusion, output):
        self.calls.append(("create_check_run", name, head_sha, conclusion, output))
        self._maybe_fail("create_check_run")
        return "https://github.com/octo/site/runs/1"

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]


class DummyWebhook:
    def __init__(self, url: str = "https://hooks.slack.test/T/B/X", error: Optional[Exception] = None) -> None:
        self.url = url
        self.error = error
        self.sent: List[Dict[str, Any]] = []

    async def send(self, payload: Dict[str, Any]) -> str:
        self.sent.append(payload)
        if self.error is not None:
            raise self.error
        return "ok"


@pytest.fixture
def dummy_github_cls():
    return DummyGitHub


@pytest.fixture
def dummy_webhook_cls():
    return DummyWebhook
