from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import requests

from .constants import Limits

GITHUB_API = os.environ.get("GITHUB_API_URL", "https://api.github.com")
DEFAULT_HTTP_TIMEOUT_SECONDS = float(os.environ.get("LHNOTIFY_GITHUB_HTTP_TIMEOUT_SECONDS", "15"))

GistFiles = Dict[str, Dict[str, str]]


class GitHubClient:
    """Thin GitHub REST client. HTTP errors are raised as requests.HTTPError."""

    def __init__(self, token: str, repo: str):
        self.token = token
        self.repo = repo
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "lighthouse-notify-action",
        })

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        r = self.session.request(
            method,
            f"{GITHUB_API}{path}",
            timeout=DEFAULT_HTTP_TIMEOUT_SECONDS,
            **kwargs,
        )
        r.raise_for_status()
        if r.status_code == 204 or not r.content:
            return {}
        return r.json()

    def _list(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """GET every page of a list endpoint, following Link rel="next"."""
        url: Optional[str] = f"{GITHUB_API}{path}"
        query: Optional[Dict[str, Any]] = {**(params or {}), "per_page": Limits.MAX_LISTED_ITEMS}
        items: List[Dict[str, Any]] = []
        for _ in range(Limits.MAX_LIST_PAGES):
            if not url:
                break
            r = self.session.request("GET", url, params=query, timeout=DEFAULT_HTTP_TIMEOUT_SECONDS)
            r.raise_for_status()
            items.extend(r.json() or [])
            url = (r.links.get("next") or {}).get("url")
            # The next link already carries the query string.
            query = None
        return items

    # Gists

    def list_gists(self) -> List[Dict[str, Any]]:
        """Gists owned by the token's user."""
        return self._list("/gists")

    def create_gist(self, files: GistFiles) -> Dict[str, Any]:
        return self._request("POST", "/gists", json={"files": files})

    def update_gist(self, gist_id: str, files: GistFiles) -> Dict[str, Any]:
        return self._request("PATCH", f"/gists/{gist_id}", json={"files": files})

    # Pull requests

    def list_pull_requests(self) -> List[Dict[str, Any]]:
        """Open pull requests, in the order the API returns them."""
        return self._list(f"/repos/{self.repo}/pulls", params={"state": "open"})

    # Checks

    def create_check_suite(self, head_sha: str) -> Dict[str, Any]:
        return self._request("POST", f"/repos/{self.repo}/check-suites", json={"head_sha": head_sha})

    def create_check_run(
        self,
        name: str,
        head_sha: str,
        conclusion: str,
        output: Dict[str, Any],
    ) -> Optional[str]:
        payload: Dict[str, Any] = {
            "name": name,
            "head_sha": head_sha,
            "status": "completed",
            "conclusion": conclusion,
            "output": output,
        }
        data = self._request("POST", f"/repos/{self.repo}/check-runs", json=payload)
        return (data or {}).get("html_url")
