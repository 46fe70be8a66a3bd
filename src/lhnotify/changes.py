from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, Optional

from .context import RunContext
from .github import GitHubClient
from .logging import NotifyLogger
from .models import ChangeReference


def commit_link(ctx: RunContext) -> str:
    return "/".join([ctx.server_url, ctx.repo_full_name, "commit", ctx.sha])


def find_pull_request(pulls: Iterable[Dict[str, Any]], sha: str) -> Optional[Dict[str, Any]]:
    """First open pull request whose head is ``sha``; API order breaks ties."""
    for pull in pulls:
        if (pull.get("head") or {}).get("sha") == sha:
            return pull
    return None


async def resolve_change_reference(
    client: Optional[GitHubClient],
    ctx: RunContext,
    logger: Optional[NotifyLogger] = None,
) -> ChangeReference:
    link = commit_link(ctx)
    if client is None:
        return ChangeReference(commit_link=link)

    pulls = await asyncio.to_thread(client.list_pull_requests)
    pull = find_pull_request(pulls, ctx.sha)
    if pull is None:
        return ChangeReference(commit_link=link)

    if logger:
        logger.info("Matched pull request", pr_number=pull.get("number"), head_sha=ctx.sha)
    return ChangeReference(commit_link=link, pull_request_link=pull.get("html_url") or "")
