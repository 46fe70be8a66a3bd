from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

from ..constants import REPORT_LINK_TITLE
from ..context import RunContext
from ..github import GitHubClient
from ..logging import NotifyLogger
from ..models import NotificationPayload, Section


def _changes_link(payload: NotificationPayload) -> str:
    ref = payload.change_reference
    if ref.is_pull_request:
        return f"[View on GitHub]({ref.pull_request_link})"
    return f"[View SHA Changes]({ref.commit_link})"


def _render_section(section: Section) -> str:
    lines: List[str] = [f"### {section.headline}"]
    lines.extend(f"**{field.title}**\n{field.value}".strip() for field in section.fields)
    if section.report_link:
        lines.append(f"[{REPORT_LINK_TITLE}]({section.report_link})")
    return "\n".join(lines)


def render_summary_markdown(payload: NotificationPayload) -> str:
    """Check run summary: change link, then one heading block per URL."""
    blocks = [_render_section(section) for section in payload.sections]
    summary = f"\n{_changes_link(payload)}\n\n"
    if blocks:
        summary += "\n".join(blocks) + "\n"
    return summary


def render_output(payload: NotificationPayload) -> Dict[str, str]:
    return {
        "title": payload.headline,
        "summary": render_summary_markdown(payload),
    }


async def send_check_run(
    client: GitHubClient,
    ctx: RunContext,
    payload: NotificationPayload,
    logger: Optional[NotifyLogger] = None,
) -> Optional[str]:
    """Create a check suite for the commit, then a completed check run inside it."""
    if logger:
        logger.info("Running GitHub notification", head_sha=ctx.sha, conclusion=payload.conclusion)
    await asyncio.to_thread(client.create_check_suite, ctx.sha)
    return await asyncio.to_thread(
        client.create_check_run,
        name=payload.title,
        head_sha=ctx.sha,
        conclusion=payload.conclusion,
        output=render_output(payload),
    )
