from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..constants import REPORT_LINK_TITLE, SLACK_PRETEXT
from ..logging import NotifyLogger
from ..models import NotificationPayload, Section
from ..slack import SlackWebhook


def _changes_title(payload: NotificationPayload) -> str:
    ref = payload.change_reference
    if ref.is_pull_request:
        return f"Pull Request {payload.conclusion} - <{ref.pull_request_link} | View on GitHub>"
    return f"Changes {payload.conclusion} - <{ref.commit_link} | View SHA Changes>"


def _section_attachments(section: Section) -> List[Dict[str, Any]]:
    attachments: List[Dict[str, Any]] = [
        {
            "text": section.headline,
            "color": section.color,
            "fields": [
                {"title": field.title, "value": field.value, "short": False}
                for field in section.fields
            ],
        }
    ]
    if section.report_link:
        attachments.append(
            {
                "title": REPORT_LINK_TITLE,
                "title_link": section.report_link,
                "color": section.color,
            }
        )
    return attachments


def render_attachments(payload: NotificationPayload) -> List[Dict[str, Any]]:
    """Header attachment followed by the attachments of every section."""
    attachments: List[Dict[str, Any]] = [
        {
            "pretext": SLACK_PRETEXT,
            "title": _changes_title(payload),
            "color": payload.color,
        }
    ]
    for section in payload.sections:
        attachments.extend(_section_attachments(section))
    return attachments


async def send_slack_notification(
    webhook: SlackWebhook,
    payload: NotificationPayload,
    logger: Optional[NotifyLogger] = None,
) -> None:
    if logger:
        logger.info("Running Slack notification", sections=len(payload.sections))
    await webhook.send({"attachments": render_attachments(payload)})
