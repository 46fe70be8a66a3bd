from __future__ import annotations

from .check_run import render_output, render_summary_markdown, send_check_run
from .slack import render_attachments, send_slack_notification

__all__ = [
    "render_attachments",
    "render_output",
    "render_summary_markdown",
    "send_check_run",
    "send_slack_notification",
]
