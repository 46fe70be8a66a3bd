from __future__ import annotations

import asyncio
from dataclasses import dataclass
from functools import partial
from typing import Awaitable, Callable, Dict, List, Optional

from .changes import resolve_change_reference
from .config import NotifyConfig
from .context import RunContext
from .formatting import build_summary
from .gist import archive_all
from .github import GitHubClient
from .logging import NotifyLogger
from .models import ArchiveReference, GroupedResults
from .publish import send_check_run, send_slack_notification
from .results import list_raw_result_files, load_grouped_results
from .slack import SlackWebhook

GitHubFactory = Callable[[str, str], GitHubClient]
WebhookFactory = Callable[[str], SlackWebhook]
Sender = Callable[[], Awaitable[object]]


@dataclass(frozen=True)
class ChannelPlan:
    slack: bool
    github: bool

    @property
    def any(self) -> bool:
        return self.slack or self.github


def should_notify(log_level: str, status: int) -> bool:
    """info reports every run; error reports failed runs only."""
    return log_level == "info" or (log_level == "error" and status != 0)


def plan_channels(config: NotifyConfig) -> ChannelPlan:
    return ChannelPlan(slack=config.slack_enabled, github=config.github_enabled)


async def _load_results(ctx: RunContext, logger: NotifyLogger) -> GroupedResults:
    return await asyncio.to_thread(load_grouped_results, ctx.results_dir, logger)


async def _archive_results(
    client: Optional[GitHubClient],
    ctx: RunContext,
    logger: NotifyLogger,
) -> List[ArchiveReference]:
    files = await asyncio.to_thread(list_raw_result_files, ctx.results_dir) if client else []
    return await archive_all(client, ctx, files, logger=logger)


async def _dispatch_all(senders: Dict[str, Sender], logger: NotifyLogger) -> None:
    """Wait for every channel; log each failure and raise the first one."""
    outcomes = await asyncio.gather(*(send() for send in senders.values()), return_exceptions=True)
    failures = [
        (name, outcome)
        for name, outcome in zip(senders, outcomes)
        if isinstance(outcome, BaseException)
    ]
    for name, exc in failures:
        logger.error("Notification failed", channel=name, error=str(exc))
    if failures:
        raise failures[0][1]


async def run(
    status: int,
    config: NotifyConfig,
    ctx: RunContext,
    logger: NotifyLogger,
    *,
    github_factory: GitHubFactory = GitHubClient,
    webhook_factory: WebhookFactory = SlackWebhook,
) -> None:
    """
    Report one Lighthouse CI run.

    Results loading, change reference lookup and gist archiving run
    concurrently; the resulting payload is then sent to every enabled channel.
    Any failure is logged and re-raised.
    """
    if not should_notify(config.log_level, status):
        logger.info("Notifications skipped", log_level=config.log_level, status=status)
        return

    try:
        plan = plan_channels(config)
        personal_token = config.personal_github_token.get_secret_value()
        personal_client = github_factory(personal_token, ctx.repo_full_name) if personal_token else None

        with logger.stage("collect"):
            grouped, change_reference, archives = await asyncio.gather(
                _load_results(ctx, logger),
                resolve_change_reference(personal_client, ctx, logger=logger),
                _archive_results(personal_client, ctx, logger),
            )

        payload = build_summary(grouped, archives, status, change_reference)

        if not plan.any:
            logger.info("No notification channel enabled")
            return

        senders: Dict[str, Sender] = {}
        if plan.slack:
            webhook = webhook_factory(config.slack_webhook_url.get_secret_value())
            senders["slack"] = partial(send_slack_notification, webhook, payload, logger=logger)
        if plan.github:
            app_client = github_factory(
                config.application_github_token.get_secret_value(),
                ctx.repo_full_name,
            )
            senders["github"] = partial(send_check_run, app_client, ctx, payload, logger=logger)

        with logger.stage("notify"):
            if len(senders) == 1:
                await next(iter(senders.values()))()
            else:
                await _dispatch_all(senders, logger)
        logger.info("Notifications sent", channels=list(senders), stage_durations_ms=logger.stage_durations)
    except Exception as exc:
        logger.error("Lighthouse notification failed", error=str(exc), error_type=type(exc).__name__)
        raise
