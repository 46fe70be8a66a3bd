from __future__ import annotations

import asyncio
import sys
import uuid
from typing import Optional, Sequence

from . import dispatch
from .config import NotifyConfig
from .constants import ExitCode
from .context import RunContext
from .errors import ConfigError, LighthouseNotifyError
from .logging import NotifyLogger, escape_workflow_command


def parse_status(argv: Sequence[str]) -> int:
    """Lighthouse CI exit status passed as the first argument (default 0)."""
    if not argv or not str(argv[0]).strip():
        return 0
    try:
        return int(str(argv[0]).strip())
    except ValueError as exc:
        raise ConfigError(f"Invalid Lighthouse CI status: {argv[0]!r}") from exc


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    return asyncio.run(async_main(sys.argv[1:] if argv is None else argv))


async def async_main(argv: Sequence[str]) -> int:
    logger = NotifyLogger(str(uuid.uuid4()))

    try:
        status = parse_status(argv)
        config = NotifyConfig()
        ctx = RunContext.from_environment()
    except Exception as exc:
        print(f"::error::Configuration error: {escape_workflow_command(str(exc))}")
        return int(ExitCode.ERROR)

    logger.info(
        "Lighthouse notify starting",
        repo=ctx.repo_full_name,
        head_sha=ctx.sha,
        status=status,
        log_level=config.log_level,
    )

    try:
        await dispatch.run(status, config, ctx, logger)
    except LighthouseNotifyError as exc:
        return int(exc.exit_code)
    except Exception:
        return int(ExitCode.ERROR)
    return int(ExitCode.SUCCESS)
