from __future__ import annotations

from .constants import ExitCode


class LighthouseNotifyError(Exception):
    """Base exception for all lighthouse-notify errors."""

    exit_code: ExitCode = ExitCode.ERROR


class ConfigError(LighthouseNotifyError):
    """Action inputs or runner environment are invalid."""


class MalformedResultsError(LighthouseNotifyError):
    """Assertion results could not be parsed; no report can be built."""
