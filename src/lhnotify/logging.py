from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator

SENSITIVE_KEY_PARTS = ("token", "secret", "password", "webhook")


def escape_workflow_command(value: str) -> str:
    """
    Escape a string for GitHub workflow commands (annotation messages).

    See: https://docs.github.com/actions/using-workflows/workflow-commands-for-github-actions
    """
    if value is None:
        return ""
    return str(value).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class NotifyLogger:
    """Structured JSON logger with GitHub Actions integration."""

    def __init__(self, run_id: str):
        self.run_id = run_id
        self._stage_durations: dict[str, int] = {}

    def info(self, message: str, **kwargs: Any) -> None:
        self._emit("info", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._emit("warning", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._emit("error", message, **kwargs)

    @property
    def stage_durations(self) -> dict[str, int]:
        return dict(self._stage_durations)

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        """Track stage timing inside a collapsible log group."""
        start = datetime.now(timezone.utc)
        self._write(f"::group::{escape_workflow_command(name)}")
        self.info("stage_start", stage=name)
        status = "ok"
        try:
            yield
        except Exception as exc:
            status = "error"
            self.error("stage_error", stage=name, error=str(exc))
            raise
        finally:
            duration_ms = int((datetime.now(timezone.utc) - start).total_seconds() * 1000)
            self._stage_durations[name] = duration_ms
            self.info("stage_end", stage=name, duration_ms=duration_ms, status=status)
            self._write("::endgroup::")

    def _emit(self, level: str, message: str, **kwargs: Any) -> None:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "run_id": self.run_id,
            "message": message,
        }
        payload.update(self._sanitize(kwargs))
        self._write(json.dumps(payload, ensure_ascii=False, default=str))

        if level in ("error", "warning"):
            self._write(f"::{level}::{escape_workflow_command(message)}")

    @staticmethod
    def _write(line: str) -> None:
        sys.stderr.write(line + "\n")
        sys.stderr.flush()

    @staticmethod
    def _sanitize(fields: Dict[str, Any]) -> Dict[str, Any]:
        return {
            key: "***" if NotifyLogger._is_sensitive_key(key) else value
            for key, value in fields.items()
        }

    @staticmethod
    def _is_sensitive_key(key: str) -> bool:
        lowered = key.lower()
        return any(part in lowered for part in SENSITIVE_KEY_PARTS)
