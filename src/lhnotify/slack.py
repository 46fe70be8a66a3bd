from __future__ import annotations

from typing import Any, Dict

import httpx

WEBHOOK_TIMEOUT_SECONDS = 10


class SlackWebhook:
    """Slack incoming webhook. Non-2xx responses raise httpx.HTTPStatusError."""

    def __init__(self, url: str):
        self.url = url

    async def send(self, payload: Dict[str, Any]) -> str:
        async with httpx.AsyncClient(timeout=WEBHOOK_TIMEOUT_SECONDS) as client:
            response = await client.post(self.url, json=payload)
        response.raise_for_status()
        return response.text
