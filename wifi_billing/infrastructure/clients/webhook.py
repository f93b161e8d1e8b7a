"""Reload webhook client with exponential backoff retry logic"""

import httpx
import asyncio
from typing import Dict, Any
from wifi_billing.config import settings
from wifi_billing.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter


class ReloadWebhookClient:
    """Forwards reload signals to views living outside this process"""

    def __init__(
        self,
        webhook_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url or settings.reload_webhook_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def send_event(self, payload: Dict[str, Any]) -> None:
        """
        POST a reload event, retrying transient failures.

        Retry strategy:
        - Exponential backoff: base * 2^(attempt-1)
        - Retries on HTTP errors and network failures
        - Re-raises after the last attempt
        """
        if not self.enabled:
            return

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError):
                    attempt += 1
                    webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        raise

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
