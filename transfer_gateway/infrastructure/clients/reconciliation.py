"""Reconciliation webhook client with exponential backoff retry logic"""

import httpx
import asyncio
import logging
from typing import Dict, Any
from transfer_gateway.config import settings
from transfer_gateway.domain.exceptions import TransactionNotRecordedError
from transfer_gateway.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter


class ReconciliationClient:
    """Client for reporting committed transfers that have no transaction record"""

    def __init__(
        self,
        webhook_url: str | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url or settings.reconciliation_webhook_url
        self.max_retries = max_retries if max_retries is not None else settings.webhook_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.webhook_backoff_base
        self.timeout = settings.http_timeout_seconds
        self.transport = transport

    @staticmethod
    def build_payload(error: TransactionNotRecordedError, request_id: str) -> Dict[str, Any]:
        """Event body describing the unrecorded balance movement"""
        return {
            "event": "TRANSFER_UNRECORDED",
            "request_id": request_id,
            "reason": str(error.__cause__ or error),
            **error.context(),
        }

    async def send_unrecorded_transfer(self, payload: Dict[str, Any]) -> None:
        """
        Send an unrecorded-transfer event with retry logic.

        Retry strategy:
        - Exponential backoff: base, 2x, 4x, ... (base * 2^(attempt-1))
        - Retries on 5xx/4xx responses and network failures
        - Tracks latency histogram and failure counter

        Raises:
            httpx.HTTPError: After the final failed attempt
        """
        attempt = 0
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return  # Success

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        # Final failure after all retries; the movement is still unrecorded
                        logging.error(
                            f"Reconciliation webhook failed after {attempt} attempts: {e}",
                            extra={
                                "step": "reconciliation_failed",
                                "request_id": payload.get("request_id"),
                                "from_account_id": payload.get("from_account_id"),
                                "to_account_id": payload.get("to_account_id"),
                                "amount": payload.get("amount"),
                            },
                        )
                        raise

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
