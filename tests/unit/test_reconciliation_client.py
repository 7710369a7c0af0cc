"""Unit tests for the reconciliation webhook client"""

import asyncio
import logging
import httpx
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from transfer_gateway.domain.exceptions import TransactionNotRecordedError
from transfer_gateway.domain.models import TransactionCategory, TransactionDraft
from transfer_gateway.infrastructure.clients.reconciliation import ReconciliationClient


@pytest.fixture
def unrecorded_error() -> TransactionNotRecordedError:
    draft = TransactionDraft(
        from_account_id=1,
        to_account_id=2,
        amount=Decimal("30.00"),
        category=TransactionCategory.PAYMENT,
        timestamp=datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc),
        post_transfer_balance=Decimal("70.00"),
    )
    return TransactionNotRecordedError(draft, "disk full")


def make_client(responses: list, requests: list) -> ReconciliationClient:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return responses.pop(0)

    return ReconciliationClient(
        webhook_url="http://reconciliation.test/events",
        max_retries=3,
        backoff_base=0.0,
        transport=httpx.MockTransport(handler),
    )


def test_build_payload(unrecorded_error):
    """Test payload carries the committed movement as strings"""
    payload = ReconciliationClient.build_payload(unrecorded_error, "req-1")

    assert payload["event"] == "TRANSFER_UNRECORDED"
    assert payload["request_id"] == "req-1"
    assert payload["amount"] == "30.00"
    assert payload["post_transfer_balance"] == "70.00"
    assert payload["category"] == "PAYMENT"
    assert payload["timestamp"] == "2024-03-15T12:00:00+00:00"


def test_send_retries_until_success(unrecorded_error):
    """Test 5xx responses are retried with backoff"""
    requests = []
    client = make_client([httpx.Response(503), httpx.Response(200)], requests)

    asyncio.run(client.send_unrecorded_transfer(ReconciliationClient.build_payload(unrecorded_error, "req-1")))

    assert len(requests) == 2
    assert requests[0].url == "http://reconciliation.test/events"


def test_send_raises_after_final_attempt(unrecorded_error):
    """Test the last failure propagates after max_retries attempts"""
    requests = []
    client = make_client([httpx.Response(500)] * 3, requests)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.send_unrecorded_transfer({"event": "TRANSFER_UNRECORDED"}))

    assert len(requests) == 3


def test_final_failure_logged_with_transfer_details(unrecorded_error, caplog):
    """Test the exhausted webhook leaves an ERROR record that identifies the movement"""
    requests = []
    client = make_client([httpx.Response(502)] * 3, requests)
    payload = ReconciliationClient.build_payload(unrecorded_error, "req-42")

    with caplog.at_level(logging.ERROR):
        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(client.send_unrecorded_transfer(payload))

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert errors[0].step == "reconciliation_failed"
    assert errors[0].request_id == "req-42"
    assert errors[0].from_account_id == 1
    assert errors[0].to_account_id == 2
    assert errors[0].amount == "30.00"


def test_retried_success_logs_no_error(unrecorded_error, caplog):
    client = make_client([httpx.Response(500), httpx.Response(204)], [])

    with caplog.at_level(logging.ERROR):
        asyncio.run(client.send_unrecorded_transfer(ReconciliationClient.build_payload(unrecorded_error, "req-1")))

    assert not [r for r in caplog.records if r.levelno == logging.ERROR]
