"""POST /v1/transfers - move funds between two accounts"""

import time
import logging
from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse

from transfer_gateway.api.v1.schemas import TransferRequest, TransactionResponse
from transfer_gateway.api.dependencies import get_reconciliation_client, get_request_id, get_transfer_engine
from transfer_gateway.api.errors import error_detail
from transfer_gateway.domain.exceptions import TransactionNotRecordedError
from transfer_gateway.domain.legacy import legacy_transfer
from transfer_gateway.domain.transfer import TransferEngine
from transfer_gateway.infrastructure.clients.reconciliation import ReconciliationClient
from transfer_gateway.infrastructure.observability.logging import log_transfer
from transfer_gateway.infrastructure.observability.metrics import record_transfer, transfer_duration_histogram

router = APIRouter()


@router.post("/transfers", response_model=TransactionResponse)
def create_transfer(
    request_body: TransferRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    engine: TransferEngine = Depends(get_transfer_engine),
    reconciliation_client: ReconciliationClient = Depends(get_reconciliation_client),
):
    """
    Transfer funds between accounts.

    Flow:
    1. Convert float amount and free-form category at the boundary
    2. Run the transfer engine (validate, lock, commit balances, record)
    3. Report committed-but-unrecorded transfers to reconciliation

    Other TransferErrors propagate to the app-level handler in api.errors.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        with transfer_duration_histogram.time():
            transaction = legacy_transfer(
                engine,
                request_body.from_account_id,
                request_body.to_account_id,
                request_body.amount,
                request_body.category,
            )

    except TransactionNotRecordedError as e:
        record_transfer(e)
        logging.error(
            f"Transfer committed without transaction record: {e}",
            extra={"request_id": request_id, **e.context()},
        )
        background_tasks.add_task(
            reconciliation_client.send_unrecorded_transfer,
            ReconciliationClient.build_payload(e, request_id),
        )
        # Background tasks only run on a returned response, not a raised one
        return JSONResponse(status_code=500, content={"detail": error_detail(e)}, background=background_tasks)

    record_transfer()
    duration_ms = (time.time() - start_time) * 1000
    log_transfer(
        request_id,
        transaction.id,
        transaction.from_account_id,
        transaction.to_account_id,
        transaction.amount,
        duration_ms,
    )

    return TransactionResponse.from_transaction(transaction)
