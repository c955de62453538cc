"""POST /single-payment - single debit payment endpoint"""

import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from payment_gateway.api.dependencies import get_pipeline, get_request_id
from payment_gateway.domain.models import PaymentSubmission
from payment_gateway.domain.pipeline import PaymentPipeline
from payment_gateway.infrastructure.observability.logging import log_payment
from payment_gateway.infrastructure.observability.metrics import record_payment

router = APIRouter()


@router.post("/single-payment")
async def single_payment(request: Request, pipeline: PaymentPipeline = Depends(get_pipeline)):
    """
    Debit a corporate account for one outbound payment.

    The body is read raw: content type, envelope and field checks belong to
    the pipeline so that each failure gets its own envelope and status.
    The pipeline blocks on the ledger lock and the store write, so it runs
    on the threadpool.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    submission = PaymentSubmission(
        content_type=request.headers.get("content-type"),
        authorization=request.headers.get("authorization"),
        body=await request.body(),
    )
    outcome = await run_in_threadpool(pipeline.process, submission, request_id)

    duration_ms = (time.time() - start_time) * 1000
    record_payment(outcome.error_code, outcome.amount)
    log_payment(request_id, outcome.tran_id, outcome.state, outcome.error_code, duration_ms)

    return JSONResponse(status_code=outcome.status_code, content=outcome.body)
