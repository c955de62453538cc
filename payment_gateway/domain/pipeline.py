"""Single payment pipeline: validate, authorize, settle, persist, respond"""

import logging
from enum import Enum

from payment_gateway.domain.credentials import CredentialStore
from payment_gateway.domain.exceptions import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    StoreError,
)
from payment_gateway.domain.ledger import AccountLedger
from payment_gateway.domain.models import ErrorShape, Failure, PaymentSubmission, PipelineOutcome
from payment_gateway.domain.ports import ReferenceGenerator, Signer
from payment_gateway.domain.references import PlaceholderSigner, RandomDigitReferenceGenerator
from payment_gateway.domain.responses import render_failure, render_success
from payment_gateway.domain.validation import (
    AUTHORIZATION_STEPS,
    VALIDATION_STEPS,
    ValidationContext,
    run_steps,
)
from payment_gateway.utils.date_utils import format_txn_time

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    RECEIVED = "received"
    VALIDATING = "validating"
    AUTHORIZING = "authorizing"
    SETTLING = "settling"
    PERSISTING = "persisting"
    RESPONDED = "responded"
    ERROR_RESPONDED = "error_responded"


class PaymentPipeline:
    """
    Runs one payment request to exactly one response.

    Flow:
    1. VALIDATING: structural, field and business checks (fail-fast)
    2. AUTHORIZING: Authorization header, credential, Corp_ID match
    3. SETTLING/PERSISTING: ledger debit, which writes the store before
       committing the new balance
    4. RESPONDED: success envelope

    Any failure moves straight to ERROR_RESPONDED. Nothing is retried.
    """

    def __init__(
        self,
        ledger: AccountLedger,
        credentials: CredentialStore,
        signer: Signer | None = None,
        references: ReferenceGenerator | None = None,
        txn_timezone: str = "Asia/Kolkata",
    ):
        self.ledger = ledger
        self.credentials = credentials
        self.signer = signer or PlaceholderSigner()
        self.references = references or RandomDigitReferenceGenerator()
        self.txn_timezone = txn_timezone

    def process(self, submission: PaymentSubmission, request_id: str = "unknown") -> PipelineOutcome:
        ctx = ValidationContext(submission=submission, ledger=self.ledger, credentials=self.credentials)
        state = PipelineState.RECEIVED

        try:
            state = PipelineState.VALIDATING
            failure = run_steps(VALIDATION_STEPS, ctx)
            if failure is None:
                state = PipelineState.AUTHORIZING
                failure = run_steps(AUTHORIZATION_STEPS, ctx)
            if failure is not None:
                return self._error(failure, ctx, state, request_id)

            state = PipelineState.SETTLING
            try:
                remaining = self.ledger.debit(ctx.account.account_number, ctx.amount)
            except InsufficientFundsError:
                # Another debit on the same account committed after validation
                return self._error(
                    Failure.coded("ER12", "Insufficient balance in the Debit Account."), ctx, state, request_id
                )
            except AccountNotFoundError:
                return self._error(
                    Failure.coded("ER002", "Invalid or unregistered Debit_Acct_No."), ctx, state, request_id
                )
            except InvalidAmountError:
                return self._error(
                    Failure.coded("ER025", "Amount must be greater than or equal to 1"), ctx, state, request_id
                )
            except StoreError:
                state = PipelineState.PERSISTING
                raise

            body = render_success(
                ctx.request,
                remaining,
                format_txn_time(self.txn_timezone),
                self.references,
                self.signer,
            )
            return PipelineOutcome(
                status_code=200,
                body=body,
                state=PipelineState.RESPONDED.value,
                tran_id=ctx.request.header.TranID,
                amount=ctx.amount,
            )

        except Exception as e:
            logger.exception(
                "Payment pipeline failed",
                extra={"request_id": request_id, "step": state.value},
            )
            return self._error(Failure.plain(500, "Unexpected error", detail=str(e)), ctx, state, request_id)

    def _error(
        self,
        failure: Failure,
        ctx: ValidationContext,
        state: PipelineState,
        request_id: str,
    ) -> PipelineOutcome:
        logger.info(
            "Payment rejected",
            extra={
                "request_id": request_id,
                "step": state.value,
                "error_code": failure.code,
                "http_status": failure.http_status,
                "reason": failure.message,
            },
        )
        error_code = failure.code if failure.shape is ErrorShape.CODED else str(failure.http_status)
        return PipelineOutcome(
            status_code=failure.http_status,
            body=render_failure(failure, ctx.request, self.signer),
            state=PipelineState.ERROR_RESPONDED.value,
            error_code=error_code,
            tran_id=ctx.request.header.TranID if ctx.request is not None else None,
        )
