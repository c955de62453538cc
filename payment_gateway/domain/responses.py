"""Response envelopes for the single payment API"""

from decimal import Decimal
from http import HTTPStatus
from typing import Any, Dict

from payment_gateway.domain.models import ErrorShape, Failure, PaymentHeader, PaymentRequest
from payment_gateway.domain.ports import ReferenceGenerator, Signer

SUCCESS_KEY = "Single_Payment_Corp_Resp"
FAILURE_KEY = "get_Single_Payment_Status_Corp_Res"

HEADER_FIELDS = ("TranID", "Corp_ID", "Maker_ID", "Checker_ID", "Approver_ID")


def json_number(value: Decimal) -> int | float:
    """Decimal to a JSON number, keeping integral values integral"""
    return int(value) if value == value.to_integral_value() else float(value)


def render_plain_error(failure: Failure) -> Dict[str, Any]:
    """{httpCode, httpMessage, moreInformation, moreDetails?}"""
    body = {
        "httpCode": str(failure.http_status),
        "httpMessage": HTTPStatus(failure.http_status).phrase,
        "moreInformation": failure.message,
    }
    if failure.detail:
        body["moreDetails"] = failure.detail
    return body


def render_coded_error(failure: Failure, header: PaymentHeader, signer: Signer) -> Dict[str, Any]:
    """Coded failure envelope; sent with HTTP 200, callers key off Error_Cde"""
    echoed = {name: getattr(header, name) or "" for name in HEADER_FIELDS}
    payload = {
        "Header": {
            **echoed,
            "Status": "FAILED",
            "Error_Cde": failure.code,
            "Error_Desc": "Schema Validation Failure",
            "Error_More_Desc": failure.message,
        },
    }
    payload["Signature"] = signer.sign(payload)
    return {FAILURE_KEY: payload}


def render_failure(failure: Failure, request: PaymentRequest | None, signer: Signer) -> Dict[str, Any]:
    """Render whichever envelope the failure's shape selects"""
    if failure.shape is ErrorShape.CODED:
        header = request.header if request is not None else PaymentHeader()
        return render_coded_error(failure, header, signer)
    return render_plain_error(failure)


def render_success(
    request: PaymentRequest,
    remaining_balance: Decimal,
    txn_time: str,
    references: ReferenceGenerator,
    signer: Signer,
) -> Dict[str, Any]:
    """Success envelope echoing the request with generated reference numbers"""
    header, body = request.header, request.body
    payload = {
        "Header": {
            **{name: getattr(header, name) for name in HEADER_FIELDS},
            "Status": "success",
            "Error_Cde": {},
            "Error_Desc": {},
        },
        "Body": {
            "RefNo": references.generate("REF", 12),
            "UTRNo": references.generate("UTR", 14),
            "PONum": references.generate("PO", 12),
            "Debit_Acct_No": body.Debit_Acct_No,
            "Debit_Acct_Name": body.Debit_Acct_Name,
            "Debit_IFSC": body.Debit_IFSC,
            "Amount": body.Amount,
            "Remaining_Balance": json_number(remaining_balance),
            "BenIFSC": body.Ben_IFSC,
            "Ben_Acct_No": body.Ben_Acct_No,
            "Ben_Name": body.Ben_Name,
            "Ben_Email": body.Ben_Email,
            "Ben_Mobile": body.Ben_Mobile,
            "Txn_Time": txn_time,
            "Mode_of_Pay": body.Mode_of_Pay,
        },
    }
    payload["Signature"] = signer.sign(payload)
    return {SUCCESS_KEY: payload}
