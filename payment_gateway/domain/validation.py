"""
Validation chain for single payment requests.

Each step takes the shared ValidationContext and returns None (pass) or a
Failure. Steps run in declared order and the first Failure ends the chain.

Order matters and is externally observable:
1-2   request structure (content type, envelope)
3-4   header field formats
5-10  business state (account, ownership, amount, funds, mode)
11-13 identity (Authorization header, credential, Corp_ID match)

Business checks run before identity checks, so an unauthenticated caller
can learn whether an account exists or is funded from the error returned.
"""

import base64
import binascii
import json
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Sequence, Tuple

from payment_gateway.domain.credentials import CredentialStore
from payment_gateway.domain.ledger import AccountLedger
from payment_gateway.domain.models import (
    Account,
    Failure,
    PaymentRequest,
    PaymentSubmission,
    ValidationResult,
    fits_money_places,
)

ENVELOPE_KEY = "Single_Payment_Corp_Req"

ALPHANUMERIC = re.compile(r"[A-Za-z0-9]+")

VALID_MODES = ("FT", "RTGS", "IMPS")
RTGS_MINIMUM = Decimal("200000")  # RTGS needs >= this, FT/IMPS need < this


@dataclass
class ValidationContext:
    """Inputs and intermediate lookups shared by the validation steps"""

    submission: PaymentSubmission
    ledger: AccountLedger
    credentials: CredentialStore
    request: Optional[PaymentRequest] = None
    account: Optional[Account] = None
    amount: Optional[Decimal] = None
    username: Optional[str] = None
    password: Optional[str] = None


Step = Callable[[ValidationContext], ValidationResult]


def _field_is_valid(value, max_length: int) -> bool:
    return isinstance(value, str) and bool(ALPHANUMERIC.fullmatch(value)) and len(value) <= max_length


def parse_amount(value) -> Optional[Decimal]:
    """Parse a JSON number or numeric string into a storable Decimal, else None.

    Values with more than MONEY_PLACES decimal places are refused, since the
    stores could not keep them exactly.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return amount if fits_money_places(amount) else None


def _is_falsy_json(value) -> bool:
    """null, false, 0 and "" count as absent; empty objects and arrays do not"""
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


# Structural checks


def check_content_type(ctx: ValidationContext) -> ValidationResult:
    content_type = ctx.submission.content_type
    if not content_type or content_type.lower() != "application/json":
        return Failure.plain(415, "Content-Type must be application/json")
    return None


def check_body_present(ctx: ValidationContext) -> ValidationResult:
    raw = ctx.submission.body
    if not raw or not raw.strip():
        return Failure.plain(400, "Request Body is missing or empty")
    try:
        payload = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        return Failure.plain(400, "Request Body is missing or empty")

    if not isinstance(payload, dict) or _is_falsy_json(payload.get(ENVELOPE_KEY)):
        return Failure.plain(400, f"'{ENVELOPE_KEY}' tag missing in Request Body")

    ctx.request = PaymentRequest.from_envelope(payload[ENVELOPE_KEY])
    return None


# Header field formats


def check_transaction_fields(ctx: ValidationContext) -> ValidationResult:
    for name in ("TranID", "Corp_ID"):
        if not _field_is_valid(getattr(ctx.request.header, name), 16):
            return Failure.plain(401, f"Authentication Failure: Invalid field {name}")
    return None


def check_approval_fields(ctx: ValidationContext) -> ValidationResult:
    for name in ("Maker_ID", "Checker_ID", "Approver_ID"):
        if not _field_is_valid(getattr(ctx.request.header, name), 20):
            return Failure.coded("ER002", f"{name} must be alphanumeric and no longer than 20 characters")
    return None


# Business state


def check_debit_account(ctx: ValidationContext) -> ValidationResult:
    account_number = ctx.request.body.Debit_Acct_No
    if isinstance(account_number, str) and account_number:
        ctx.account = ctx.ledger.get_account(account_number)
    if ctx.account is None:
        return Failure.coded("ER002", "Invalid or unregistered Debit_Acct_No.")
    return None


def check_account_owner(ctx: ValidationContext) -> ValidationResult:
    if ctx.account.owner != ctx.request.header.Corp_ID:
        return Failure.plain(401, "LDAP to CORP Mismatch")
    return None


def check_amount(ctx: ValidationContext) -> ValidationResult:
    ctx.amount = parse_amount(ctx.request.body.Amount)
    if ctx.amount is None or ctx.amount <= 0:
        return Failure.coded("ER025", "Amount must be greater than or equal to 1")
    return None


def check_sufficient_funds(ctx: ValidationContext) -> ValidationResult:
    if ctx.amount > ctx.account.balance:
        return Failure.coded("ER12", "Insufficient balance in the Debit Account.")
    return None


def check_mode(ctx: ValidationContext) -> ValidationResult:
    if ctx.request.body.Mode_of_Pay not in VALID_MODES:
        return Failure.coded(
            "ER002", "Invalid or missing Mode_of_Pay. Valid options are 'FT', 'RTGS', or 'IMPS'."
        )
    return None


def check_mode_amount_band(ctx: ValidationContext) -> ValidationResult:
    mode = ctx.request.body.Mode_of_Pay
    if mode == "RTGS" and ctx.amount < RTGS_MINIMUM:
        return Failure.coded("ER002", "For RTGS, Amount must be ≥ Rs 2,00,000.")
    if mode in ("FT", "IMPS") and ctx.amount >= RTGS_MINIMUM:
        return Failure.coded("ER002", "For FT and IMPS, Amount must be < Rs 2,00,000.")
    return None


# Identity


def check_authorization_header(ctx: ValidationContext) -> ValidationResult:
    header = ctx.submission.authorization
    if not header or not header.startswith("Basic "):
        return Failure.plain(401, "Invalid LDAP Format")

    token = header[len("Basic "):].strip()
    try:
        decoded = base64.b64decode(token, validate=True).decode("ascii")
    except (binascii.Error, UnicodeDecodeError):
        return Failure.plain(400, "Invalid Base64 encoding in Authorization Header")

    username, sep, password = decoded.partition(":")
    ctx.username = username
    ctx.password = password if sep else None
    return None


def check_credentials(ctx: ValidationContext) -> ValidationResult:
    if ctx.password is None or not ctx.credentials.authenticate(ctx.username, ctx.password):
        return Failure.plain(401, "LDAP ID or Password is wrong")
    return None


def check_identity_matches_corp(ctx: ValidationContext) -> ValidationResult:
    if ctx.username != ctx.request.header.Corp_ID:
        return Failure.plain(401, "LDAP to CORP Mismatched")
    return None


VALIDATION_STEPS: Tuple[Step, ...] = (
    check_content_type,
    check_body_present,
    check_transaction_fields,
    check_approval_fields,
    check_debit_account,
    check_account_owner,
    check_amount,
    check_sufficient_funds,
    check_mode,
    check_mode_amount_band,
)

AUTHORIZATION_STEPS: Tuple[Step, ...] = (
    check_authorization_header,
    check_credentials,
    check_identity_matches_corp,
)


def run_steps(steps: Sequence[Step], ctx: ValidationContext) -> ValidationResult:
    """Run steps in order, returning the first Failure or None"""
    for step in steps:
        failure = step(ctx)
        if failure is not None:
            return failure
    return None
