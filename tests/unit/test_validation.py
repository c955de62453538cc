"""Unit tests for the payment validation chain"""

import json
from decimal import Decimal

import pytest

from payment_gateway.domain.credentials import CredentialStore
from payment_gateway.domain.ledger import AccountLedger
from payment_gateway.domain.models import ErrorShape, PaymentSubmission
from payment_gateway.domain.validation import (
    AUTHORIZATION_STEPS,
    VALIDATION_STEPS,
    ValidationContext,
    check_authorization_header,
    parse_amount,
    run_steps,
)

STEPS = VALIDATION_STEPS + AUTHORIZATION_STEPS


@pytest.fixture
def validate(ledger: AccountLedger, credentials: CredentialStore, make_payment, auth):
    """Run the full chain over a request and return the first failure (or None)"""

    def _validate(payload=None, authorization="default", content_type="application/json", raw=None):
        if authorization == "default":
            authorization = auth("corp1", "pass1")
        body = raw if raw is not None else json.dumps(payload or make_payment()).encode()
        ctx = ValidationContext(
            submission=PaymentSubmission(content_type=content_type, authorization=authorization, body=body),
            ledger=ledger,
            credentials=credentials,
        )
        return run_steps(STEPS, ctx)

    return _validate


def test_valid_request_passes(validate):
    assert validate() is None


@pytest.mark.parametrize("content_type", [None, "text/plain", "application/json; charset=utf-8"])
def test_content_type_must_be_json(validate, content_type):
    failure = validate(content_type=content_type)
    assert failure.shape is ErrorShape.PLAIN
    assert failure.http_status == 415


def test_content_type_is_case_insensitive(validate):
    assert validate(content_type="Application/JSON") is None


@pytest.mark.parametrize("raw", [b"", b"   ", b"{not json"])
def test_missing_or_unparseable_body(validate, raw):
    failure = validate(raw=raw)
    assert failure.http_status == 400
    assert failure.message == "Request Body is missing or empty"


@pytest.mark.parametrize("raw", [b"{}", b"[]", b'{"Other": {}}'])
def test_missing_envelope_tag(validate, raw):
    failure = validate(raw=raw)
    assert failure.http_status == 400
    assert failure.message == "'Single_Payment_Corp_Req' tag missing in Request Body"


@pytest.mark.parametrize("envelope", [None, False, 0, 0.0, ""])
def test_falsy_envelope_counts_as_missing(validate, envelope):
    failure = validate(raw=json.dumps({"Single_Payment_Corp_Req": envelope}).encode())
    assert failure.http_status == 400
    assert failure.message == "'Single_Payment_Corp_Req' tag missing in Request Body"


@pytest.mark.parametrize("envelope", [{}, [], "x", 1, True])
def test_present_envelope_without_header_fails_on_tran_id(validate, envelope):
    failure = validate(raw=json.dumps({"Single_Payment_Corp_Req": envelope}).encode())
    assert failure.shape is ErrorShape.PLAIN
    assert failure.http_status == 401
    assert failure.message == "Authentication Failure: Invalid field TranID"


@pytest.mark.parametrize(
    "field,value",
    [
        ("TranID", ""),
        ("TranID", "T-1"),
        ("TranID", "A" * 17),
        ("Corp_ID", None),
        ("Corp_ID", 12345),
    ],
)
def test_transaction_fields_fail_as_plain_401(validate, make_payment, field, value):
    failure = validate(make_payment(header={field: value}))
    assert failure.shape is ErrorShape.PLAIN
    assert failure.http_status == 401
    assert failure.message == f"Authentication Failure: Invalid field {field}"


def test_transaction_id_at_max_length_passes(validate, make_payment):
    assert validate(make_payment(header={"TranID": "A" * 16})) is None


@pytest.mark.parametrize("field", ["Maker_ID", "Checker_ID", "Approver_ID"])
@pytest.mark.parametrize("value", ["", "has space", "B" * 21])
def test_approval_fields_fail_as_coded_er002(validate, make_payment, field, value):
    failure = validate(make_payment(header={field: value}))
    assert failure.shape is ErrorShape.CODED
    assert failure.code == "ER002"
    assert failure.http_status == 200
    assert field in failure.message


def test_unknown_debit_account(validate, make_payment):
    failure = validate(make_payment(Debit_Acct_No="NOPE"))
    assert failure.code == "ER002"
    assert failure.message == "Invalid or unregistered Debit_Acct_No."


def test_account_owner_must_match_corp(validate, make_payment):
    failure = validate(make_payment(Debit_Acct_No="ACC2"))
    assert failure.shape is ErrorShape.PLAIN
    assert failure.http_status == 401
    assert failure.message == "LDAP to CORP Mismatch"


@pytest.mark.parametrize("amount", [0, -10, "abc", None, True, "NaN", "Infinity", "0.0000001", 1.1234567])
def test_invalid_amount(validate, make_payment, amount):
    failure = validate(make_payment(Amount=amount))
    assert failure.code == "ER025"


def test_amount_above_balance(validate, make_payment):
    failure = validate(make_payment(Amount=500000.01))
    assert failure.code == "ER12"
    assert failure.message == "Insufficient balance in the Debit Account."


@pytest.mark.parametrize("mode", [None, "NEFT", "rtgs"])
def test_invalid_mode(validate, make_payment, mode):
    failure = validate(make_payment(Mode_of_Pay=mode))
    assert failure.code == "ER002"
    assert "Mode_of_Pay" in failure.message


@pytest.mark.parametrize(
    "mode,amount,passes",
    [
        ("RTGS", 199999, False),
        ("RTGS", 200000, True),
        ("FT", 200000, False),
        ("FT", 199999.99, True),
        ("IMPS", 200000, False),
        ("IMPS", "1500", True),
    ],
)
def test_mode_amount_band(validate, make_payment, mode, amount, passes):
    failure = validate(make_payment(Mode_of_Pay=mode, Amount=amount))
    if passes:
        assert failure is None
    else:
        assert failure.code == "ER002"
        assert mode in failure.message or "FT and IMPS" in failure.message


@pytest.mark.parametrize("authorization", [None, "", "Bearer abc", "basic Y29ycDE6cGFzczE="])
def test_authorization_header_missing_or_wrong_scheme(validate, authorization):
    failure = validate(authorization=authorization)
    assert failure.http_status == 401
    assert failure.message == "Invalid LDAP Format"


def test_authorization_header_bad_base64(validate):
    failure = validate(authorization="Basic %%%not-base64%%%")
    assert failure.http_status == 400
    assert failure.message == "Invalid Base64 encoding in Authorization Header"


@pytest.mark.parametrize(
    "username,password",
    [("corp1", "wrong"), ("ghost", "pass1")],
)
def test_wrong_credentials(validate, auth, username, password):
    failure = validate(authorization=auth(username, password))
    assert failure.http_status == 401
    assert failure.message == "LDAP ID or Password is wrong"


def test_credentials_without_separator_are_rejected(validate):
    failure = validate(authorization="Basic Y29ycDE=")  # "corp1"
    assert failure.message == "LDAP ID or Password is wrong"


def test_authenticated_user_must_be_corp(validate, auth):
    failure = validate(authorization=auth("corp2", "pass2"))
    assert failure.http_status == 401
    assert failure.message == "LDAP to CORP Mismatched"


def test_business_checks_run_before_authentication(validate, make_payment):
    failure = validate(make_payment(Debit_Acct_No="NOPE"), authorization=None)
    assert failure.code == "ER002"


def test_decoded_credentials_stored_on_context(ledger, credentials):
    ctx = ValidationContext(
        submission=PaymentSubmission(
            content_type="application/json", authorization="Basic dXNlcjpwYTpzcw==", body=b""
        ),
        ledger=ledger,
        credentials=credentials,
    )
    assert check_authorization_header(ctx) is None
    assert (ctx.username, ctx.password) == ("user", "pa:ss")


@pytest.mark.parametrize(
    "value,expected",
    [
        (250000, Decimal("250000")),
        (199999.99, Decimal("199999.99")),
        (" 42.5 ", Decimal("42.5")),
        ("1e3", Decimal("1000")),
        ("0.000001", Decimal("0.000001")),
        ("1.0000000", Decimal("1")),
        ("0.0000001", None),
        (1.1234567, None),
        ("12abc", None),
        ([], None),
        (False, None),
    ],
)
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected
