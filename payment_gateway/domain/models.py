"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from payment_gateway.domain.exceptions import InvalidRecordError

# Decimal places every store backend keeps for balances and amounts
MONEY_PLACES = 6


def fits_money_places(amount: Decimal) -> bool:
    """True if `amount` is finite and has no more than MONEY_PLACES decimal places"""
    return amount.is_finite() and amount.normalize().as_tuple().exponent >= -MONEY_PLACES


def ensure_storable_text(name: str, value: str, separators: str = "") -> None:
    """
    Reject text that a line-oriented store could not read back unchanged.

    Line breaks, surrounding whitespace and the record's field separators
    are refused.

    Raises:
        InvalidRecordError: value is not storable as-is
    """
    if value != value.strip() or "\n" in value or "\r" in value:
        raise InvalidRecordError(f"{name} must not contain line breaks or surrounding whitespace")
    for separator in separators:
        if separator in value:
            raise InvalidRecordError(f"{name} must not contain '{separator}'")


@dataclass(frozen=True)
class Credential:
    """Username/password pair allowed to authorize payments"""

    username: str
    password: str


@dataclass(frozen=True)
class Account:
    """Debit account held in the ledger"""

    account_number: str
    balance: Decimal
    owner: str  # username of the owning corporate


@dataclass
class PaymentHeader:
    """Header section of a single payment request.

    Values are kept exactly as received (any JSON type, None when absent).
    """

    TranID: Any = None
    Corp_ID: Any = None
    Maker_ID: Any = None
    Checker_ID: Any = None
    Approver_ID: Any = None

    @classmethod
    def from_json(cls, data: Any) -> "PaymentHeader":
        if not isinstance(data, dict):
            return cls()
        return cls(**{name: data.get(name) for name in cls.__dataclass_fields__})


@dataclass
class PaymentBody:
    """Body section of a single payment request"""

    Debit_Acct_No: Any = None
    Debit_Acct_Name: Any = None
    Debit_IFSC: Any = None
    Amount: Any = None
    Mode_of_Pay: Any = None
    Ben_IFSC: Any = None
    Ben_Acct_No: Any = None
    Ben_Name: Any = None
    Ben_Email: Any = None
    Ben_Mobile: Any = None

    @classmethod
    def from_json(cls, data: Any) -> "PaymentBody":
        if not isinstance(data, dict):
            return cls()
        return cls(**{name: data.get(name) for name in cls.__dataclass_fields__})


@dataclass
class PaymentRequest:
    """Parsed Single_Payment_Corp_Req envelope"""

    header: PaymentHeader = field(default_factory=PaymentHeader)
    body: PaymentBody = field(default_factory=PaymentBody)

    @classmethod
    def from_envelope(cls, envelope: Any) -> "PaymentRequest":
        if not isinstance(envelope, dict):
            return cls()
        return cls(
            header=PaymentHeader.from_json(envelope.get("Header")),
            body=PaymentBody.from_json(envelope.get("Body")),
        )


@dataclass
class PaymentSubmission:
    """Raw inbound request as delivered by the transport"""

    content_type: Optional[str]
    authorization: Optional[str]
    body: bytes


class ErrorShape(str, Enum):
    """Failure envelope selected by a validation step"""

    PLAIN = "plain"
    CODED = "coded"


@dataclass(frozen=True)
class Failure:
    """Typed failure produced by a validation step or the settlement phase"""

    shape: ErrorShape
    message: str
    http_status: int = 200
    code: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def plain(cls, http_status: int, message: str, detail: Optional[str] = None) -> "Failure":
        return cls(shape=ErrorShape.PLAIN, message=message, http_status=http_status, detail=detail)

    @classmethod
    def coded(cls, code: str, message: str) -> "Failure":
        # Coded failures always travel with HTTP 200
        return cls(shape=ErrorShape.CODED, message=message, http_status=200, code=code)


# None means the step passed
ValidationResult = Optional[Failure]


@dataclass
class PipelineOutcome:
    """Rendered response for one payment request"""

    status_code: int
    body: Dict[str, Any]
    state: str
    error_code: Optional[str] = None  # None on success
    tran_id: Any = None
    amount: Optional[Decimal] = None  # debited amount, success only
