"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AccountNotFoundError(DomainException):
    """Debit account is not registered in the ledger"""

    pass


class InsufficientFundsError(DomainException):
    """Debit amount exceeds the current account balance"""

    pass


class InvalidAmountError(DomainException):
    """Amount is not a usable money value for the operation"""

    pass


class AccountAlreadyExistsError(DomainException):
    """Account number is already registered"""

    pass


class CredentialAlreadyExistsError(DomainException):
    """Username is already registered"""

    pass


class InvalidRecordError(DomainException):
    """Field value cannot be written to the durable store unchanged"""

    pass


class StoreError(DomainException):
    """Durable store could not be read or written"""

    pass


class AdminAuthenticationError(DomainException):
    """Admin secret header is missing or wrong"""

    pass
