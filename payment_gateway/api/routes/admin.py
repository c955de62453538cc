"""Admin endpoints - register users and accounts, inspect state"""

import logging

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from payment_gateway.api.dependencies import get_credentials, get_ledger, get_request_id, require_admin_secret
from payment_gateway.api.errors import plain_error_response
from payment_gateway.api.routes.schemas import (
    AccountStatus,
    AddAccountRequest,
    AddUserRequest,
    MessageResponse,
    StatusResponse,
    UserStatus,
)
from payment_gateway.domain.credentials import CredentialStore
from payment_gateway.domain.exceptions import (
    AccountAlreadyExistsError,
    CredentialAlreadyExistsError,
    InvalidAmountError,
    InvalidRecordError,
    StoreError,
)
from payment_gateway.domain.ledger import AccountLedger
from payment_gateway.domain.responses import json_number

router = APIRouter(dependencies=[Depends(require_admin_secret)])


@router.post("/add-user", response_model=MessageResponse)
async def add_user(
    request_body: AddUserRequest,
    credentials: CredentialStore = Depends(get_credentials),
    request_id: str = Depends(get_request_id),
):
    if not request_body.username or not request_body.password:
        return plain_error_response(400, "Username and Password are required.")

    try:
        await run_in_threadpool(credentials.add_credential, request_body.username, request_body.password)
    except CredentialAlreadyExistsError:
        return plain_error_response(400, "User already exists.")
    except InvalidRecordError as e:
        return plain_error_response(400, str(e))
    except StoreError as e:
        logging.error(f"Failed to persist user: {e}", extra={"request_id": request_id})
        return plain_error_response(500, "Unexpected error", detail=str(e))

    return MessageResponse(message="User added successfully.")


@router.post("/add-account", response_model=MessageResponse)
async def add_account(
    request_body: AddAccountRequest,
    ledger: AccountLedger = Depends(get_ledger),
    request_id: str = Depends(get_request_id),
):
    if not request_body.acctNo or request_body.balance is None or not request_body.owner:
        return plain_error_response(400, "Account No, Balance, and Owner are required.")

    try:
        await run_in_threadpool(
            ledger.add_account, request_body.acctNo, request_body.balance, request_body.owner
        )
    except AccountAlreadyExistsError:
        return plain_error_response(400, "Account already exists.")
    except InvalidAmountError:
        return plain_error_response(400, "Balance must be non-negative with at most 6 decimal places.")
    except InvalidRecordError as e:
        return plain_error_response(400, str(e))
    except StoreError as e:
        logging.error(f"Failed to persist account: {e}", extra={"request_id": request_id})
        return plain_error_response(500, "Unexpected error", detail=str(e))

    return MessageResponse(message="Account added successfully.")


@router.get("/status", response_model=StatusResponse)
def get_status(
    credentials: CredentialStore = Depends(get_credentials),
    ledger: AccountLedger = Depends(get_ledger),
):
    """
    Registered users and account balances.

    Passwords are never returned.
    """
    return StatusResponse(
        users=[UserStatus(username=name) for name in credentials.usernames()],
        accounts={
            account.account_number: AccountStatus(balance=json_number(account.balance), owner=account.owner)
            for account in ledger.accounts()
        },
    )
