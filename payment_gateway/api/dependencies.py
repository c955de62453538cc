"""Dependency injection for FastAPI endpoints"""

import secrets
from typing import Optional

from fastapi import Header, Request

from payment_gateway.domain.credentials import CredentialStore
from payment_gateway.domain.exceptions import AdminAuthenticationError
from payment_gateway.domain.ledger import AccountLedger
from payment_gateway.domain.pipeline import PaymentPipeline


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_pipeline(request: Request) -> PaymentPipeline:
    """Provide the process-wide payment pipeline"""
    return request.app.state.pipeline


def get_ledger(request: Request) -> AccountLedger:
    """Provide the process-wide account ledger"""
    return request.app.state.ledger


def get_credentials(request: Request) -> CredentialStore:
    """Provide the process-wide credential store"""
    return request.app.state.credentials


def require_admin_secret(
    request: Request,
    x_admin_secret: Optional[str] = Header(default=None),
) -> None:
    """Reject admin calls without the shared secret header"""
    expected = request.app.state.settings.admin_secret
    if not x_admin_secret or not secrets.compare_digest(x_admin_secret.encode(), expected.encode()):
        raise AdminAuthenticationError("Invalid or missing Admin Secret")
