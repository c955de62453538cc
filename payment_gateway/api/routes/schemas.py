"""Pydantic schemas for the admin API"""

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class AddUserRequest(BaseModel):
    """Request body for POST /admin/add-user"""

    username: Optional[str] = None
    password: Optional[str] = None


class AddAccountRequest(BaseModel):
    """Request body for POST /admin/add-account"""

    acctNo: Optional[str] = None
    balance: Optional[Decimal] = Field(default=None, description="Opening balance")
    owner: Optional[str] = None


class MessageResponse(BaseModel):
    """Acknowledgement for admin mutations"""

    message: str


class UserStatus(BaseModel):
    username: str


class AccountStatus(BaseModel):
    balance: float
    owner: str


class StatusResponse(BaseModel):
    """Response for GET /admin/status"""

    users: List[UserStatus]
    accounts: Dict[str, AccountStatus]
