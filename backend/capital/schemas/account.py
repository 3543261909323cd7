"""
Account Pydantic schemas for API validation.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from capital.models.account import AccountType

BALANCE_LIMIT = Decimal("999999999999.99")


class AccountHistoryEntry(BaseModel):
    """Balance snapshot."""
    balance: Decimal = Field(..., ge=-BALANCE_LIMIT, le=BALANCE_LIMIT)
    last_updated: date

    model_config = ConfigDict(from_attributes=True)


class AccountBase(BaseModel):
    """Base account schema."""
    name: str = Field(..., min_length=1, max_length=30)
    account_type: AccountType
    image: Optional[str] = Field(None, max_length=255)


class AccountCreate(AccountBase):
    """Schema for creating an account with its opening balance."""
    balance: Decimal = Field(..., ge=-BALANCE_LIMIT, le=BALANCE_LIMIT)
    account_order: Optional[int] = Field(None, ge=0)


class AccountUpdate(BaseModel):
    """Schema for updating an account. A balance records today's snapshot."""
    name: Optional[str] = Field(None, min_length=1, max_length=30)
    account_type: Optional[AccountType] = None
    image: Optional[str] = Field(None, max_length=255)
    balance: Optional[Decimal] = Field(None, ge=-BALANCE_LIMIT, le=BALANCE_LIMIT)


class AccountOrdering(BaseModel):
    """Full list of account ids in their new display order."""
    accounts: list[str] = Field(..., min_length=1)


class AccountResponse(AccountBase):
    """Schema for account response."""
    id: str
    balance: Optional[Decimal] = None
    account_order: int
    liability: bool
    history: list[AccountHistoryEntry] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
