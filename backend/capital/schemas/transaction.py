"""
Transaction schemas.
"""

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from typing import Annotated, Optional
from datetime import date, datetime
from decimal import Decimal

from capital.models.transaction import TransactionType

AMOUNT_LIMIT = Decimal("999999999999.99")
EARLIEST_DATE = date(1800, 1, 1)


def _check_amount(value: Decimal) -> Decimal:
    if value == 0:
        raise ValueError("Amount cannot be 0")
    return value


def _check_date(value: date) -> date:
    if value < EARLIEST_DATE:
        raise ValueError("Date must be on or after 1800-01-01")
    return value


Amount = Annotated[Decimal, Field(ge=-AMOUNT_LIMIT, le=AMOUNT_LIMIT), AfterValidator(_check_amount)]
LedgerDate = Annotated[date, AfterValidator(_check_date)]


class TransactionBase(BaseModel):
    date: LedgerDate
    amount: Amount
    type: TransactionType
    description: str = Field("", max_length=255)
    account_id: Optional[str] = None
    budget_category_id: Optional[str] = None


class TransactionCreate(TransactionBase):
    pass


class TransactionUpdate(BaseModel):
    date: Optional[LedgerDate] = None
    amount: Optional[Amount] = None
    type: Optional[TransactionType] = None
    description: Optional[str] = Field(None, max_length=255)
    account_id: Optional[str] = None
    budget_category_id: Optional[str] = None


class TransactionResponse(BaseModel):
    id: str
    date: date
    amount: Decimal
    type: TransactionType
    description: str
    account_id: Optional[str]
    budget_category_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionListResponse(BaseModel):
    items: list[TransactionResponse]
    total: int
    page: int
    pages: int


class BulkDeleteRequest(BaseModel):
    transaction_ids: list[str] = Field(..., min_length=1)
