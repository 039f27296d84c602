from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class AccountTypeEnum(str, Enum):
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    INVESTMENT = "INVESTMENT"
    CREDIT = "CREDIT"
    LOAN = "LOAN"
    MORTGAGE = "MORTGAGE"
    RETIREMENT = "RETIREMENT"
    OTHER = "OTHER"


class AccountCreate(BaseModel):
    account_name: str = Field(..., max_length=255)
    account_type: AccountTypeEnum
    institution_name: Optional[str] = Field(None, max_length=255)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    initial_balance: Decimal = Field(default=Decimal("0.00"))


class AccountUpdate(BaseModel):
    account_name: Optional[str] = Field(None, max_length=255)
    institution_name: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


class AccountResponse(BaseModel):
    id: int
    user_id: int
    account_name: str
    account_type: AccountTypeEnum
    institution_name: Optional[str] = None
    currency: str
    is_active: bool
    initial_balance: Decimal
    balance: Decimal
    balance_last_updated: Optional[datetime] = None
    last_sync: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class BalanceHistoryEntry(BaseModel):
    date: date
    balance: Decimal
    transaction_id: int


class AccountBalanceResponse(BaseModel):
    account_id: int
    initial_balance: Decimal
    balance: Decimal
    history: List[BalanceHistoryEntry]
