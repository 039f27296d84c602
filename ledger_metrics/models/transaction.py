from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class TransactionTypeEnum(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class TransactionCreate(BaseModel):
    account_id: int
    category_id: Optional[int] = None
    transaction_date: date
    amount: Decimal
    transaction_type: TransactionTypeEnum
    description: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = None
    is_recurring: bool = False
    recurrence_pattern: Optional[str] = Field(None, max_length=50)

    @field_validator("amount")
    @classmethod
    def amount_must_be_non_negative(cls, value: Decimal) -> Decimal:
        # The sign comes from transaction_type, never from the amount
        if value < 0:
            raise ValueError("amount must be non-negative; use transaction_type for direction")
        return value


class TransactionUpdate(BaseModel):
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    transaction_date: Optional[date] = None
    amount: Optional[Decimal] = None
    transaction_type: Optional[TransactionTypeEnum] = None
    description: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = None
    is_recurring: Optional[bool] = None
    recurrence_pattern: Optional[str] = Field(None, max_length=50)

    @field_validator("amount")
    @classmethod
    def amount_must_be_non_negative(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is not None and value < 0:
            raise ValueError("amount must be non-negative; use transaction_type for direction")
        return value


class TransactionResponse(BaseModel):
    id: int
    user_id: int
    account_id: int
    category_id: Optional[int] = None
    transaction_date: date
    amount: Decimal
    transaction_type: TransactionTypeEnum
    description: Optional[str] = None
    notes: Optional[str] = None
    is_recurring: bool
    recurrence_pattern: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class RecurringCandidate(BaseModel):
    description: Optional[str] = None
    amount: Decimal
    transaction_type: str
    occurrences: int
    average_interval: int
    pattern: str
    last_date: date
    transaction_ids: List[int]


class RecurringTransactionsResponse(BaseModel):
    marked_recurring: List[TransactionResponse]
    potential_recurring: List[RecurringCandidate]


class MarkRecurringRequest(BaseModel):
    transaction_ids: List[int] = Field(..., min_length=1)
    recurrence_pattern: Optional[str] = Field(None, max_length=50)


class CategorizeRequest(BaseModel):
    transaction_ids: List[int] = Field(..., min_length=1)


class CategorizedTransaction(BaseModel):
    id: int
    description: Optional[str] = None
    category: str
