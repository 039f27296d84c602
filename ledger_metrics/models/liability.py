from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from enum import Enum


class LiabilityTypeEnum(str, Enum):
    MORTGAGE = "MORTGAGE"
    CAR_LOAN = "CAR_LOAN"
    STUDENT_LOAN = "STUDENT_LOAN"
    CREDIT_CARD = "CREDIT_CARD"
    PERSONAL_LOAN = "PERSONAL_LOAN"
    OTHER = "OTHER"


class PaymentFrequencyEnum(str, Enum):
    WEEKLY = "WEEKLY"
    BI_WEEKLY = "BI-WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    ANNUALLY = "ANNUALLY"


class LiabilityCreate(BaseModel):
    name: str = Field(..., max_length=255)
    liability_type: LiabilityTypeEnum
    amount: Decimal = Field(..., ge=0)
    interest_rate: Optional[Decimal] = Field(None, ge=0)
    payment_amount: Optional[Decimal] = Field(None, ge=0)
    payment_frequency: Optional[PaymentFrequencyEnum] = None


class LiabilityUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    amount: Optional[Decimal] = Field(None, ge=0)
    interest_rate: Optional[Decimal] = Field(None, ge=0)
    payment_amount: Optional[Decimal] = Field(None, ge=0)
    payment_frequency: Optional[PaymentFrequencyEnum] = None


class LiabilityResponse(BaseModel):
    id: int
    user_id: int
    name: str
    liability_type: LiabilityTypeEnum
    amount: Decimal
    interest_rate: Optional[Decimal] = None
    payment_amount: Optional[Decimal] = None
    payment_frequency: Optional[PaymentFrequencyEnum] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ===== ANALYTICS =====

class DebtByType(BaseModel):
    type: str
    total_amount: Decimal
    avg_interest_rate: Optional[Decimal] = None
    count: int


class PayoffProjection(BaseModel):
    month: int
    year: int
    remaining_debt: Decimal
    total_paid: Decimal


class LiabilitySummaryResponse(BaseModel):
    total_debt: Decimal
    weighted_interest_rate: Decimal
    monthly_payment_total: Decimal
    debt_by_type: List[DebtByType]
    payoff_projections: List[PayoffProjection]
