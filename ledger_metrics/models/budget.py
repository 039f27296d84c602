from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class BudgetPeriodEnum(str, Enum):
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class BudgetCreate(BaseModel):
    category_id: int
    amount: Decimal = Field(..., gt=0)
    period: BudgetPeriodEnum = Field(default=BudgetPeriodEnum.MONTHLY)
    start_date: date
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class BudgetUpdate(BaseModel):
    category_id: Optional[int] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    period: Optional[BudgetPeriodEnum] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class BudgetResponse(BaseModel):
    id: int
    user_id: int
    category_id: int
    amount: Decimal
    period: BudgetPeriodEnum
    start_date: date
    end_date: Optional[date] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ===== ANALYTICS =====

class BudgetWindow(BaseModel):
    start_date: date
    end_date: date


class BudgetOverall(BaseModel):
    budgeted: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: float
    status: str


class BudgetCategoryPerformance(BaseModel):
    budget_id: Optional[int] = None
    category_id: int
    category_name: str
    budgeted: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: float
    status: str
    transaction_count: int


class BudgetPerformanceResponse(BaseModel):
    period: BudgetWindow
    overall: BudgetOverall
    categories: List[BudgetCategoryPerformance]


class BudgetRecommendation(BaseModel):
    category_id: int
    category_name: str
    average_monthly_expense: Decimal
    recommended_budget: Decimal
    transaction_count: int
