from pydantic import BaseModel
from typing import List
from decimal import Decimal
from datetime import date


class MetricChange(BaseModel):
    value: Decimal
    change: float
    change_type: str


class RateChange(BaseModel):
    value: float
    change: float
    change_type: str


class DashboardSummaryResponse(BaseModel):
    net_worth: MetricChange
    monthly_income: MetricChange
    monthly_expenses: MetricChange
    savings_rate: RateChange


class CashFlowEntry(BaseModel):
    period: str
    income: Decimal
    expenses: Decimal
    net: Decimal


class ExpenseCategory(BaseModel):
    category_id: int
    category_name: str
    amount: Decimal
    count: int
    percentage: float


class ExpenseBreakdownResponse(BaseModel):
    total_expenses: Decimal
    breakdown: List[ExpenseCategory]


class TypeTotal(BaseModel):
    type: str
    total: Decimal


class HistoryPoint(BaseModel):
    date: date
    value: Decimal


class FinancialSummaryResponse(BaseModel):
    account_balances: List[TypeTotal]
    asset_allocation: List[TypeTotal]
    liability_breakdown: List[TypeTotal]
    net_worth_history: List[HistoryPoint]
    savings_rate_history: List[HistoryPoint]
