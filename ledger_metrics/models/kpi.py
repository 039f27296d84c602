from pydantic import BaseModel
from typing import List
from datetime import date
from decimal import Decimal


class KPIPoint(BaseModel):
    date: date
    value: Decimal

    class Config:
        from_attributes = True


class KPIResponse(BaseModel):
    id: int
    kpi_type: str
    value: Decimal
    date: date

    class Config:
        from_attributes = True


class NetWorthResponse(BaseModel):
    value: Decimal
    monthly_growth: float
    yearly_growth: float
    change: float
    historical_data: List[KPIPoint]


class SavingsRateResponse(BaseModel):
    value: float
    average_savings_rate: float
    historical_data: List[KPIPoint]


class FreedomNumberResponse(BaseModel):
    value: Decimal
    current_net_worth: Decimal
    progress_percentage: float
    withdrawal_rate: Decimal


class FIIndexResponse(BaseModel):
    value: float
    net_worth: Decimal
    freedom_number: Decimal
    historical_data: List[KPIPoint]


class HealthScoreComponent(BaseModel):
    name: str
    score: float
    max_score: int


class HealthScoreResponse(BaseModel):
    value: float
    status: str
    components: List[HealthScoreComponent]
    historical_data: List[KPIPoint]


