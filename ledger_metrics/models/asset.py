from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class AssetTypeEnum(str, Enum):
    STOCK = "STOCK"
    BOND = "BOND"
    CASH = "CASH"
    REAL_ESTATE = "REAL_ESTATE"
    CRYPTO = "CRYPTO"
    OTHER = "OTHER"


class AssetCreate(BaseModel):
    name: str = Field(..., max_length=255)
    asset_type: AssetTypeEnum
    value: Decimal = Field(..., ge=0)
    acquisition_date: Optional[date] = None
    acquisition_price: Optional[Decimal] = Field(None, ge=0)
    current_price: Optional[Decimal] = Field(None, ge=0)
    quantity: Optional[Decimal] = Field(None, ge=0)


class AssetUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    value: Optional[Decimal] = Field(None, ge=0)
    current_price: Optional[Decimal] = Field(None, ge=0)
    quantity: Optional[Decimal] = Field(None, ge=0)


class AssetResponse(BaseModel):
    id: int
    user_id: int
    name: str
    asset_type: AssetTypeEnum
    value: Decimal
    acquisition_date: Optional[date] = None
    acquisition_price: Optional[Decimal] = None
    current_price: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ===== ANALYTICS =====

class AssetPerformance(BaseModel):
    id: int
    name: str
    type: str
    acquisition_value: Decimal
    current_value: Decimal
    absolute_return: Decimal
    percentage_return: float
    annualized_return: float
    holding_period_years: float


class AllocationSlice(BaseModel):
    type: str
    value: Decimal
    percentage: float


class AssetAllocationResponse(BaseModel):
    total_value: Decimal
    allocation: List[AllocationSlice]
    recommended_allocation: Dict[str, int]
