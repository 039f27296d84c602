from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class GoalStatusEnum(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    PAUSED = "PAUSED"


class GoalCreate(BaseModel):
    name: str = Field(..., max_length=255)
    target_amount: Decimal = Field(..., gt=0)
    current_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    deadline: Optional[date] = None
    category: Optional[str] = Field(None, max_length=50)
    priority: int = Field(default=1, ge=1)
    status: GoalStatusEnum = Field(default=GoalStatusEnum.ACTIVE)


class GoalUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    target_amount: Optional[Decimal] = Field(None, gt=0)
    current_amount: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    deadline: Optional[date] = None
    category: Optional[str] = Field(None, max_length=50)
    priority: Optional[int] = Field(None, ge=1)
    status: Optional[GoalStatusEnum] = None


class GoalProgressUpdate(BaseModel):
    current_amount: Decimal = Field(..., ge=0)


class GoalResponse(BaseModel):
    id: int
    user_id: int
    name: str
    target_amount: Decimal
    current_amount: Decimal
    currency: str
    deadline: Optional[date] = None
    category: Optional[str] = None
    priority: int
    status: GoalStatusEnum
    progress_percentage: float = 0.0
    created_at: datetime

    class Config:
        from_attributes = True


class GoalSuggestion(BaseModel):
    name: str
    category: str
    description: str
    priority: int


class GoalRecommendationsResponse(BaseModel):
    current_goals: List[GoalResponse]
    recommendations: List[GoalSuggestion]
