from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class CategoryTypeEnum(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    BOTH = "BOTH"


class CategoryCreate(BaseModel):
    name: str = Field(..., max_length=100)
    category_type: CategoryTypeEnum = Field(default=CategoryTypeEnum.EXPENSE)
    parent_category_id: Optional[int] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    category_type: Optional[CategoryTypeEnum] = None
    parent_category_id: Optional[int] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    category_type: CategoryTypeEnum
    parent_category_id: Optional[int] = None

    class Config:
        from_attributes = True
