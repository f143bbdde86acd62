"""资产分类 Pydantic Schema"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    useful_life_years: int = Field(..., gt=0, description="默认使用年限")
    annual_depreciation_rate: Decimal | None = Field(
        None, ge=0, le=100, description="年折旧率(%)，不填则按 100 / 使用年限推导"
    )


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    useful_life_years: int | None = Field(None, gt=0)
    annual_depreciation_rate: Decimal | None = Field(None, ge=0, le=100)


class CategoryResponse(BaseModel):
    id: str
    name: str
    useful_life_years: int
    annual_depreciation_rate: float
    asset_count: int = 0
    created_at: datetime

    model_config = {"from_attributes": True}


class CategoryDefaults(BaseModel):
    category_id: str
    useful_life_months: int
    depreciation_rate: float
