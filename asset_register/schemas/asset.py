"""固定资产 Pydantic Schema"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


class AssetCreate(BaseModel):
    asset_code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    category_id: str | None = None
    purchase_date: date
    start_depreciation_date: date | None = Field(None, description="默认等于购置日期")
    initial_cost: Decimal = Field(..., ge=0)
    salvage_value: Decimal = Field(Decimal("0"), ge=0)
    useful_life_months: int | None = Field(None, ge=0, description="不填则取分类默认值")
    depreciation_rate: Decimal | None = Field(None, ge=0, le=100, description="年折旧率(%)")
    opening_accum_depreciation: Decimal = Field(Decimal("0"), ge=0, description="期初结转累计折旧")

    @model_validator(mode="after")
    def check_amounts(self):
        if self.salvage_value > self.initial_cost:
            raise ValueError("残值不能大于原值")
        if self.opening_accum_depreciation > self.initial_cost - self.salvage_value:
            raise ValueError("期初累计折旧不能超过可折旧总额")
        return self


class AssetUpdate(BaseModel):
    asset_code: str | None = Field(None, min_length=1, max_length=50)
    name: str | None = Field(None, min_length=1, max_length=200)
    category_id: str | None = None
    purchase_date: date | None = None
    start_depreciation_date: date | None = None
    initial_cost: Decimal | None = Field(None, ge=0)
    salvage_value: Decimal | None = Field(None, ge=0)
    useful_life_months: int | None = Field(None, ge=0)
    depreciation_rate: Decimal | None = Field(None, ge=0, le=100)
    opening_accum_depreciation: Decimal | None = Field(None, ge=0)


class AssetResponse(BaseModel):
    id: str
    asset_code: str
    name: str
    category_id: str | None
    category_name: str | None
    purchase_date: date
    start_depreciation_date: date
    initial_cost: float
    salvage_value: float
    useful_life_months: int
    depreciation_rate: float
    opening_accum_depreciation: float
    depreciable_base: float
    monthly_amount: float | None
    disposal_date: date | None
    disposal_proceeds: float | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AssetDispose(BaseModel):
    disposal_date: date
    disposal_proceeds: Decimal | None = Field(None, ge=0, description="处置收入")


class ScheduleItem(BaseModel):
    period: str
    amount: float
    accumulated: float
    net_book_value: float
