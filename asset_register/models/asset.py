import uuid
from datetime import datetime, date
from decimal import Decimal

from sqlalchemy import String, DateTime, Date, ForeignKey, Numeric, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from asset_register.database import Base


class FixedAsset(Base):
    """固定资产台账记录；报表数值不落库，每次查询时由折旧引擎重算"""

    __tablename__ = "assets"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    asset_code: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("asset_categories.id"), index=True
    )
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_depreciation_date: Mapped[date] = mapped_column(Date, nullable=False)
    initial_cost: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    salvage_value: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=0)
    useful_life_months: Mapped[int] = mapped_column(Integer, default=0)
    depreciation_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=0)
    opening_accum_depreciation: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), default=0
    )
    # 处置事件（可选）
    disposal_date: Mapped[date | None] = mapped_column(Date)
    disposal_proceeds: Mapped[Decimal | None] = mapped_column(Numeric(15, 2))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # 关联
    category = relationship("AssetCategory", back_populates="assets")
