import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, DateTime, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from asset_register.database import Base


class AssetCategory(Base):
    __tablename__ = "asset_categories"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    useful_life_years: Mapped[int] = mapped_column(Integer, nullable=False)
    annual_depreciation_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # 关联
    assets = relationship("FixedAsset", back_populates="category")
