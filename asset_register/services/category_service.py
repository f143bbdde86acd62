"""资产分类服务 — 默认使用年限 / 年折旧率"""

from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from asset_register.models.asset import FixedAsset
from asset_register.models.category import AssetCategory


class CategoryError(Exception):
    def __init__(self, detail: str, status_code: int = 400):
        self.detail = detail
        self.status_code = status_code


def derive_annual_rate(useful_life_years: int) -> Decimal:
    """年折旧率 = 100 / 使用年限，保留两位小数"""
    if useful_life_years <= 0:
        raise CategoryError("使用年限必须大于 0")
    rate = Decimal("100") / Decimal(useful_life_years)
    return rate.quantize(Decimal("0.01"), ROUND_HALF_UP)


def category_defaults(category: AssetCategory) -> dict:
    """新建资产时的默认折旧参数"""
    return {
        "useful_life_months": category.useful_life_years * 12,
        "depreciation_rate": Decimal(str(category.annual_depreciation_rate)),
    }


async def get_category(db: AsyncSession, category_id: str) -> AssetCategory | None:
    result = await db.execute(
        select(AssetCategory).where(AssetCategory.id == category_id)
    )
    return result.scalar_one_or_none()


async def list_categories(db: AsyncSession) -> list[AssetCategory]:
    result = await db.execute(select(AssetCategory).order_by(AssetCategory.name))
    return list(result.scalars().all())


async def count_assets_in_category(db: AsyncSession, category_id: str) -> int:
    result = await db.execute(
        select(func.count(FixedAsset.id)).where(FixedAsset.category_id == category_id)
    )
    return result.scalar_one()


async def create_category(
    db: AsyncSession,
    name: str,
    useful_life_years: int,
    annual_depreciation_rate: Decimal | None = None,
) -> AssetCategory:
    """创建分类；未指定年折旧率时按使用年限推导"""
    if annual_depreciation_rate is None:
        annual_depreciation_rate = derive_annual_rate(useful_life_years)
    elif useful_life_years <= 0:
        raise CategoryError("使用年限必须大于 0")

    category = AssetCategory(
        name=name,
        useful_life_years=useful_life_years,
        annual_depreciation_rate=annual_depreciation_rate,
    )
    db.add(category)
    await db.flush()
    await db.refresh(category)
    return category


async def update_category(
    db: AsyncSession,
    category: AssetCategory,
    name: str | None = None,
    useful_life_years: int | None = None,
    annual_depreciation_rate: Decimal | None = None,
) -> AssetCategory:
    """
    更新分类
    已被资产引用的分类只允许改名，折旧参数不可变（不级联到已有资产）
    """
    changes_params = useful_life_years is not None or annual_depreciation_rate is not None
    if changes_params and await count_assets_in_category(db, category.id) > 0:
        raise CategoryError("已被资产引用的分类不能修改折旧参数", 409)

    if name is not None:
        category.name = name
    if useful_life_years is not None:
        category.useful_life_years = useful_life_years
        if annual_depreciation_rate is None:
            annual_depreciation_rate = derive_annual_rate(useful_life_years)
    if annual_depreciation_rate is not None:
        category.annual_depreciation_rate = annual_depreciation_rate

    await db.flush()
    await db.refresh(category)
    return category


async def delete_category(db: AsyncSession, category: AssetCategory) -> None:
    if await count_assets_in_category(db, category.id) > 0:
        raise CategoryError(f"分类「{category.name}」仍有资产引用，不能删除", 409)
    await db.delete(category)
    await db.flush()
