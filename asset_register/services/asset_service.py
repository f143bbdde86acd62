"""固定资产台账服务 — 增删改查、处置登记"""

from datetime import date
from decimal import Decimal

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from asset_register.models.asset import FixedAsset
from asset_register.services.category_service import category_defaults, get_category


class AssetError(Exception):
    def __init__(self, detail: str, status_code: int = 400):
        self.detail = detail
        self.status_code = status_code


# ─────────────────────── helpers ───────────────────────


def _check_amounts(
    initial_cost: Decimal, salvage_value: Decimal, opening_accum_depreciation: Decimal
) -> None:
    if salvage_value > initial_cost:
        raise AssetError("残值不能大于原值")
    if opening_accum_depreciation > initial_cost - salvage_value:
        raise AssetError("期初累计折旧不能超过可折旧总额（原值 - 残值）")


async def _ensure_code_free(
    db: AsyncSession, asset_code: str, exclude_id: str | None = None
) -> None:
    conditions = [FixedAsset.asset_code == asset_code]
    if exclude_id:
        conditions.append(FixedAsset.id != exclude_id)
    result = await db.execute(select(FixedAsset.id).where(*conditions))
    if result.first() is not None:
        raise AssetError(f"资产编码 {asset_code} 已存在", 409)


# ─────────────────────── 查询 ───────────────────────


async def get_asset(db: AsyncSession, asset_id: str) -> FixedAsset | None:
    """获取资产（含分类信息）"""
    result = await db.execute(
        select(FixedAsset)
        .options(selectinload(FixedAsset.category))
        .where(FixedAsset.id == asset_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_assets(
    db: AsyncSession,
    category_id: str | None = None,
    query: str | None = None,
) -> list[FixedAsset]:
    """资产列表，按资产编码升序；query 对名称 / 编码做模糊匹配"""
    conditions = []
    if category_id:
        conditions.append(FixedAsset.category_id == category_id)
    if query and query.strip():
        pattern = f"%{query.strip()}%"
        conditions.append(
            or_(FixedAsset.name.ilike(pattern), FixedAsset.asset_code.ilike(pattern))
        )

    result = await db.execute(
        select(FixedAsset)
        .options(selectinload(FixedAsset.category))
        .where(*conditions)
        .order_by(FixedAsset.asset_code)
    )
    return list(result.scalars().all())


# ─────────────────────── 增删改 ───────────────────────


async def create_asset(db: AsyncSession, data: dict) -> FixedAsset:
    """
    新建资产
    1. 校验编码唯一、分类存在
    2. 未填写的使用寿命 / 折旧率取分类默认值（仅在创建时，之后不随分类变化）
    3. 开始折旧日期默认等于购置日期
    """
    await _ensure_code_free(db, data["asset_code"])

    category_id = data.get("category_id")
    if category_id:
        category = await get_category(db, category_id)
        if not category:
            raise AssetError("资产分类不存在", 404)
        for key, value in category_defaults(category).items():
            if data.get(key) is None:
                data[key] = value

    if data.get("start_depreciation_date") is None:
        data["start_depreciation_date"] = data["purchase_date"]
    data.setdefault("salvage_value", Decimal("0"))
    data.setdefault("opening_accum_depreciation", Decimal("0"))
    if data.get("useful_life_months") is None:
        data["useful_life_months"] = 0
    if data.get("depreciation_rate") is None:
        data["depreciation_rate"] = Decimal("0")

    _check_amounts(
        data["initial_cost"], data["salvage_value"], data["opening_accum_depreciation"]
    )

    asset = FixedAsset(**data)
    db.add(asset)
    await db.flush()
    return await get_asset(db, asset.id)


async def update_asset(db: AsyncSession, asset: FixedAsset, changes: dict) -> FixedAsset:
    """部分更新；金额关系按更新后的值重新校验"""
    if changes.get("asset_code") and changes["asset_code"] != asset.asset_code:
        await _ensure_code_free(db, changes["asset_code"], exclude_id=asset.id)
    if changes.get("category_id"):
        if not await get_category(db, changes["category_id"]):
            raise AssetError("资产分类不存在", 404)

    merged = {
        key: Decimal(str(changes.get(key, getattr(asset, key))))
        for key in ("initial_cost", "salvage_value", "opening_accum_depreciation")
    }
    _check_amounts(**merged)

    purchase_date = changes.get("purchase_date", asset.purchase_date)
    if asset.disposal_date is not None and asset.disposal_date < purchase_date:
        raise AssetError("购置日期不能晚于处置日期")

    for key, value in changes.items():
        setattr(asset, key, value)

    await db.flush()
    return await get_asset(db, asset.id)


async def delete_asset(db: AsyncSession, asset: FixedAsset) -> None:
    await db.delete(asset)
    await db.flush()


# ─────────────────────── 处置 ───────────────────────


async def record_disposal(
    db: AsyncSession,
    asset: FixedAsset,
    disposal_date: date,
    disposal_proceeds: Decimal | None = None,
) -> FixedAsset:
    """登记处置日期与处置收入；折旧在处置日停止，报表中原值与累计折旧一并转出"""
    if asset.disposal_date is not None:
        raise AssetError("该资产已处置")
    if disposal_date < asset.purchase_date:
        raise AssetError("处置日期不能早于购置日期")

    asset.disposal_date = disposal_date
    asset.disposal_proceeds = disposal_proceeds
    await db.flush()
    return await get_asset(db, asset.id)


async def cancel_disposal(db: AsyncSession, asset: FixedAsset) -> FixedAsset:
    if asset.disposal_date is None:
        raise AssetError("该资产未处置")
    asset.disposal_date = None
    asset.disposal_proceeds = None
    await db.flush()
    return await get_asset(db, asset.id)
