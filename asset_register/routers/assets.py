"""固定资产 API 路由"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from asset_register.database import get_db
from asset_register.models.asset import FixedAsset
from asset_register.routers.reports import row_to_response
from asset_register.schemas.asset import (
    AssetCreate,
    AssetUpdate,
    AssetResponse,
    AssetDispose,
    ScheduleItem,
)
from asset_register.schemas.report import ReportRowResponse
from asset_register.services.asset_service import (
    get_asset,
    list_assets,
    create_asset,
    update_asset,
    delete_asset,
    record_disposal,
    cancel_disposal,
    AssetError,
)
from asset_register.services.depreciation_engine import (
    AssetSnapshot,
    InvalidAssetParameters,
    compute,
    depreciation_schedule,
    monthly_amount,
)

router = APIRouter(prefix="/assets", tags=["固定资产"])


async def _get_or_404(db: AsyncSession, asset_id: str) -> FixedAsset:
    asset = await get_asset(db, asset_id)
    if not asset:
        raise HTTPException(status_code=404, detail="资产不存在")
    return asset


def _to_response(asset: FixedAsset) -> AssetResponse:
    """将 ORM FixedAsset 转为响应模型"""
    snapshot = AssetSnapshot.from_record(asset)
    try:
        monthly = round(float(monthly_amount(snapshot)), 2)
    except InvalidAssetParameters:
        monthly = None

    return AssetResponse(
        id=asset.id,
        asset_code=asset.asset_code,
        name=asset.name,
        category_id=asset.category_id,
        category_name=asset.category.name if asset.category else None,
        purchase_date=asset.purchase_date,
        start_depreciation_date=asset.start_depreciation_date,
        initial_cost=float(asset.initial_cost),
        salvage_value=float(asset.salvage_value),
        useful_life_months=asset.useful_life_months,
        depreciation_rate=float(asset.depreciation_rate),
        opening_accum_depreciation=float(asset.opening_accum_depreciation),
        depreciable_base=float(snapshot.depreciable_base),
        monthly_amount=monthly,
        disposal_date=asset.disposal_date,
        disposal_proceeds=(
            float(asset.disposal_proceeds) if asset.disposal_proceeds is not None else None
        ),
        created_at=asset.created_at,
    )


# 显式传 null 可清空的字段；其余字段传 null 视为未修改
NULLABLE_FIELDS = {"category_id"}


def _present(changes: dict) -> dict:
    return {
        k: v for k, v in changes.items() if v is not None or k in NULLABLE_FIELDS
    }


# ─────────────────────── CRUD ───────────────────────


@router.get("", response_model=list[AssetResponse], summary="固定资产列表")
async def list_all(
    category_id: str | None = Query(None),
    q: str | None = Query(None, description="按名称 / 编码模糊搜索"),
    db: AsyncSession = Depends(get_db),
):
    assets = await list_assets(db, category_id=category_id, query=q)
    return [_to_response(a) for a in assets]


@router.get("/{asset_id}", response_model=AssetResponse, summary="固定资产详情")
async def get_one(asset_id: str, db: AsyncSession = Depends(get_db)):
    asset = await _get_or_404(db, asset_id)
    return _to_response(asset)


@router.post("", response_model=AssetResponse, status_code=201, summary="新建固定资产")
async def create(body: AssetCreate, db: AsyncSession = Depends(get_db)):
    try:
        asset = await create_asset(db, body.model_dump())
    except AssetError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return _to_response(asset)


@router.put("/{asset_id}", response_model=AssetResponse, summary="更新固定资产")
async def update(
    asset_id: str,
    body: AssetUpdate,
    db: AsyncSession = Depends(get_db),
):
    asset = await _get_or_404(db, asset_id)
    try:
        asset = await update_asset(db, asset, _present(body.model_dump(exclude_unset=True)))
    except AssetError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return _to_response(asset)


@router.delete("/{asset_id}", summary="删除固定资产")
async def delete(asset_id: str, db: AsyncSession = Depends(get_db)):
    asset = await _get_or_404(db, asset_id)
    await delete_asset(db, asset)
    return {"message": f"资产「{asset.name}」已删除"}


# ─────────────────────── 处置 ───────────────────────


@router.post("/{asset_id}/dispose", response_model=AssetResponse, summary="登记处置")
async def dispose(
    asset_id: str,
    body: AssetDispose,
    db: AsyncSession = Depends(get_db),
):
    asset = await _get_or_404(db, asset_id)
    try:
        asset = await record_disposal(
            db, asset, body.disposal_date, body.disposal_proceeds
        )
    except AssetError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return _to_response(asset)


@router.delete("/{asset_id}/dispose", response_model=AssetResponse, summary="撤销处置")
async def undo_dispose(asset_id: str, db: AsyncSession = Depends(get_db)):
    asset = await _get_or_404(db, asset_id)
    try:
        asset = await cancel_disposal(db, asset)
    except AssetError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return _to_response(asset)


# ─────────────────────── 折旧 ───────────────────────


@router.get(
    "/{asset_id}/schedule",
    response_model=list[ScheduleItem],
    summary="逐月折旧计划",
)
async def get_schedule(
    asset_id: str,
    through: date | None = Query(None, description="截止日期，默认到提足为止"),
    db: AsyncSession = Depends(get_db),
):
    asset = await _get_or_404(db, asset_id)
    schedule = depreciation_schedule(AssetSnapshot.from_record(asset), through)
    return [
        ScheduleItem(
            period=item["period"],
            amount=float(item["amount"]),
            accumulated=float(item["accumulated"]),
            net_book_value=float(item["net_book_value"]),
        )
        for item in schedule
    ]


@router.get(
    "/{asset_id}/depreciation",
    response_model=ReportRowResponse,
    summary="单项资产期间折旧",
)
async def get_depreciation(
    asset_id: str,
    start: date = Query(..., description="开始日期"),
    end: date = Query(..., description="结束日期"),
    db: AsyncSession = Depends(get_db),
):
    asset = await _get_or_404(db, asset_id)
    row = compute(AssetSnapshot.from_record(asset), start, end)
    return row_to_response(row)
