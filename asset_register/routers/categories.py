"""资产分类 API 路由"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from asset_register.database import get_db
from asset_register.models.category import AssetCategory
from asset_register.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryDefaults,
)
from asset_register.services.category_service import (
    create_category,
    list_categories,
    get_category,
    update_category,
    delete_category,
    count_assets_in_category,
    category_defaults,
    CategoryError,
)

router = APIRouter(prefix="/categories", tags=["资产分类"])


async def _get_or_404(db: AsyncSession, category_id: str) -> AssetCategory:
    category = await get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="资产分类不存在")
    return category


async def _to_response(db: AsyncSession, category: AssetCategory) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        name=category.name,
        useful_life_years=category.useful_life_years,
        annual_depreciation_rate=float(category.annual_depreciation_rate),
        asset_count=await count_assets_in_category(db, category.id),
        created_at=category.created_at,
    )


@router.post("", response_model=CategoryResponse, status_code=201, summary="新建分类")
async def create(body: CategoryCreate, db: AsyncSession = Depends(get_db)):
    """年折旧率不填时按 100 / 使用年限推导（保留两位小数）"""
    try:
        category = await create_category(
            db, body.name, body.useful_life_years, body.annual_depreciation_rate
        )
    except CategoryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return await _to_response(db, category)


@router.get("", response_model=list[CategoryResponse], summary="分类列表")
async def list_all(db: AsyncSession = Depends(get_db)):
    categories = await list_categories(db)
    return [await _to_response(db, c) for c in categories]


@router.get("/{category_id}", response_model=CategoryResponse, summary="分类详情")
async def get_one(category_id: str, db: AsyncSession = Depends(get_db)):
    category = await _get_or_404(db, category_id)
    return await _to_response(db, category)


@router.get(
    "/{category_id}/defaults",
    response_model=CategoryDefaults,
    summary="新建资产的默认折旧参数",
)
async def get_defaults(category_id: str, db: AsyncSession = Depends(get_db)):
    category = await _get_or_404(db, category_id)
    defaults = category_defaults(category)
    return CategoryDefaults(
        category_id=category.id,
        useful_life_months=defaults["useful_life_months"],
        depreciation_rate=float(defaults["depreciation_rate"]),
    )


@router.put("/{category_id}", response_model=CategoryResponse, summary="更新分类")
async def update(
    category_id: str,
    body: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    """已被资产引用的分类只能改名"""
    category = await _get_or_404(db, category_id)
    try:
        category = await update_category(
            db,
            category,
            name=body.name,
            useful_life_years=body.useful_life_years,
            annual_depreciation_rate=body.annual_depreciation_rate,
        )
    except CategoryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return await _to_response(db, category)


@router.delete("/{category_id}", summary="删除分类")
async def delete(category_id: str, db: AsyncSession = Depends(get_db)):
    category = await _get_or_404(db, category_id)
    try:
        await delete_category(db, category)
    except CategoryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return {"message": f"分类「{category.name}」已删除"}
