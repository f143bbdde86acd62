"""测试公共 Fixtures —— 内存 SQLite + 独立 TestClient"""

import uuid
from datetime import date
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

import asset_register.models  # noqa: F401
from asset_register.database import Base, get_db
from asset_register.models.asset import FixedAsset
from asset_register.models.category import AssetCategory


# ──────────── 内存数据库引擎 ────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def session_factory():
    """每个测试独立的内存库：建表 → 测试 → 释放"""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


# ──────────── FastAPI TestClient ────────────

@pytest_asyncio.fixture
async def client(session_factory):
    from asset_register.main import app

    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ──────────── 预置分类 / 资产 ────────────

@pytest_asyncio.fixture
async def equipment_category(session_factory) -> AssetCategory:
    """办公设备：5 年，年折旧率 20%"""
    async with session_factory() as db:
        category = AssetCategory(
            id=str(uuid.uuid4()),
            name="办公设备",
            useful_life_years=5,
            annual_depreciation_rate=Decimal("20.00"),
        )
        db.add(category)
        await db.commit()
        await db.refresh(category)
        return category


@pytest_asyncio.fixture
async def sample_asset(session_factory, equipment_category) -> FixedAsset:
    """原值 12000，无残值，60 个月，2024-01-01 开始折旧"""
    async with session_factory() as db:
        asset = FixedAsset(
            id=str(uuid.uuid4()),
            asset_code="FA-001",
            name="服务器机柜",
            category_id=equipment_category.id,
            purchase_date=date(2024, 1, 1),
            start_depreciation_date=date(2024, 1, 1),
            initial_cost=Decimal("12000.00"),
            salvage_value=Decimal("0"),
            useful_life_months=60,
            depreciation_rate=Decimal("20.00"),
            opening_accum_depreciation=Decimal("0"),
        )
        db.add(asset)
        await db.commit()
        await db.refresh(asset)
        return asset


@pytest_asyncio.fixture
async def broken_asset(session_factory) -> FixedAsset:
    """使用寿命与折旧率均为 0 的历史脏数据"""
    async with session_factory() as db:
        asset = FixedAsset(
            id=str(uuid.uuid4()),
            asset_code="FA-000",
            name="参数缺失的旧资产",
            purchase_date=date(2023, 3, 1),
            start_depreciation_date=date(2023, 3, 1),
            initial_cost=Decimal("5000.00"),
            salvage_value=Decimal("0"),
            useful_life_months=0,
            depreciation_rate=Decimal("0"),
            opening_accum_depreciation=Decimal("0"),
        )
        db.add(asset)
        await db.commit()
        await db.refresh(asset)
        return asset
