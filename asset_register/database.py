"""数据库初始化 - SQLite + async SQLAlchemy"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from asset_register.config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=False)

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


class Base(DeclarativeBase):
    pass


async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db():
    """创建所有表，并对已有表进行增量迁移"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        # v0.1.0: assets 表新增处置字段
        await migrate_asset_disposal(conn)


async def migrate_asset_disposal(conn):
    """为 assets 表补充处置日期 / 处置收入列（如果尚未存在）"""
    result = await conn.execute(text("PRAGMA table_info(assets)"))
    columns = {row[1] for row in result.fetchall()}

    migrations = [
        ("disposal_date", "ALTER TABLE assets ADD COLUMN disposal_date DATE"),
        ("disposal_proceeds", "ALTER TABLE assets ADD COLUMN disposal_proceeds NUMERIC(15, 2)"),
    ]
    for col_name, sql in migrations:
        if col_name not in columns:
            await conn.execute(text(sql))
