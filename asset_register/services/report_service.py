"""
折旧变动报表：逐资产调用折旧引擎，按资产编码排序并汇总合计。
单项资产参数无效时剔除该资产并记录原因，不影响其余资产。
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from asset_register.config import settings
from asset_register.models.asset import FixedAsset
from asset_register.services.depreciation_engine import (
    MONEY_FIELDS,
    ZERO,
    AssetSnapshot,
    InvalidAssetParameters,
    ReportRow,
    check_period,
    compute,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExcludedAsset:
    asset_id: str
    asset_code: str
    name: str
    code: str
    reason: str


@dataclass(frozen=True)
class DepreciationReport:
    period_start: date
    period_end: date
    rows: tuple[ReportRow, ...]
    totals: dict[str, Decimal]
    excluded: tuple[ExcludedAsset, ...] = ()

    @property
    def asset_count(self) -> int:
        return len(self.rows)

    @property
    def excluded_count(self) -> int:
        return len(self.excluded)

    @property
    def flagged_count(self) -> int:
        return sum(1 for row in self.rows if row.flagged)


def sum_totals(rows) -> dict[str, Decimal]:
    """各金额列合计"""
    totals = {name: ZERO for name in MONEY_FIELDS}
    for row in rows:
        for name in MONEY_FIELDS:
            totals[name] += getattr(row, name)
    return totals


def _compute_one(
    asset, period_start: date, period_end: date
) -> tuple[ReportRow | None, ExcludedAsset | None]:
    """快照生成与计算都在同一保护内：单项资产数据有误只剔除该资产"""
    try:
        if not isinstance(asset, AssetSnapshot):
            asset = AssetSnapshot.from_record(asset)
        return compute(asset, period_start, period_end), None
    except InvalidAssetParameters as e:
        return None, ExcludedAsset(
            asset_id=str(getattr(asset, "id", "") or ""),
            asset_code=getattr(asset, "asset_code", None) or "",
            name=getattr(asset, "name", None) or "",
            code=e.code,
            reason=e.detail,
        )


def assemble_report(
    assets,
    period_start: date,
    period_end: date,
    max_workers: int | None = None,
) -> DepreciationReport:
    """
    汇编折旧变动报表
    - assets: AssetSnapshot 或任意台账记录
    - 期间非法直接抛 InvalidPeriod，不计算任何资产
    - max_workers > 1 时逐资产计算放入线程池，排序与合计在全部结果返回后进行
    """
    check_period(period_start, period_end)
    records = list(assets)
    workers = max_workers or settings.REPORT_MAX_WORKERS

    logger.info(
        f"[折旧报表] 开始计算，期间: {period_start} ~ {period_end}，资产 {len(records)} 项"
    )

    if workers > 1 and len(records) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(
                pool.map(lambda a: _compute_one(a, period_start, period_end), records)
            )
    else:
        results = [_compute_one(a, period_start, period_end) for a in records]

    rows = []
    excluded = []
    for row, skipped in results:
        if skipped is not None:
            logger.warning(
                f"[折旧报表] 剔除资产 {skipped.asset_code}: {skipped.reason}"
            )
            excluded.append(skipped)
            continue
        for warning in row.warnings:
            logger.info(f"[折旧报表] 资产 {row.asset_code} 标记: {warning.message}")
        rows.append(row)

    rows.sort(key=lambda r: r.asset_code)
    excluded.sort(key=lambda e: e.asset_code)

    report = DepreciationReport(
        period_start=period_start,
        period_end=period_end,
        rows=tuple(rows),
        totals=sum_totals(rows),
        excluded=tuple(excluded),
    )
    logger.info(
        f"[折旧报表] 完成，共 {report.asset_count} 行，"
        f"剔除 {report.excluded_count} 项，标记 {report.flagged_count} 项"
    )
    return report


def filter_report(report: DepreciationReport, query: str | None) -> DepreciationReport:
    """
    按名称 / 编码模糊筛选（不区分大小写）
    合计只覆盖筛选后的行，剔除清单按同一条件筛选
    """
    if not query or not query.strip():
        return report
    needle = query.strip().lower()

    def matches(item) -> bool:
        return needle in item.name.lower() or needle in item.asset_code.lower()

    rows = tuple(row for row in report.rows if matches(row))
    excluded = tuple(e for e in report.excluded if matches(e))
    return replace(report, rows=rows, totals=sum_totals(rows), excluded=excluded)


def summarize(report: DepreciationReport) -> dict:
    """报表概览：账面原值、累计折旧、净值合计与资产数"""
    return {
        "total_book_balance": report.totals["book_balance_end"],
        "total_accum_depreciation": report.totals["accum_dep_closing"],
        "total_net_book_value": report.totals["net_book_value"],
        "asset_count": report.asset_count,
        "excluded_count": report.excluded_count,
        "flagged_count": report.flagged_count,
    }


async def get_depreciation_report(
    db: AsyncSession,
    period_start: date,
    period_end: date,
    query: str | None = None,
    category_id: str | None = None,
) -> DepreciationReport:
    """从台账读取资产并生成报表；快照在逐资产计算时生成"""
    check_period(period_start, period_end)

    stmt = select(FixedAsset).order_by(FixedAsset.asset_code)
    if category_id:
        stmt = stmt.where(FixedAsset.category_id == category_id)
    result = await db.execute(stmt)
    report = assemble_report(result.scalars().all(), period_start, period_end)
    return filter_report(report, query)
