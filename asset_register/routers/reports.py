"""折旧变动报表 API 路由"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from asset_register.database import get_db
from asset_register.schemas.report import (
    DepreciationReportResponse,
    ExcludedAssetItem,
    ReportRowResponse,
    ReportSummary,
    ReportTotals,
    RowWarningItem,
)
from asset_register.services.depreciation_engine import ReportRow
from asset_register.services.report_service import (
    DepreciationReport,
    get_depreciation_report,
    summarize,
)

router = APIRouter(prefix="/reports", tags=["报表"])


def _default_period(start: date | None, end: date | None) -> tuple[date, date]:
    """默认期间为本年度 1 月 1 日至 12 月 31 日"""
    today = date.today()
    return (
        start or date(today.year, 1, 1),
        end or date(today.year, 12, 31),
    )


def row_to_response(row: ReportRow) -> ReportRowResponse:
    return ReportRowResponse(
        asset_id=row.asset_id,
        asset_code=row.asset_code,
        name=row.name,
        category_id=row.category_id,
        purchase_date=row.purchase_date,
        start_depreciation_date=row.start_depreciation_date,
        disposal_date=row.disposal_date,
        opening_balance=float(row.opening_balance),
        additions=float(row.additions),
        disposals=float(row.disposals),
        book_balance_end=float(row.book_balance_end),
        depreciation_rate=float(row.depreciation_rate),
        depreciation_duration=row.depreciation_duration,
        monthly_amount=float(row.monthly_amount),
        accum_dep_opening=float(row.accum_dep_opening),
        period_depreciation=float(row.period_depreciation),
        additions_depreciation=float(row.additions_depreciation),
        accum_dep_disposals=float(row.accum_dep_disposals),
        accum_dep_closing=float(row.accum_dep_closing),
        net_book_value=float(row.net_book_value),
        disposal_gain_loss=float(row.disposal_gain_loss),
        flagged=row.flagged,
        warnings=[RowWarningItem(code=w.code, message=w.message) for w in row.warnings],
    )


def _report_to_response(report: DepreciationReport) -> DepreciationReportResponse:
    return DepreciationReportResponse(
        period_start=report.period_start,
        period_end=report.period_end,
        rows=[row_to_response(r) for r in report.rows],
        totals=ReportTotals(**{k: float(v) for k, v in report.totals.items()}),
        excluded=[
            ExcludedAssetItem(
                asset_id=e.asset_id,
                asset_code=e.asset_code,
                name=e.name,
                code=e.code,
                reason=e.reason,
            )
            for e in report.excluded
        ],
        asset_count=report.asset_count,
        excluded_count=report.excluded_count,
        flagged_count=report.flagged_count,
    )


@router.get(
    "/depreciation",
    response_model=DepreciationReportResponse,
    summary="固定资产折旧变动表",
)
async def depreciation_report(
    start: date | None = Query(None, description="开始日期，默认本年 1 月 1 日"),
    end: date | None = Query(None, description="结束日期，默认本年 12 月 31 日"),
    q: str | None = Query(None, description="按名称 / 编码筛选"),
    category_id: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """每次查询都按当前台账参数重算，不使用快照"""
    period_start, period_end = _default_period(start, end)
    report = await get_depreciation_report(db, period_start, period_end, q, category_id)
    return _report_to_response(report)


@router.get(
    "/depreciation/summary",
    response_model=ReportSummary,
    summary="折旧变动表概览",
)
async def depreciation_summary(
    start: date | None = Query(None),
    end: date | None = Query(None),
    q: str | None = Query(None),
    category_id: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """账面原值、累计折旧、净值合计及资产数"""
    period_start, period_end = _default_period(start, end)
    report = await get_depreciation_report(db, period_start, period_end, q, category_id)
    summary = summarize(report)
    return ReportSummary(
        period_start=period_start,
        period_end=period_end,
        total_book_balance=float(summary["total_book_balance"]),
        total_accum_depreciation=float(summary["total_accum_depreciation"]),
        total_net_book_value=float(summary["total_net_book_value"]),
        asset_count=summary["asset_count"],
        excluded_count=summary["excluded_count"],
        flagged_count=summary["flagged_count"],
    )
