from datetime import date
from pydantic import BaseModel


class RowWarningItem(BaseModel):
    code: str
    message: str


class ReportRowResponse(BaseModel):
    asset_id: str
    asset_code: str
    name: str
    category_id: str | None
    purchase_date: date
    start_depreciation_date: date
    disposal_date: date | None
    opening_balance: float
    additions: float
    disposals: float
    book_balance_end: float
    depreciation_rate: float
    depreciation_duration: int
    monthly_amount: float
    accum_dep_opening: float
    period_depreciation: float
    additions_depreciation: float
    accum_dep_disposals: float
    accum_dep_closing: float
    net_book_value: float
    disposal_gain_loss: float
    flagged: bool
    warnings: list[RowWarningItem]


class ReportTotals(BaseModel):
    opening_balance: float
    additions: float
    disposals: float
    book_balance_end: float
    accum_dep_opening: float
    period_depreciation: float
    additions_depreciation: float
    accum_dep_disposals: float
    accum_dep_closing: float
    net_book_value: float
    disposal_gain_loss: float


class ExcludedAssetItem(BaseModel):
    asset_id: str
    asset_code: str
    name: str
    code: str
    reason: str


class DepreciationReportResponse(BaseModel):
    period_start: date
    period_end: date
    rows: list[ReportRowResponse]
    totals: ReportTotals
    excluded: list[ExcludedAssetItem]
    asset_count: int
    excluded_count: int
    flagged_count: int


class ReportSummary(BaseModel):
    period_start: date
    period_end: date
    total_book_balance: float
    total_accum_depreciation: float
    total_net_book_value: float
    asset_count: int
    excluded_count: int
    flagged_count: int
