"""
折旧计算引擎 — 直线法、期间分摊、累计折旧封顶、处置

纯函数：只读传入的资产快照，不访问数据库、不读时钟、不写日志，
同一输入永远得到同一输出，因此任意历史期间都可以重算（补打、审计）。

月折旧额的取数顺序固定：
1. useful_life_months > 0  → (原值 - 残值) / 使用寿命月数
2. 否则 depreciation_rate > 0 → (原值 - 残值) × 年折旧率% / 12
3. 两者都不可用 → InvalidAssetParameters

整月口径：截至某日（含当日）已计提月数 = 开始折旧日至次日之间完整经过的月数，
按使用寿命月数封顶，有处置日期时冻结在处置日。
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from dateutil.relativedelta import relativedelta

ZERO = Decimal("0")
CENT = Decimal("0.01")
LAST_MONTH = date(9999, 12, 1)

# 非致命警告：开始折旧日期早于购置日期
INCONSISTENT_DATES = "INCONSISTENT_DATES"

MONEY_FIELDS = (
    "opening_balance",
    "additions",
    "disposals",
    "book_balance_end",
    "accum_dep_opening",
    "period_depreciation",
    "additions_depreciation",
    "accum_dep_disposals",
    "accum_dep_closing",
    "net_book_value",
    "disposal_gain_loss",
)


class DepreciationError(Exception):
    code = "DEPRECIATION_ERROR"

    def __init__(self, detail: str, status_code: int = 400):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class InvalidAssetParameters(DepreciationError):
    """无法从资产参数推导月折旧额，或金额字段自相矛盾"""

    code = "INVALID_ASSET_PARAMETERS"

    def __init__(self, detail: str, status_code: int = 422):
        super().__init__(detail, status_code)


class InvalidPeriod(DepreciationError):
    """报表期间开始日期晚于结束日期"""

    code = "INVALID_PERIOD"


def to_money(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _q(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _parse_money(label: str, field: str, value) -> Decimal:
    try:
        amount = to_money(value)
    except (TypeError, ValueError, InvalidOperation):
        raise InvalidAssetParameters(f"资产 {label} {field} 不是有效金额: {value!r}")
    if not amount.is_finite():
        raise InvalidAssetParameters(f"资产 {label} {field} 不是有效金额: {value!r}")
    return amount


# ─────────────────────── 值对象 ───────────────────────


@dataclass(frozen=True)
class AssetSnapshot:
    """一次计算期间内不可变的资产快照"""

    id: str
    asset_code: str
    name: str
    purchase_date: date
    start_depreciation_date: date
    initial_cost: Decimal
    salvage_value: Decimal = ZERO
    useful_life_months: int = 0
    depreciation_rate: Decimal = ZERO
    opening_accum_depreciation: Decimal = ZERO
    category_id: str | None = None
    disposal_date: date | None = None
    disposal_proceeds: Decimal | None = None

    def __post_init__(self):
        if not self.asset_code:
            raise InvalidAssetParameters(f"资产 {self.id} 缺少资产编码")
        label = self.asset_code
        if not isinstance(self.purchase_date, date):
            raise InvalidAssetParameters(f"资产 {label} 购置日期缺失或无效")
        if not isinstance(self.start_depreciation_date, date):
            raise InvalidAssetParameters(f"资产 {label} 开始折旧日期缺失或无效")
        if self.disposal_date is not None and not isinstance(self.disposal_date, date):
            raise InvalidAssetParameters(f"资产 {label} 处置日期无效")
        if self.initial_cost is None:
            raise InvalidAssetParameters(f"资产 {label} 原值缺失")

        for name in (
            "initial_cost",
            "salvage_value",
            "depreciation_rate",
            "opening_accum_depreciation",
        ):
            object.__setattr__(self, name, _parse_money(label, name, getattr(self, name)))
        try:
            life = int(self.useful_life_months or 0)
        except (TypeError, ValueError):
            raise InvalidAssetParameters(
                f"资产 {label} 使用寿命月数无效: {self.useful_life_months!r}"
            )
        object.__setattr__(self, "useful_life_months", life)
        if self.disposal_proceeds is not None:
            object.__setattr__(
                self,
                "disposal_proceeds",
                _parse_money(label, "disposal_proceeds", self.disposal_proceeds),
            )

    @classmethod
    def from_record(cls, record) -> "AssetSnapshot":
        """
        从台账记录（ORM 对象或任意带同名属性的对象）生成快照
        日期缺失、金额无法解析时抛 InvalidAssetParameters
        """
        purchase_date = getattr(record, "purchase_date", None)
        return cls(
            id=str(getattr(record, "id", "")),
            asset_code=getattr(record, "asset_code", None),
            name=getattr(record, "name", None) or "",
            purchase_date=purchase_date,
            start_depreciation_date=(
                getattr(record, "start_depreciation_date", None) or purchase_date
            ),
            initial_cost=getattr(record, "initial_cost", None),
            salvage_value=getattr(record, "salvage_value", None),
            useful_life_months=getattr(record, "useful_life_months", None),
            depreciation_rate=getattr(record, "depreciation_rate", None),
            opening_accum_depreciation=getattr(record, "opening_accum_depreciation", None),
            category_id=getattr(record, "category_id", None),
            disposal_date=getattr(record, "disposal_date", None),
            disposal_proceeds=getattr(record, "disposal_proceeds", None),
        )

    @property
    def depreciable_base(self) -> Decimal:
        """可折旧总额 = 原值 - 残值"""
        return self.initial_cost - self.salvage_value


@dataclass(frozen=True)
class RowWarning:
    code: str
    message: str


@dataclass(frozen=True)
class ReportRow:
    """单项资产在一个报表期间内的变动数据，不落库"""

    asset_id: str
    asset_code: str
    name: str
    category_id: str | None
    purchase_date: date
    start_depreciation_date: date
    disposal_date: date | None
    opening_balance: Decimal
    additions: Decimal
    disposals: Decimal
    book_balance_end: Decimal
    depreciation_rate: Decimal
    depreciation_duration: int
    monthly_amount: Decimal
    accum_dep_opening: Decimal
    period_depreciation: Decimal
    additions_depreciation: Decimal
    accum_dep_disposals: Decimal
    accum_dep_closing: Decimal
    net_book_value: Decimal
    disposal_gain_loss: Decimal
    warnings: tuple[RowWarning, ...] = ()

    @property
    def flagged(self) -> bool:
        return bool(self.warnings)


# ─────────────────────── 校验 ───────────────────────


def check_period(period_start: date, period_end: date) -> None:
    if period_start > period_end:
        raise InvalidPeriod(f"开始日期 {period_start} 不能晚于结束日期 {period_end}")


def validate_asset(asset: AssetSnapshot) -> None:
    """金额字段的一致性校验；失败抛 InvalidAssetParameters"""
    label = asset.asset_code
    if asset.initial_cost < ZERO:
        raise InvalidAssetParameters(f"资产 {label} 原值不能为负数")
    if asset.salvage_value < ZERO:
        raise InvalidAssetParameters(f"资产 {label} 残值不能为负数")
    if asset.salvage_value > asset.initial_cost:
        raise InvalidAssetParameters(f"资产 {label} 残值不能大于原值")
    if asset.opening_accum_depreciation < ZERO:
        raise InvalidAssetParameters(f"资产 {label} 期初累计折旧不能为负数")
    if asset.opening_accum_depreciation > asset.depreciable_base:
        raise InvalidAssetParameters(f"资产 {label} 期初累计折旧超过可折旧总额")
    if asset.disposal_date is not None and asset.disposal_date < asset.purchase_date:
        raise InvalidAssetParameters(f"资产 {label} 处置日期早于购置日期")


def date_warnings(asset: AssetSnapshot) -> tuple[RowWarning, ...]:
    if asset.start_depreciation_date < asset.purchase_date:
        return (
            RowWarning(
                INCONSISTENT_DATES,
                f"开始折旧日期 {asset.start_depreciation_date} 早于购置日期 {asset.purchase_date}",
            ),
        )
    return ()


# ─────────────────────── 折旧计算 ───────────────────────


def monthly_amount(asset: AssetSnapshot) -> Decimal:
    """标准月折旧额（不做舍入，舍入只发生在累计额上）"""
    base = asset.depreciable_base
    if asset.useful_life_months > 0:
        return base / Decimal(asset.useful_life_months)
    if asset.depreciation_rate > ZERO:
        return base * asset.depreciation_rate / Decimal("100") / Decimal("12")
    raise InvalidAssetParameters(
        f"资产 {asset.asset_code} 使用寿命月数与折旧率均无效，无法计算月折旧额"
    )


def whole_months_between(start: date, end: date) -> int:
    """start 到 end 之间完整经过的月数，不足一月的部分舍去"""
    if end <= start:
        return 0
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def whole_months_through(start: date, through: date) -> int:
    """start 至 through（含当日）完整经过的月数"""
    if through < date.max:
        return whole_months_between(start, through + timedelta(days=1))
    # date.max 的次日无法表示，按 10000-01-01 计算
    months = (10000 - start.year) * 12 + 1 - start.month
    return months - 1 if start.day > 1 else months


def accrued_months(asset: AssetSnapshot, through: date) -> int:
    """截至 through（含当日）已计提折旧的整月数"""
    if asset.disposal_date is not None and asset.disposal_date < through:
        through = asset.disposal_date
    months = whole_months_through(asset.start_depreciation_date, through)
    if asset.useful_life_months > 0:
        months = min(months, asset.useful_life_months)
    return months


def _accumulated(asset: AssetSnapshot, monthly: Decimal, months: int) -> Decimal:
    # 累计折旧不超过可折旧总额
    total = asset.opening_accum_depreciation + monthly * months
    return _q(min(total, asset.depreciable_base))


def accumulated_depreciation(asset: AssetSnapshot, through: date) -> Decimal:
    """截至指定日期的累计折旧"""
    validate_asset(asset)
    monthly = monthly_amount(asset)
    return _accumulated(asset, monthly, accrued_months(asset, through))


def _off_books_row(asset, monthly, warnings) -> ReportRow:
    """期间内不在账（期后购置或期前已处置）：全部为 0"""
    return ReportRow(
        asset_id=asset.id,
        asset_code=asset.asset_code,
        name=asset.name,
        category_id=asset.category_id,
        purchase_date=asset.purchase_date,
        start_depreciation_date=asset.start_depreciation_date,
        disposal_date=asset.disposal_date,
        opening_balance=_q(ZERO),
        additions=_q(ZERO),
        disposals=_q(ZERO),
        book_balance_end=_q(ZERO),
        depreciation_rate=asset.depreciation_rate,
        depreciation_duration=asset.useful_life_months,
        monthly_amount=_q(monthly),
        accum_dep_opening=_q(ZERO),
        period_depreciation=_q(ZERO),
        additions_depreciation=_q(ZERO),
        accum_dep_disposals=_q(ZERO),
        accum_dep_closing=_q(ZERO),
        net_book_value=_q(ZERO),
        disposal_gain_loss=_q(ZERO),
        warnings=warnings,
    )


def compute(asset: AssetSnapshot, period_start: date, period_end: date) -> ReportRow:
    """
    计算单项资产在 [period_start, period_end]（含两端）内的变动数据

    1. 期初累计折旧 = 期初结转累计折旧 + 月折旧额 × 期前已计提月数（封顶）
    2. 期初余额 / 本期增加按购置日期落在期前还是期内区分
    3. 本期折旧 = 期末累计折旧 - 期初累计折旧，已提足的资产恒为 0
    4. 本期处置时累计折旧随原值一并转出
    5. 净值 = 期末账面余额 - 期末累计折旧
    """
    check_period(period_start, period_end)
    validate_asset(asset)
    monthly = monthly_amount(asset)
    warnings = date_warnings(asset)

    disposed_before = (
        asset.disposal_date is not None and asset.disposal_date < period_start
    )
    if asset.purchase_date > period_end or disposed_before:
        return _off_books_row(asset, monthly, warnings)

    cost = asset.initial_cost
    opening_balance = cost if asset.purchase_date < period_start else ZERO
    additions = cost if asset.purchase_date >= period_start else ZERO
    disposed_in_period = (
        asset.disposal_date is not None and asset.disposal_date <= period_end
    )
    disposals = cost if disposed_in_period else ZERO
    book_balance_end = opening_balance + additions - disposals

    if period_start > date.min:
        months_before = accrued_months(asset, period_start - timedelta(days=1))
    else:
        months_before = 0
    months_through_end = accrued_months(asset, period_end)
    accum_opening = _accumulated(asset, monthly, months_before)
    accum_through_end = _accumulated(asset, monthly, months_through_end)
    period_dep = accum_through_end - accum_opening
    additions_dep = period_dep if additions > ZERO else ZERO

    if disposed_in_period:
        accum_disposals = accum_through_end
        proceeds = asset.disposal_proceeds or ZERO
        gain_loss = proceeds - (cost - accum_through_end)
    else:
        accum_disposals = ZERO
        gain_loss = ZERO

    accum_closing = accum_opening + period_dep - accum_disposals

    return ReportRow(
        asset_id=asset.id,
        asset_code=asset.asset_code,
        name=asset.name,
        category_id=asset.category_id,
        purchase_date=asset.purchase_date,
        start_depreciation_date=asset.start_depreciation_date,
        disposal_date=asset.disposal_date,
        opening_balance=_q(opening_balance),
        additions=_q(additions),
        disposals=_q(disposals),
        book_balance_end=_q(book_balance_end),
        depreciation_rate=asset.depreciation_rate,
        depreciation_duration=asset.useful_life_months,
        monthly_amount=_q(monthly),
        accum_dep_opening=accum_opening,
        period_depreciation=period_dep,
        additions_depreciation=additions_dep,
        accum_dep_disposals=accum_disposals,
        accum_dep_closing=accum_closing,
        net_book_value=_q(book_balance_end) - accum_closing,
        disposal_gain_loss=_q(gain_loss),
        warnings=warnings,
    )


# ─────────────────────── 折旧计划 ───────────────────────


def depreciation_schedule(asset: AssetSnapshot, through: date | None = None) -> list[dict]:
    """
    按自然月生成折旧计划，从第一个满月计提的月份起，
    到提足、处置或 through 所在月份为止。
    月中开始折旧时，开始当月不足一个整月，不单列零金额行。
    每月金额与任意期间报表的本期折旧可逐月对账。
    """
    validate_asset(asset)
    monthly = monthly_amount(asset)
    base = asset.depreciable_base

    month_start = asset.start_depreciation_date.replace(day=1)
    previous = _accumulated(asset, monthly, 0)
    schedule = []
    while previous < base:
        if through is not None and month_start > through:
            break
        if asset.disposal_date is not None and month_start > asset.disposal_date:
            break
        last_month = month_start == LAST_MONTH
        if last_month:
            month_end = date.max
        else:
            month_end = month_start + relativedelta(months=1) - timedelta(days=1)
        accumulated = _accumulated(asset, monthly, accrued_months(asset, month_end))
        if schedule or accumulated > previous:
            schedule.append({
                "period": month_start.strftime("%Y-%m"),
                "amount": accumulated - previous,
                "accumulated": accumulated,
                "net_book_value": _q(asset.initial_cost - accumulated),
            })
        previous = accumulated
        if last_month:
            break
        month_start += relativedelta(months=1)

    return schedule
