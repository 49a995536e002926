"""
Transaction Aggregation Engine

Turns the flat transaction rows fetched for one date window into the report
the deposit and withdraw dashboards render:

1. Totals: transaction count, automation count, average automation
   processing time, overdue count, coverage rate
2. Daily series: per-day count, overdue count, average processing time and
   coverage rate, ascending by date
3. Brand comparison: the same metrics per brand, ascending by average time
4. Slow transactions: overdue rows formatted for the table, with a summary
5. Case volume: per-brand overdue share of automation rows (deposit only)

Averaging Rule:
    Average processing time only counts automation rows whose parsed
    duration is above zero. A row whose duration is missing or unparseable
    (parsed as 0) is left out of both the sum and the count, and so is a
    genuine 0 second duration; the two cannot be told apart.

    The same rule applies to the totals, the daily series and the brand
    comparison for both profiles. The older deposit dashboard counted
    zero-duration rows in its per-day and per-brand denominators, so deposit
    daily and brand averages here can read higher than it showed for windows
    with missing durations. Withdraw figures are unaffected.

Slow Transaction Ordering:
    Overdue rows are capped to the first `slow_scan_limit` (200) in source
    order BEFORE they are sorted by processing time, then the sorted list is
    cut to `slow_response_limit` (100) for the response. The result is the
    slowest of the first 200 overdue rows, not the 100 slowest overall. This
    ordering is kept as-is because the dashboard figures depend on it.

Rounding:
    Displayed figures use half-up rounding (0.25 -> 0.3) to match the values
    the dashboard has always shown.

The engine is a pure function of (rows, profile): no I/O, no configuration
access and no shared state, so concurrent requests can call it freely.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from kpi_dashboard.models.enums import CoverageBasis
from kpi_dashboard.models.schemas import (
    BrandComparisonRow,
    CaseVolumeRow,
    ChartData,
    DailyPoint,
    SlowTransaction,
    SlowTransactionSummary,
    TransactionReport,
    TransactionRow,
)
from kpi_dashboard.services.classification import ClassifiedRow, classify_rows
from kpi_dashboard.services.profiles import AggregationProfile


logger = logging.getLogger(__name__)


UNKNOWN_BRAND = "UNKNOWN"
NOT_AVAILABLE = "N/A"


# =============================================================================
# Numeric Helpers
# =============================================================================

def round_half_up(value: float, digits: int = 1) -> float:
    """
    Round to `digits` decimals with halves rounded up.

    Python's round() uses banker's rounding (round(0.25, 1) == 0.2); the
    dashboard figures have always been rounded half up.
    """
    factor = 10 ** digits
    scaled = value * factor + 0.5
    if not math.isfinite(scaled):
        # Too large to carry any decimals
        return value
    return math.floor(scaled) / factor


def _safe_float(value: Any) -> float:
    """
    Convert a stored amount to float, returning 0 for anything unusable.

    Handles database nulls, Decimal values, numeric strings, NaN and inf.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        float_val = float(value)
    except (ValueError, TypeError):
        return 0.0
    if np.isnan(float_val) or np.isinf(float_val):
        return 0.0
    return float_val


def _coverage_rate(total: int, staff: int, automation: int, basis: CoverageBasis) -> float:
    """Coverage percentage for a group; 0 for an empty group."""
    if total == 0:
        return 0.0
    covered = automation if basis == CoverageBasis.AUTOMATION else total - staff
    return covered / total * 100


def _date_sort_key(value: str) -> Tuple[int, date, str]:
    """
    Ordering key for a date string.

    ISO dates order chronologically; anything else sorts after them, by text.
    The string itself is never rewritten.
    """
    try:
        return (0, date.fromisoformat(value.strip()), value)
    except ValueError:
        return (1, date.min, value)


def _format_display_date(value: Optional[str]) -> str:
    """Render an ISO date as 'Jan 5, 2024'; other text is returned unchanged."""
    if not value:
        return ""
    try:
        parsed = date.fromisoformat(value.strip())
    except ValueError:
        return value
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


# =============================================================================
# Group Accumulator
# =============================================================================

@dataclass
class GroupStats:
    """
    Running counters for a group of rows (whole window, one day, one brand).

    Attributes:
        total: Rows in the group.
        automation: Automation rows.
        staff: Staff rows.
        processing_time_sum: Sum of automation durations above zero.
        processing_time_count: Number of durations in processing_time_sum.
        overdue: Overdue automation rows.
    """
    total: int = 0
    automation: int = 0
    staff: int = 0
    processing_time_sum: float = 0.0
    processing_time_count: int = 0
    overdue: int = 0

    def add(self, item: ClassifiedRow) -> None:
        self.total += 1
        if item.is_automation:
            self.automation += 1
            if item.duration_seconds > 0:
                self.processing_time_sum += item.duration_seconds
                self.processing_time_count += 1
        if item.is_overdue:
            self.overdue += 1
        if item.is_staff:
            self.staff += 1

    @property
    def avg_processing_time(self) -> float:
        if self.processing_time_count == 0:
            return 0.0
        return self.processing_time_sum / self.processing_time_count

    def coverage_rate(self, basis: CoverageBasis) -> float:
        return _coverage_rate(self.total, self.staff, self.automation, basis)


# =============================================================================
# Report Sections
# =============================================================================

def _group_by_date(classified: Sequence[ClassifiedRow]) -> Dict[str, GroupStats]:
    """Group rows by their raw date string; rows without a date are skipped."""
    groups: Dict[str, GroupStats] = {}
    for item in classified:
        key = item.row.date
        if not key:
            continue
        groups.setdefault(key, GroupStats()).add(item)
    return groups


def _group_by_brand(classified: Sequence[ClassifiedRow]) -> Dict[str, GroupStats]:
    """Group rows by brand, in first-seen order."""
    groups: Dict[str, GroupStats] = {}
    for item in classified:
        key = item.row.brand or UNKNOWN_BRAND
        groups.setdefault(key, GroupStats()).add(item)
    return groups


def build_daily_series(
    classified: Sequence[ClassifiedRow],
    profile: AggregationProfile,
) -> Tuple[List[DailyPoint], ChartData]:
    """
    Build the per-day count list and the chart maps.

    Args:
        classified: Classified rows for the window.
        profile: Aggregation profile.

    Returns:
        (daily points ascending by date, chart data keyed by date)
    """
    groups = _group_by_date(classified)
    ordered_dates = sorted(groups, key=_date_sort_key)

    daily = [DailyPoint(date=day, count=groups[day].total) for day in ordered_dates]

    chart = ChartData(
        overdueTrans={day: groups[day].overdue for day in ordered_dates},
        avgProcessingTime={day: groups[day].avg_processing_time for day in ordered_dates},
        coverageRate=(
            {day: groups[day].coverage_rate(profile.coverage_basis) for day in ordered_dates}
            if profile.include_coverage_rate else None
        ),
        transactionVolume={day: groups[day].total for day in ordered_dates},
    )
    return daily, chart


def build_brand_comparison(
    classified: Sequence[ClassifiedRow],
    profile: AggregationProfile,
) -> List[BrandComparisonRow]:
    """
    Build per-brand comparison rows sorted ascending by rounded average time.

    Brands with equal average time keep their first-seen order.
    """
    rows = []
    for brand, stats in _group_by_brand(classified).items():
        coverage = None
        if profile.include_coverage_rate:
            coverage = round_half_up(stats.coverage_rate(profile.coverage_basis), 1)
        rows.append(BrandComparisonRow(
            brand=brand,
            avgTime=round_half_up(stats.avg_processing_time, 1),
            coverageRate=coverage,
            totalTransaction=stats.total,
            totalAutomation=stats.automation,
            totalOverdue=stats.overdue,
        ))
    return sorted(rows, key=lambda row: row.avgTime)


def _format_slow_transaction(item: ClassifiedRow) -> SlowTransaction:
    row = item.row
    return SlowTransaction(
        brand=row.brand or UNKNOWN_BRAND,
        customerName=row.customerName or NOT_AVAILABLE,
        amount=_safe_float(row.amount),
        processingTime=round_half_up(item.duration_seconds, 1),
        completed=row.completed or _format_display_date(row.date),
        date=row.date,
        operatorGroup=row.operatorGroup or "",
    )


def build_slow_transactions(
    classified: Sequence[ClassifiedRow],
    profile: AggregationProfile,
) -> Tuple[List[SlowTransaction], SlowTransactionSummary]:
    """
    Build the slow-transaction list and its summary.

    The first `slow_scan_limit` overdue rows (source order) are formatted and
    sorted slowest first. The summary covers all of them; the returned list
    is cut to `slow_response_limit`.

    Returns:
        (slow transactions for the response, summary)
    """
    overdue = [item for item in classified if item.is_overdue][:profile.slow_scan_limit]
    scanned = sorted(
        (_format_slow_transaction(item) for item in overdue),
        key=lambda txn: txn.processingTime,
        reverse=True,
    )

    if not scanned:
        return [], SlowTransactionSummary()

    brand_counts = Counter(txn.brand for txn in scanned)
    summary = SlowTransactionSummary(
        totalSlowTransaction=len(scanned),
        avgProcessingTime=round_half_up(
            sum(txn.processingTime for txn in scanned) / len(scanned), 1
        ),
        brand=brand_counts.most_common(1)[0][0],
    )
    return scanned[:profile.slow_response_limit], summary


def build_case_volume(brand_comparison: Sequence[BrandComparisonRow]) -> List[CaseVolumeRow]:
    """
    Per-brand overdue share of automation rows, sorted descending.

    totalCase = totalOverdue / totalAutomation * 100, rounded to 2 decimals,
    0 for brands without automation rows.
    """
    rows = []
    for brand in brand_comparison:
        total_case = 0.0
        if brand.totalAutomation > 0:
            total_case = brand.totalOverdue / brand.totalAutomation * 100
        rows.append(CaseVolumeRow(
            brand=brand.brand,
            totalCase=round_half_up(total_case, 2),
            totalTransAutomation=brand.totalAutomation,
            totalOverdue=brand.totalOverdue,
        ))
    return sorted(rows, key=lambda row: row.totalCase, reverse=True)


# =============================================================================
# Main Entry Point
# =============================================================================

def aggregate_transactions(
    rows: Sequence[TransactionRow],
    profile: AggregationProfile,
) -> TransactionReport:
    """
    Build the full report for a window of transaction rows.

    Never raises for data quality problems: missing or malformed fields fall
    back to defaults and the row is still counted. An empty row set yields a
    report with zero totals and empty series.

    Args:
        rows: Transaction rows fetched for the request, in source order.
        profile: Deposit or withdraw aggregation profile.

    Returns:
        TransactionReport for the rows.

    Example:
        report = aggregate_transactions(rows, DEPOSIT_PROFILE)
        payload = report.to_response_data(DEPOSIT_PROFILE.overdue_field)
    """
    classified = classify_rows(rows, profile.overdue_threshold_seconds)

    totals = GroupStats()
    for item in classified:
        totals.add(item)

    daily, chart = build_daily_series(classified, profile)
    brand_comparison = build_brand_comparison(classified, profile)
    slow_transactions, slow_summary = build_slow_transactions(classified, profile)

    report = TransactionReport(
        totalTransaction=totals.total,
        totalTransAutomation=totals.automation,
        avgProcessingTime=totals.avg_processing_time,
        overdueCount=totals.overdue,
        coverageRate=(
            totals.coverage_rate(profile.coverage_basis)
            if profile.include_coverage_rate else None
        ),
        dailyData=daily,
        chartData=chart,
        brandComparison=brand_comparison,
        slowTransactions=slow_transactions,
        slowTransactionSummary=slow_summary,
        caseVolume=build_case_volume(brand_comparison) if profile.include_case_volume else None,
    )

    logger.debug(
        f"Aggregated {totals.total} {profile.name} rows: "
        f"{len(daily)} days, {len(brand_comparison)} brands, "
        f"{slow_summary.totalSlowTransaction} slow"
    )
    return report
