"""
Aggregation profiles for deposit and withdraw reports.

The deposit and withdraw dashboards run the same aggregation and differ only
in their overdue threshold and in two optional report parts. A profile
captures those differences as a value that is passed to the engine, so there
is a single aggregation code path for both.

| Profile  | Threshold | Coverage rate | Case volume | Overdue field   |
|----------|-----------|---------------|-------------|-----------------|
| deposit  | 60 s      | yes           | yes         | overdueOver60s  |
| withdraw | 300 s     | no            | no          | overdueOver300s |
"""

from dataclasses import dataclass, replace

from kpi_dashboard.core.config import Settings
from kpi_dashboard.models.enums import CoverageBasis, TransactionKind


DEFAULT_SLOW_SCAN_LIMIT = 200
DEFAULT_SLOW_RESPONSE_LIMIT = 100


@dataclass(frozen=True)
class AggregationProfile:
    """
    Configuration for one aggregation run.

    Attributes:
        name: Profile name, used in logs.
        overdue_threshold_seconds: Automation rows slower than this are overdue.
        coverage_basis: Which rows count toward the coverage numerator.
        include_coverage_rate: Emit coverage rate totals, per day and per brand.
        include_case_volume: Emit the per-brand case volume list.
        overdue_field: Response key the overdue total is published under.
        slow_scan_limit: Overdue rows kept, in source order, before sorting.
        slow_response_limit: Slow transactions returned after sorting.

    Example:
        profile = AggregationProfile(
            name="deposit",
            overdue_threshold_seconds=60,
            include_coverage_rate=True,
            include_case_volume=True,
            overdue_field="overdueOver60s",
        )
    """
    name: str
    overdue_threshold_seconds: float
    coverage_basis: CoverageBasis = CoverageBasis.NON_STAFF
    include_coverage_rate: bool = False
    include_case_volume: bool = False
    overdue_field: str = "overdueCount"
    slow_scan_limit: int = DEFAULT_SLOW_SCAN_LIMIT
    slow_response_limit: int = DEFAULT_SLOW_RESPONSE_LIMIT


DEPOSIT_PROFILE = AggregationProfile(
    name=TransactionKind.DEPOSIT.value,
    overdue_threshold_seconds=60,
    include_coverage_rate=True,
    include_case_volume=True,
    overdue_field="overdueOver60s",
)

WITHDRAW_PROFILE = AggregationProfile(
    name=TransactionKind.WITHDRAW.value,
    overdue_threshold_seconds=300,
    overdue_field="overdueOver300s",
)

_BASE_PROFILES = {
    TransactionKind.DEPOSIT: DEPOSIT_PROFILE,
    TransactionKind.WITHDRAW: WITHDRAW_PROFILE,
}


def build_profile(kind: TransactionKind, settings: Settings) -> AggregationProfile:
    """
    Build the aggregation profile for a transaction kind from settings.

    Thresholds and slow-transaction caps come from configuration; which
    report parts are enabled is fixed per kind.

    Args:
        kind: Deposit or withdraw.
        settings: Application settings.

    Returns:
        AggregationProfile for the kind.
    """
    if kind == TransactionKind.DEPOSIT:
        threshold = settings.deposit_overdue_threshold_seconds
    else:
        threshold = settings.withdraw_overdue_threshold_seconds

    return replace(
        _BASE_PROFILES[kind],
        overdue_threshold_seconds=threshold,
        slow_scan_limit=settings.slow_transaction_scan_limit,
        slow_response_limit=settings.slow_transaction_response_limit,
    )
