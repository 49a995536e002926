"""
Services package for the KPI dashboard backend.

Modules:
- duration: Parse stored processing durations into seconds
- classification: Tag rows as automation/staff/overdue
- profiles: Deposit and withdraw aggregation profiles
- aggregation: Build totals, daily series, brand comparison and slow-transaction reports
- transactions: Fetch and normalize transaction rows from Postgres

Usage:
    from kpi_dashboard.services import aggregate_transactions, DEPOSIT_PROFILE

    report = aggregate_transactions(rows, DEPOSIT_PROFILE)
"""

from kpi_dashboard.services.duration import parse_duration_seconds
from kpi_dashboard.services.classification import (
    ClassifiedRow,
    classify_row,
    classify_rows,
)
from kpi_dashboard.services.profiles import (
    AggregationProfile,
    DEPOSIT_PROFILE,
    WITHDRAW_PROFILE,
    build_profile,
)
from kpi_dashboard.services.aggregation import (
    aggregate_transactions,
    round_half_up,
)
from kpi_dashboard.services.transactions import (
    fetch_transaction_rows,
    record_to_row,
)

__all__ = [
    "parse_duration_seconds",
    "ClassifiedRow",
    "classify_row",
    "classify_rows",
    "AggregationProfile",
    "DEPOSIT_PROFILE",
    "WITHDRAW_PROFILE",
    "build_profile",
    "aggregate_transactions",
    "round_half_up",
    "fetch_transaction_rows",
    "record_to_row",
]
