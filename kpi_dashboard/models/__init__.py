"""
Package initialization file for the KPI dashboard models.

Re-exports the enumerations and Pydantic schemas so other modules can
import them from kpi_dashboard.models directly:

    from kpi_dashboard.models import (
        TransactionKind,
        TransactionRow,
        TransactionReport,
    )
"""

# =============================================================================
# Enums
# =============================================================================

from kpi_dashboard.models.enums import (
    TransactionKind,
    Currency,
    CoverageBasis,
)


# =============================================================================
# Schemas
# =============================================================================

from kpi_dashboard.models.schemas import (
    # Input rows
    TransactionRow,
    # Report parts
    DailyPoint,
    ChartData,
    BrandComparisonRow,
    SlowTransaction,
    SlowTransactionSummary,
    CaseVolumeRow,
    # Report and envelope
    TransactionReport,
    ReportResponse,
)


__all__ = [
    # Enums
    "TransactionKind",
    "Currency",
    "CoverageBasis",
    # Schemas
    "TransactionRow",
    "DailyPoint",
    "ChartData",
    "BrandComparisonRow",
    "SlowTransaction",
    "SlowTransactionSummary",
    "CaseVolumeRow",
    "TransactionReport",
    "ReportResponse",
]
