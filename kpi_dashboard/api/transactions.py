"""
FastAPI router module for the deposit and withdraw data endpoints.

Both endpoints read transaction rows for a date window and return the
aggregated KPI report the dashboard pages render.

Key Endpoints:
- GET /deposit/data: Deposit report (60 s overdue threshold, coverage, case volume)
- GET /withdraw/data: Withdraw report (300 s overdue threshold)

Query Parameters (both endpoints):
- startDate, endDate: Inclusive window, YYYY-MM-DD (required)
- currency: MYR, SGD, USC or ALL (default MYR)
- brand: Optional brand filter, case-insensitive substring; ALL disables it

Error Handling:
- 400: Missing date range or unsupported currency, rejected before any query
- 500: Row fetch failed, or any other unexpected failure
- An empty window is not an error: the report comes back with zero totals
"""

import logging
from typing import Annotated, Optional

import asyncpg
from fastapi import APIRouter, HTTPException, Query

from kpi_dashboard.core.dependencies import DBSessionDep, SettingsDep
from kpi_dashboard.core.config import Settings
from kpi_dashboard.models.enums import Currency, TransactionKind
from kpi_dashboard.models.schemas import ReportResponse
from kpi_dashboard.services.aggregation import aggregate_transactions
from kpi_dashboard.services.profiles import build_profile
from kpi_dashboard.services.transactions import fetch_transaction_rows
from kpi_dashboard.sql.transaction_queries import (
    UnsupportedCurrencyError,
    resolve_tables,
)


# =============================================================================
# Module Configuration
# =============================================================================

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Shared Handler
# =============================================================================

async def build_report_response(
    kind: TransactionKind,
    db: asyncpg.Connection,
    settings: Settings,
    start_date: Optional[str],
    end_date: Optional[str],
    currency: Optional[str],
    brand: Optional[str],
) -> ReportResponse:
    """
    Validate parameters, fetch the window's rows and aggregate them.

    Args:
        kind: Deposit or withdraw.
        db: Database connection.
        settings: Application settings (thresholds, slow-transaction caps).
        start_date: Inclusive window start.
        end_date: Inclusive window end.
        currency: Currency selector.
        brand: Optional brand filter.

    Returns:
        ReportResponse wrapping the serialized report.

    Raises:
        HTTPException(400): Missing dates or unsupported currency.
        HTTPException(500): Row fetch failed.
    """
    if not start_date or not end_date:
        raise HTTPException(
            status_code=400,
            detail="startDate and endDate are required"
        )

    try:
        tables = resolve_tables(kind, currency)
    except UnsupportedCurrencyError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(
        f"{kind.value} data requested: tables={tables} "
        f"window={start_date.strip()}..{end_date.strip()} brand={brand or 'ALL'}"
    )

    try:
        rows = await fetch_transaction_rows(db, tables, start_date, end_date, brand)
    except (asyncpg.PostgresError, OSError) as e:
        logger.exception(f"Error fetching {kind.value} data from {tables}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch {kind.value} data: {str(e)}"
        )

    profile = build_profile(kind, settings)
    report = aggregate_transactions(rows, profile)

    return ReportResponse(
        success=True,
        data=report.to_response_data(profile.overdue_field),
    )


# =============================================================================
# Endpoint Implementations
# =============================================================================


@router.get("/deposit/data", response_model=ReportResponse)
async def get_deposit_data(
    db: DBSessionDep,
    settings: SettingsDep,
    startDate: Annotated[Optional[str], Query(description="Window start, YYYY-MM-DD")] = None,
    endDate: Annotated[Optional[str], Query(description="Window end, YYYY-MM-DD")] = None,
    currency: Annotated[Optional[str], Query(description="MYR, SGD, USC or ALL")] = Currency.MYR.value,
    brand: Annotated[Optional[str], Query(description="Brand filter; ALL for every brand")] = None,
) -> ReportResponse:
    """
    Deposit KPI report for a date window.

    Returns totals, daily series, brand comparison, slow transactions
    (automation deposits over 60 s) and per-brand case volume.
    """
    try:
        return await build_report_response(
            TransactionKind.DEPOSIT, db, settings, startDate, endDate, currency, brand
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error in deposit data API")
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(e)}"
        )


@router.get("/withdraw/data", response_model=ReportResponse)
async def get_withdraw_data(
    db: DBSessionDep,
    settings: SettingsDep,
    startDate: Annotated[Optional[str], Query(description="Window start, YYYY-MM-DD")] = None,
    endDate: Annotated[Optional[str], Query(description="Window end, YYYY-MM-DD")] = None,
    currency: Annotated[Optional[str], Query(description="MYR, SGD, USC or ALL")] = Currency.MYR.value,
    brand: Annotated[Optional[str], Query(description="Brand filter; ALL for every brand")] = None,
) -> ReportResponse:
    """
    Withdraw KPI report for a date window.

    Returns totals, daily series, brand comparison and slow transactions
    (automation withdrawals over 300 s).
    """
    try:
        return await build_report_response(
            TransactionKind.WITHDRAW, db, settings, startDate, endDate, currency, brand
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error in withdraw data API")
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(e)}"
        )
