"""
Transaction row fetching service.

Reads raw deposit/withdraw records for a date window from Postgres and
normalizes them into TransactionRow objects for the aggregation engine.

Store Column Mapping:
- date           -> date (DATE values become YYYY-MM-DD text)
- process_time   -> durationRaw
- operator_group -> operatorGroup
- line           -> brand
- amount         -> amount
- user_name / customer_name / customer / user (first non-empty) -> customerName
- completed      -> completed

Query failures (asyncpg.PostgresError, OSError) propagate to the caller; the
HTTP layer turns them into a request-level error.
"""

import logging
from datetime import date, datetime
from typing import Any, List, Mapping, Optional, Sequence

import asyncpg
from asyncpg import Connection

from kpi_dashboard.models.schemas import TransactionRow
from kpi_dashboard.sql.transaction_queries import (
    get_latest_dates_query,
    get_transaction_window_query,
)


logger = logging.getLogger(__name__)


# Columns checked, in order, for the customer display name
CUSTOMER_COLUMNS = ("user_name", "customer_name", "customer", "user")


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _as_date_text(value: Any) -> Optional[str]:
    """Render a stored date as YYYY-MM-DD text; text values pass through."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def record_to_row(record: Mapping[str, Any]) -> TransactionRow:
    """
    Normalize one store record into a TransactionRow.

    Missing columns are tolerated; the engine applies defaults for them.

    Args:
        record: asyncpg Record or any mapping keyed by column name.

    Returns:
        TransactionRow for the record.
    """
    customer = next(
        (record.get(column) for column in CUSTOMER_COLUMNS if record.get(column)),
        None,
    )
    return TransactionRow(
        date=_as_date_text(record.get("date")),
        durationRaw=record.get("process_time"),
        operatorGroup=_as_text(record.get("operator_group")),
        brand=_as_text(record.get("line")),
        amount=record.get("amount"),
        customerName=_as_text(customer),
        completed=_as_text(record.get("completed")),
    )


async def _log_latest_dates(conn: Connection, table: str) -> None:
    """
    Log the most recent dates present in a table.

    Diagnostic only: a failure here is logged and does not affect the request.
    """
    try:
        records = await conn.fetch(get_latest_dates_query(table))
    except (asyncpg.PostgresError, OSError) as e:
        logger.warning(f"Could not read latest dates from {table}: {e}")
        return

    latest = [_as_date_text(record["date"]) for record in records if record["date"]]
    if latest:
        logger.info(f"Latest dates in {table}: {latest}")
    else:
        logger.info(f"Table {table} has no dated rows")


async def fetch_transaction_rows(
    conn: Connection,
    tables: Sequence[str],
    start_date: str,
    end_date: str,
    brand: Optional[str] = None,
) -> List[TransactionRow]:
    """
    Fetch and normalize the rows of one or more tables for a date window.

    Tables are read in the given order and their rows concatenated, so a
    multi-currency request keeps a stable source order.

    Args:
        conn: Database connection.
        tables: Table names from resolve_tables().
        start_date: Inclusive start, YYYY-MM-DD.
        end_date: Inclusive end, YYYY-MM-DD.
        brand: Optional brand filter ("ALL" or empty disables it).

    Returns:
        TransactionRow list in source order.

    Raises:
        asyncpg.PostgresError: If a query fails.
        OSError: If the database is unreachable.
    """
    rows: List[TransactionRow] = []

    for table in tables:
        query, params = get_transaction_window_query(table, start_date, end_date, brand)
        records = await conn.fetch(query, *params)

        logger.info(
            f"Fetched {len(records)} records from {table} "
            f"for {start_date.strip()} to {end_date.strip()}"
        )
        if not records:
            await _log_latest_dates(conn, table)

        rows.extend(record_to_row(record) for record in records)

    return rows
