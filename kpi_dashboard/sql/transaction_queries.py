"""
Transaction Queries Module for the KPI dashboard backend.

Provides table resolution and parameterized PostgreSQL queries for reading
deposit and withdraw rows for a date window.

Tables (one per transaction kind and currency):

| Kind     | MYR      | SGD          | USC          |
|----------|----------|--------------|--------------|
| deposit  | deposit  | deposit_sgd  | deposit_usc  |
| withdraw | withdraw | withdraw_sgd | withdraw_usc |

Table names are only ever taken from this mapping; they are interpolated
into the SQL because identifiers cannot be bound as parameters. All values
(dates, brand pattern) are bound as $n parameters.

The `date` column is compared as text in YYYY-MM-DD form, so the same query
works whether the column is TEXT or DATE.
"""

from typing import Any, Dict, List, Optional, Tuple

from kpi_dashboard.models.enums import Currency, TransactionKind


# =============================================================================
# CONSTANTS
# =============================================================================

TRANSACTION_TABLES: Dict[TransactionKind, Dict[Currency, str]] = {
    TransactionKind.DEPOSIT: {
        Currency.MYR: "deposit",
        Currency.SGD: "deposit_sgd",
        Currency.USC: "deposit_usc",
    },
    TransactionKind.WITHDRAW: {
        Currency.MYR: "withdraw",
        Currency.SGD: "withdraw_sgd",
        Currency.USC: "withdraw_usc",
    },
}

# Brand filter value meaning "no filter"
ALL_BRANDS: str = "ALL"

# Rows sampled when logging the latest dates of an empty window
LATEST_DATES_LIMIT: int = 10


class UnsupportedCurrencyError(ValueError):
    """Raised when a currency selector has no backing table."""


# =============================================================================
# TABLE RESOLUTION
# =============================================================================

def resolve_tables(kind: TransactionKind, currency: Optional[str]) -> List[str]:
    """
    Resolve a currency selector to the table(s) holding its rows.

    Args:
        kind: Deposit or withdraw.
        currency: MYR, SGD, USC or ALL (case-insensitive).

    Returns:
        Table names in read order; ALL returns MYR, SGD, USC.

    Raises:
        UnsupportedCurrencyError: If the currency is missing or unknown.
    """
    normalized = (currency or "").strip().upper()
    try:
        selected = Currency(normalized)
    except ValueError:
        supported = ", ".join(c.value for c in Currency)
        raise UnsupportedCurrencyError(
            f"Unsupported currency '{currency}'. Supported: {supported}"
        )

    tables = TRANSACTION_TABLES[kind]
    if selected == Currency.ALL:
        return [tables[Currency.MYR], tables[Currency.SGD], tables[Currency.USC]]
    return [tables[selected]]


# =============================================================================
# WINDOW QUERY
# =============================================================================

def get_transaction_window_query(
    table: str,
    start_date: str,
    end_date: str,
    brand: Optional[str] = None,
) -> Tuple[str, List[Any]]:
    """
    Generate the query fetching every row of a table within a date window.

    Args:
        table: Table name from resolve_tables().
        start_date: Inclusive start, YYYY-MM-DD.
        end_date: Inclusive end, YYYY-MM-DD.
        brand: Optional brand filter; case-insensitive substring match on
            the `line` column. None, empty or "ALL" disables the filter.

    Returns:
        (query, params) ready for asyncpg's fetch().

    Note:
        - A single-day window uses an equality match
        - Start and end are trimmed before comparison
    """
    start = start_date.strip()
    end = end_date.strip()

    params: List[Any] = []
    if start == end:
        params.append(start)
        conditions = ["CAST(date AS TEXT) = $1"]
    else:
        params.extend([start, end])
        conditions = ["CAST(date AS TEXT) >= $1", "CAST(date AS TEXT) <= $2"]

    if brand and brand.strip() and brand.strip() != ALL_BRANDS:
        params.append(f"%{brand.strip()}%")
        conditions.append(f"line ILIKE ${len(params)}")

    query = f"""
        SELECT *
        FROM "{table}"
        WHERE {" AND ".join(conditions)}
    """
    return query, params


def get_latest_dates_query(table: str, limit: int = LATEST_DATES_LIMIT) -> str:
    """
    Generate the diagnostic query listing the most recent dates in a table.

    Used only for logging when a window comes back empty, to show whether
    the table has data at all and how far it reaches.
    """
    return f"""
        SELECT date
        FROM "{table}"
        ORDER BY date DESC
        LIMIT {int(limit)}
    """
