"""
SQL Query Module for the KPI dashboard backend.

Provides table resolution and parameterized SQL queries for the deposit
and withdraw transaction tables, keeping data access separate from the
aggregation logic.

Example usage:
    from kpi_dashboard.sql import resolve_tables, get_transaction_window_query

    for table in resolve_tables(TransactionKind.DEPOSIT, "MYR"):
        query, params = get_transaction_window_query(table, "2024-01-01", "2024-01-31")
        rows = await conn.fetch(query, *params)
"""

from kpi_dashboard.sql.transaction_queries import (
    resolve_tables,
    get_transaction_window_query,
    get_latest_dates_query,
    UnsupportedCurrencyError,
    TRANSACTION_TABLES,
    ALL_BRANDS,
    LATEST_DATES_LIMIT,
)

__all__ = [
    'resolve_tables',
    'get_transaction_window_query',
    'get_latest_dates_query',
    'UnsupportedCurrencyError',
    'TRANSACTION_TABLES',
    'ALL_BRANDS',
    'LATEST_DATES_LIMIT',
]
