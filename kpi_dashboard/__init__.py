"""
Transaction KPI Dashboard Backend Package.

FastAPI service layer for the financial-operations KPI dashboard. Reads
deposit/withdraw transaction rows from Postgres and turns them into the
totals, daily series, brand comparisons and slow-transaction reports the
dashboard renders.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, database, and dependencies
    - models: Pydantic schemas and enums
    - services: Duration parsing, row classification, aggregation, row fetching
    - sql: Parameterized SQL queries and table resolution
"""

__version__ = "1.0.0"
