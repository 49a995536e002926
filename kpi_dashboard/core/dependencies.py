"""
FastAPI dependency injection module for the KPI dashboard backend.

Key Dependencies Provided:
- get_db_session: Async generator yielding database connections from the pool
- get_settings_dependency: Returns the cached Settings singleton
- SettingsDep: Type alias for injecting Settings into endpoints
- DBSessionDep: Type alias for injecting database connections into endpoints

Usage Examples:
    @router.get("/deposit/data")
    async def get_deposit_data(
        db: DBSessionDep,
        settings: SettingsDep
    ) -> ReportResponse:
        rows = await db.fetch("SELECT * FROM deposit WHERE date = $1", "2024-01-01")
        ...

In tests, both dependencies can be replaced through FastAPI's override hook:

    app.dependency_overrides[get_settings_dependency] = lambda: mock_settings
"""

from typing import Annotated, AsyncGenerator

from asyncpg import Connection
from fastapi import Depends

from kpi_dashboard.core.config import Settings, get_settings
from kpi_dashboard.core.database import get_db_pool


# =============================================================================
# Database Session Dependency
# =============================================================================

async def get_db_session() -> AsyncGenerator[Connection, None]:
    """
    Yield an async database connection from the pool.

    The connection is released back to the pool when the endpoint completes,
    whether it succeeded or raised.

    Yields:
        asyncpg.Connection: An active database connection from the pool.

    Raises:
        asyncpg.PostgresError: If connection acquisition fails.
    """
    pool = await get_db_pool()
    async with pool.acquire() as connection:
        yield connection


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """Return the Settings singleton; thin wrapper so tests can override it."""
    return get_settings()


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]

DBSessionDep = Annotated[Connection, Depends(get_db_session)]
