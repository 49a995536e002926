"""
Core infrastructure package for the FastAPI backend.

Provides:
- Configuration management via pydantic-settings
- Async PostgreSQL database connectivity via asyncpg
- FastAPI dependency injection utilities

Re-exports key components so other modules can write:

    from kpi_dashboard.core import get_settings, get_db_pool, DBSessionDep

instead of importing from each submodule.
"""

# =============================================================================
# Re-exports from kpi_dashboard.core.config
# =============================================================================
from kpi_dashboard.core.config import Settings, get_settings

# =============================================================================
# Re-exports from kpi_dashboard.core.database
# =============================================================================
from kpi_dashboard.core.database import init_db, close_db, get_db_pool

# =============================================================================
# Re-exports from kpi_dashboard.core.dependencies
# =============================================================================
from kpi_dashboard.core.dependencies import (
    get_db_session,
    get_settings_dependency,
    SettingsDep,
    DBSessionDep,
)

__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Database pool lifecycle (from database.py)
    'init_db',
    'close_db',
    'get_db_pool',
    # FastAPI dependency injection (from dependencies.py)
    'get_db_session',
    'get_settings_dependency',
    'SettingsDep',
    'DBSessionDep',
]
