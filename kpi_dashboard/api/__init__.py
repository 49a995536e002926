"""
Backend API package initialization.

This package contains the FastAPI router modules for the KPI dashboard:
- transactions: Deposit and withdraw KPI report endpoints
"""

from fastapi import APIRouter

from kpi_dashboard.api.transactions import router as transactions_router

# Create main API router
api_router = APIRouter()

api_router.include_router(transactions_router, tags=["transactions"])

__all__ = [
    "api_router",
    "transactions_router",
]
