"""
Pydantic request/response models for the KPI dashboard backend.

This module provides the data contracts between the row-fetch layer, the
aggregation engine and the HTTP handlers:

- TransactionRow: one normalized deposit/withdraw record as read from the store
- TransactionReport and its parts: the aggregate tree returned to the dashboard
- ReportResponse: the {success, data} envelope sent over HTTP

Field names are camelCase because they are serialized unchanged into the
JSON consumed by the Next.js front end.

All models use Pydantic v2 syntax.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Input Rows
# =============================================================================


class TransactionRow(BaseModel):
    """
    One transaction record fetched for the query window.

    Values are kept close to what the store returned. The aggregation engine
    applies every default (brand "UNKNOWN", amount 0, customer "N/A") itself,
    so a row with every optional field missing is still valid input.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "date": "2024-01-01",
                "durationRaw": "00:01:30",
                "operatorGroup": "Automation",
                "brand": "BRAND-A",
                "amount": 150.0,
                "customerName": "john.doe",
                "completed": None,
            }
        }
    )

    date: Optional[str] = Field(
        default=None,
        description="Business day as stored (YYYY-MM-DD); used as an opaque grouping key"
    )
    durationRaw: Any = Field(
        default=None,
        description="Processing duration as stored: 'HH:MM:SS[.mmm]' text or a number of seconds"
    )
    operatorGroup: Optional[str] = Field(
        default=None,
        description="Operator tag; contains 'automation' and/or 'staff' markers"
    )
    brand: Optional[str] = Field(
        default=None,
        description="Brand / line identifier"
    )
    amount: Any = Field(
        default=None,
        description="Monetary amount; coerced to float by the engine, 0 when unparseable"
    )
    customerName: Optional[str] = Field(
        default=None,
        description="Customer display name"
    )
    completed: Optional[str] = Field(
        default=None,
        description="Completion timestamp display string, when the table carries one"
    )


# =============================================================================
# Report Parts
# =============================================================================


class DailyPoint(BaseModel):
    """Transaction count for one business day."""
    model_config = ConfigDict(frozen=True)

    date: str
    count: int = 0


class ChartData(BaseModel):
    """
    Per-day maps keyed by the date string, feeding the dashboard line charts.

    coverageRate is None when the profile does not report coverage.
    """
    model_config = ConfigDict(frozen=True)

    overdueTrans: Dict[str, int] = Field(default_factory=dict)
    avgProcessingTime: Dict[str, float] = Field(default_factory=dict)
    coverageRate: Optional[Dict[str, float]] = None
    transactionVolume: Dict[str, int] = Field(default_factory=dict)


class BrandComparisonRow(BaseModel):
    """Per-brand metrics; avgTime and coverageRate rounded to one decimal."""
    model_config = ConfigDict(frozen=True)

    brand: str
    avgTime: float = 0.0
    coverageRate: Optional[float] = None
    totalTransaction: int = 0
    totalAutomation: int = 0
    totalOverdue: int = 0


class SlowTransaction(BaseModel):
    """An overdue automation transaction, formatted for the slow-transaction table."""
    model_config = ConfigDict(frozen=True)

    brand: str
    customerName: str = "N/A"
    amount: float = 0.0
    processingTime: float = Field(
        ...,
        description="Processing time in seconds, rounded to one decimal"
    )
    completed: str = ""
    date: Optional[str] = None
    operatorGroup: str = ""


class SlowTransactionSummary(BaseModel):
    """Headline figures over the scanned slow transactions."""
    model_config = ConfigDict(frozen=True)

    totalSlowTransaction: int = 0
    avgProcessingTime: float = 0.0
    brand: str = Field(
        default="N/A",
        description="Brand with the most slow transactions; first seen wins ties"
    )


class CaseVolumeRow(BaseModel):
    """Share of a brand's automation transactions that went overdue, in percent."""
    model_config = ConfigDict(frozen=True)

    brand: str
    totalCase: float = 0.0
    totalTransAutomation: int = 0
    totalOverdue: int = 0


# =============================================================================
# Report
# =============================================================================


class TransactionReport(BaseModel):
    """
    Complete aggregate report for one request.

    Built fresh by the aggregation engine from the rows of a single request
    and never mutated afterwards. Optional parts (coverageRate, caseVolume)
    are None when the aggregation profile disables them.
    """
    model_config = ConfigDict(frozen=True)

    totalTransaction: int = 0
    totalTransAutomation: int = 0
    avgProcessingTime: float = 0.0
    overdueCount: int = 0
    coverageRate: Optional[float] = None
    dailyData: List[DailyPoint] = Field(default_factory=list)
    chartData: ChartData = Field(default_factory=ChartData)
    brandComparison: List[BrandComparisonRow] = Field(default_factory=list)
    slowTransactions: List[SlowTransaction] = Field(default_factory=list)
    slowTransactionSummary: SlowTransactionSummary = Field(default_factory=SlowTransactionSummary)
    caseVolume: Optional[List[CaseVolumeRow]] = None

    def to_response_data(self, overdue_field: str = "overdueCount") -> Dict[str, Any]:
        """
        Serialize for the HTTP response.

        Parts the profile disables (coverage rates, case volume) are dropped
        rather than sent as null. Other fields keep their keys even when
        empty, so a slow transaction without a date still carries
        "date": null. The overdue total is published under the profile's
        field name (for example overdueOver60s) that the dashboard reads.

        Args:
            overdue_field: Key to publish overdueCount under.

        Returns:
            JSON-ready dict.
        """
        data = self.model_dump()
        if data["coverageRate"] is None:
            del data["coverageRate"]
        if data["chartData"]["coverageRate"] is None:
            del data["chartData"]["coverageRate"]
        for brand in data["brandComparison"]:
            if brand["coverageRate"] is None:
                del brand["coverageRate"]
        if data["caseVolume"] is None:
            del data["caseVolume"]
        if overdue_field != "overdueCount":
            data[overdue_field] = data.pop("overdueCount")
        return data


# =============================================================================
# HTTP Envelope
# =============================================================================


class ReportResponse(BaseModel):
    """
    Response envelope for the deposit/withdraw data endpoints.

    Matches the shape the dashboard has always consumed:
        {"success": true, "data": {...}}
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "data": {
                    "totalTransaction": 1,
                    "totalTransAutomation": 1,
                    "avgProcessingTime": 45.0,
                    "overdueOver60s": 0,
                    "coverageRate": 100.0,
                },
            }
        }
    )

    success: bool = True
    data: Dict[str, Any] = Field(default_factory=dict)
