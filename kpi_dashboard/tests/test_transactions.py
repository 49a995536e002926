"""
Transactions Fetch and API Test Module

Covers:
- Normalizing store records into TransactionRow
- Fetching rows for one or several tables with a mocked asyncpg connection
- The deposit/withdraw handlers: parameter validation (400), fetch failure
  and unexpected failure (500), empty windows and full reports (200)

Handlers are called directly with a mock connection and explicit settings,
so no database or HTTP server is needed.
"""

from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

import pytest
from fastapi import HTTPException

from kpi_dashboard.api.transactions import get_deposit_data, get_withdraw_data
from kpi_dashboard.services.transactions import fetch_transaction_rows, record_to_row
from kpi_dashboard.tests.conftest import make_record


# =============================================================================
# record_to_row
# =============================================================================

class TestRecordToRow:

    def test_maps_store_columns(self):
        row = record_to_row(make_record(amount=Decimal("250.50"), completed="2024-01-01 10:00"))

        assert row.date == "2024-01-01"
        assert row.durationRaw == "00:00:45"
        assert row.operatorGroup == "Automation"
        assert row.brand == "BRAND-A"
        assert row.amount == Decimal("250.50")
        assert row.customerName == "customer01"
        assert row.completed == "2024-01-01 10:00"

    def test_date_values_become_iso_text(self):
        assert record_to_row(make_record(date=date(2024, 3, 5))).date == "2024-03-05"
        assert record_to_row(make_record(date=datetime(2024, 3, 5, 23, 59))).date == "2024-03-05"

    def test_customer_column_fallbacks(self):
        record = make_record(user_name=None, customer_name="", customer="Jane")

        assert record_to_row(record).customerName == "Jane"

    def test_missing_columns_are_tolerated(self):
        row = record_to_row({"date": "2024-01-01"})

        assert row.durationRaw is None
        assert row.operatorGroup is None
        assert row.brand is None
        assert row.customerName is None


# =============================================================================
# fetch_transaction_rows
# =============================================================================

@pytest.mark.asyncio
async def test_fetch_reads_each_table_in_order(mock_db_conn):
    mock_db_conn.fetch.side_effect = [
        [make_record(line="MYR-BRAND")],
        [make_record(line="SGD-BRAND")],
        [make_record(line="USC-BRAND")],
    ]

    rows = await fetch_transaction_rows(
        mock_db_conn, ["deposit", "deposit_sgd", "deposit_usc"], "2024-01-01", "2024-01-31"
    )

    assert [row.brand for row in rows] == ["MYR-BRAND", "SGD-BRAND", "USC-BRAND"]
    assert mock_db_conn.fetch.await_count == 3
    first_query = mock_db_conn.fetch.await_args_list[0].args
    assert 'FROM "deposit"' in first_query[0]
    assert first_query[1:] == ("2024-01-01", "2024-01-31")


@pytest.mark.asyncio
async def test_fetch_passes_brand_pattern(mock_db_conn):
    await fetch_transaction_rows(mock_db_conn, ["withdraw"], "2024-01-01", "2024-01-01", "abc")

    args = mock_db_conn.fetch.await_args_list[0].args
    assert args[1:] == ("2024-01-01", "%abc%")


@pytest.mark.asyncio
async def test_empty_window_logs_latest_dates(mock_db_conn):
    mock_db_conn.fetch.side_effect = [[], [{"date": "2023-12-31"}]]

    rows = await fetch_transaction_rows(mock_db_conn, ["deposit"], "2024-01-01", "2024-01-31")

    assert rows == []
    assert mock_db_conn.fetch.await_count == 2
    assert "ORDER BY date DESC" in mock_db_conn.fetch.await_args_list[1].args[0]


@pytest.mark.asyncio
async def test_latest_dates_failure_does_not_fail_fetch(mock_db_conn):
    mock_db_conn.fetch.side_effect = [[], OSError("connection reset")]

    rows = await fetch_transaction_rows(mock_db_conn, ["deposit"], "2024-01-01", "2024-01-31")

    assert rows == []


@pytest.mark.asyncio
async def test_fetch_failure_propagates(mock_db_conn):
    mock_db_conn.fetch.side_effect = OSError("connection refused")

    with pytest.raises(OSError):
        await fetch_transaction_rows(mock_db_conn, ["deposit"], "2024-01-01", "2024-01-31")


# =============================================================================
# HTTP handlers
# =============================================================================

async def _call(handler, conn, settings, **params):
    query = {"startDate": "2024-01-01", "endDate": "2024-01-31", "currency": "MYR", "brand": None}
    query.update(params)
    return await handler(db=conn, settings=settings, **query)


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["startDate", "endDate"])
async def test_missing_dates_rejected(mock_db_conn, test_settings, missing):
    with pytest.raises(HTTPException) as exc_info:
        await _call(get_deposit_data, mock_db_conn, test_settings, **{missing: None})

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "startDate and endDate are required"
    mock_db_conn.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_unsupported_currency_rejected(mock_db_conn, test_settings):
    with pytest.raises(HTTPException) as exc_info:
        await _call(get_withdraw_data, mock_db_conn, test_settings, currency="EUR")

    assert exc_info.value.status_code == 400
    assert "EUR" in exc_info.value.detail
    mock_db_conn.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_fetch_failure_is_500(mock_db_conn, test_settings):
    mock_db_conn.fetch.side_effect = OSError("connection refused")

    with pytest.raises(HTTPException) as exc_info:
        await _call(get_deposit_data, mock_db_conn, test_settings)

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail.startswith("Failed to fetch deposit data")


@pytest.mark.asyncio
async def test_unexpected_failure_is_500(mock_db_conn, test_settings):
    with patch(
        "kpi_dashboard.api.transactions.aggregate_transactions",
        side_effect=RuntimeError("boom"),
    ):
        with pytest.raises(HTTPException) as exc_info:
            await _call(get_withdraw_data, mock_db_conn, test_settings)

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Internal server error: boom"


@pytest.mark.asyncio
async def test_empty_window_returns_zero_report(mock_db_conn, test_settings):
    response = await _call(get_deposit_data, mock_db_conn, test_settings)

    assert response.success is True
    assert response.data["totalTransaction"] == 0
    assert response.data["overdueOver60s"] == 0
    assert response.data["coverageRate"] == 0
    assert response.data["dailyData"] == []
    assert response.data["slowTransactionSummary"]["brand"] == "N/A"


@pytest.mark.asyncio
async def test_deposit_report(mock_db_conn, test_settings, sample_records):
    mock_db_conn.fetch.return_value = sample_records

    response = await _call(get_deposit_data, mock_db_conn, test_settings)
    data = response.data

    assert data["totalTransaction"] == 3
    assert data["totalTransAutomation"] == 2
    assert data["avgProcessingTime"] == 67.5
    assert data["overdueOver60s"] == 1
    assert data["coverageRate"] == pytest.approx(200 / 3)
    assert data["dailyData"] == [
        {"date": "2024-01-01", "count": 2},
        {"date": "2024-01-02", "count": 1},
    ]
    assert [s["customerName"] for s in data["slowTransactions"]] == ["customer02"]
    assert data["slowTransactions"][0]["amount"] == 100.0
    assert data["slowTransactionSummary"] == {
        "totalSlowTransaction": 1,
        "avgProcessingTime": 90.0,
        "brand": "BRAND-A",
    }
    assert [c["brand"] for c in data["caseVolume"]] == ["BRAND-A", "BRAND-B"]


@pytest.mark.asyncio
async def test_withdraw_report(mock_db_conn, test_settings, sample_records):
    mock_db_conn.fetch.return_value = sample_records

    response = await _call(get_withdraw_data, mock_db_conn, test_settings)
    data = response.data

    assert data["totalTransaction"] == 3
    assert data["overdueOver300s"] == 0
    assert data["slowTransactions"] == []
    assert "coverageRate" not in data
    assert "caseVolume" not in data


@pytest.mark.asyncio
async def test_dateless_slow_transaction_keeps_date_key(mock_db_conn, test_settings):
    mock_db_conn.fetch.return_value = [make_record(date=None, process_time='00:02:00')]

    response = await _call(get_deposit_data, mock_db_conn, test_settings)
    dumped = response.model_dump()

    assert dumped == {"success": True, "data": response.data}
    assert dumped["data"]["slowTransactions"][0]["date"] is None
    assert dumped["data"]["dailyData"] == []


@pytest.mark.asyncio
async def test_all_currencies_aggregate_together(mock_db_conn, test_settings):
    mock_db_conn.fetch.side_effect = [
        [make_record(line="A")],
        [make_record(line="B")],
        [make_record(line="C")],
    ]

    response = await _call(get_deposit_data, mock_db_conn, test_settings, currency="ALL")

    assert response.data["totalTransaction"] == 3
    assert {b["brand"] for b in response.data["brandComparison"]} == {"A", "B", "C"}


@pytest.mark.asyncio
async def test_threshold_comes_from_settings(mock_db_conn, test_settings, sample_records):
    mock_db_conn.fetch.return_value = sample_records
    settings = test_settings.model_copy(update={"deposit_overdue_threshold_seconds": 30})

    response = await _call(get_deposit_data, mock_db_conn, settings)

    assert response.data["overdueOver60s"] == 2
