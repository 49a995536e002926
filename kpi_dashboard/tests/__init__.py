'''
KPI Dashboard Backend Test Suite

Test Modules:
-------------
- test_duration.py: Duration parsing (HH:MM:SS text, numbers, lenient fallbacks)
- test_classification.py: Automation/staff tagging and overdue gating
- test_aggregation.py: Totals, daily series, brand comparison, slow
  transactions, case volume, profiles
- test_transaction_queries.py: Table resolution and window query building
- test_transactions.py: Row normalization, row fetching and the HTTP handlers

Running Tests:
--------------
    pip install -e ".[test]"
    pytest kpi_dashboard/tests -v
'''

__all__ = []
