"""
Enumeration definitions for the KPI dashboard backend.

All enums inherit from both `str` and `Enum` so that they serialize cleanly
through Pydantic models and can be compared directly against query-string
values.
"""

from enum import Enum


class TransactionKind(str, Enum):
    """
    Which transaction family a report is built for.

    Each kind has its own set of tables (one per currency) and its own
    aggregation profile:
    - deposit: 60 second overdue threshold, coverage rate and case volume
    - withdraw: 300 second overdue threshold, no coverage or case volume
    """
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


class Currency(str, Enum):
    """
    Market/currency selector sent by the dashboard filter bar.

    The engine never sees currency as a field; the query layer resolves it
    to the table(s) to read. ALL reads every single-currency table.
    """
    MYR = "MYR"
    SGD = "SGD"
    USC = "USC"
    ALL = "ALL"


class CoverageBasis(str, Enum):
    """
    Which rows count toward the coverage rate numerator.

    - non_staff: every row not tagged staff, (total - staff) / total
    - automation: only rows tagged automation, automation / total
    """
    NON_STAFF = "non_staff"
    AUTOMATION = "automation"
