"""
Row Classifier

Tags each transaction row as automation and/or staff from its operator
group, and as overdue when an automation row took longer than the profile
threshold.

Classification Rules:
- Automation: operator group contains "automation" (case-insensitive)
- Staff: operator group contains "staff" (case-insensitive)
- The two tests are independent, so a row may be both or neither
- Overdue: automation AND duration > threshold; staff-only and untagged
  rows are never overdue, however long they took
"""

from dataclasses import dataclass
from typing import Iterable, List

from kpi_dashboard.models.schemas import TransactionRow
from kpi_dashboard.services.duration import parse_duration_seconds


AUTOMATION_MARKER = "automation"
STAFF_MARKER = "staff"


@dataclass(frozen=True)
class ClassifiedRow:
    """
    A transaction row with its parsed duration and classification flags.

    Attributes:
        row: The source row, unchanged.
        duration_seconds: Parsed processing time; 0 when unparseable.
        is_automation: Operator group carries the automation marker.
        is_staff: Operator group carries the staff marker.
        is_overdue: Automation row slower than the threshold.
    """
    row: TransactionRow
    duration_seconds: float
    is_automation: bool
    is_staff: bool
    is_overdue: bool


def classify_row(row: TransactionRow, threshold_seconds: float) -> ClassifiedRow:
    """
    Classify a single transaction row.

    Args:
        row: Transaction row as fetched.
        threshold_seconds: Durations strictly above this are overdue.

    Returns:
        ClassifiedRow for the row.
    """
    duration_seconds = parse_duration_seconds(row.durationRaw)
    operator_group = (row.operatorGroup or "").lower()

    is_automation = AUTOMATION_MARKER in operator_group
    is_staff = STAFF_MARKER in operator_group

    return ClassifiedRow(
        row=row,
        duration_seconds=duration_seconds,
        is_automation=is_automation,
        is_staff=is_staff,
        is_overdue=is_automation and duration_seconds > threshold_seconds,
    )


def classify_rows(rows: Iterable[TransactionRow], threshold_seconds: float) -> List[ClassifiedRow]:
    """Classify rows in source order."""
    return [classify_row(row, threshold_seconds) for row in rows]
