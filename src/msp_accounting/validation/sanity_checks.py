"""Sanity checks for records and derived stream views."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..constants import StreamStatus
from ..model.records import StreamRecord
from ..views import DerivedStreamView


@dataclass
class ValidationWarning:
    """A validation warning with severity and message."""
    severity: str  # "warning" or "error"
    category: str  # e.g., "record", "conservation", "bounds"
    message: str
    details: Optional[str] = None


def validate_conservation(view: DerivedStreamView) -> Tuple[bool, Optional[str]]:
    """
    Validate that allocated funds are fully accounted for:
    Allocation = Withdrawable + Left in stream + Withdrawn

    Returns:
        (is_valid, error_message)
    """
    allocation = view.allocation_assigned
    withdrawn = view.total_withdrawals_amount
    if withdrawn > allocation:
        # Counters are inconsistent; the clamps make the identity unreachable
        return True, None

    computed = view.withdrawable_amount + view.funds_left_in_stream + withdrawn
    if computed != allocation:
        return False, (
            f"Conservation violation for stream {view.id or '<unknown>'}: "
            f"Allocation={allocation}, Sum={computed} "
            f"(withdrawable={view.withdrawable_amount}, "
            f"left={view.funds_left_in_stream}, withdrawn={withdrawn})"
        )
    return True, None


class ViewSanityChecker:
    """Run sanity checks on stream records and their derived views."""

    def check_record(self, record: StreamRecord) -> List[ValidationWarning]:
        """
        Check a record for counters the program should never produce.

        Returns:
            List of validation warnings
        """
        warnings = []

        if record.total_withdrawals_units > record.allocation_assigned_units:
            warnings.append(ValidationWarning(
                severity="error",
                category="record",
                message="Withdrawals exceed allocation",
                details=(
                    f"Withdrawn: {record.total_withdrawals_units:,}, "
                    f"Allocated: {record.allocation_assigned_units:,}"
                )
            ))

        if record.rate_amount_units > 0 and record.rate_interval_seconds == 0:
            warnings.append(ValidationWarning(
                severity="warning",
                category="record",
                message="Rate amount set without a rate interval; stream will not vest over time",
                details=f"Rate amount: {record.rate_amount_units:,}"
            ))

        if record.cliff_vest_percent > 0 and record.cliff_vest_amount_units > 0:
            warnings.append(ValidationWarning(
                severity="warning",
                category="record",
                message="Both cliff percent and cliff amount are set; percent takes precedence",
                details=(
                    f"Percent: {record.cliff_vest_percent_human}%, "
                    f"Amount: {record.cliff_vest_amount_units:,}"
                )
            ))

        if record.last_manual_stop_withdrawable_units_snap > record.allocation_assigned_units:
            warnings.append(ValidationWarning(
                severity="warning",
                category="bounds",
                message="Pause snapshot exceeds allocation",
                details=f"Snapshot: {record.last_manual_stop_withdrawable_units_snap:,}"
            ))

        return warnings

    def check_view(self, view: DerivedStreamView) -> List[ValidationWarning]:
        """
        Check a derived view for issues.

        Args:
            view: Derived stream view

        Returns:
            List of validation warnings
        """
        warnings = []

        if view.withdrawable_amount > view.remaining_allocation:
            warnings.append(ValidationWarning(
                severity="error",
                category="bounds",
                message="Withdrawable amount exceeds remaining allocation",
                details=f"Withdrawable: {view.withdrawable_amount:,}, Remaining: {view.remaining_allocation:,}"
            ))

        negatives = [
            ("withdrawable_amount", view.withdrawable_amount),
            ("remaining_allocation", view.remaining_allocation),
            ("funds_left_in_stream", view.funds_left_in_stream),
        ]
        for name, value in negatives:
            if value < 0:
                warnings.append(ValidationWarning(
                    severity="error",
                    category="bounds",
                    message=f"{name} went negative",
                    details=f"Value: {value:,}"
                ))

        is_valid, error_msg = validate_conservation(view)
        if not is_valid:
            warnings.append(ValidationWarning(
                severity="error",
                category="conservation",
                message="Conservation law violated",
                details=error_msg
            ))

        if view.status == StreamStatus.SCHEDULED and view.withdrawable_amount > 0:
            warnings.append(ValidationWarning(
                severity="error",
                category="bounds",
                message="Scheduled stream reports a withdrawable amount",
                details=f"Withdrawable: {view.withdrawable_amount:,}"
            ))

        return warnings


def validate_stream_views(views: Sequence[DerivedStreamView]) -> List[ValidationWarning]:
    """
    Run all validation checks on a list of views.

    Args:
        views: Derived stream views

    Returns:
        List of all validation warnings
    """
    checker = ViewSanityChecker()
    warnings = []
    for view in views:
        warnings.extend(checker.check_record(view.record))
        warnings.extend(checker.check_view(view))
    return warnings
