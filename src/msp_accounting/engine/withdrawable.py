"""Withdrawable amount calculator."""

from ..constants import StreamStatus
from ..model.records import StreamRecord
from .pause import remaining_allocation, withdrawable_while_paused
from .rates import has_zero_rate
from .status import entitled_units, get_stream_status


def get_withdrawable_amount(record: StreamRecord, now: int) -> int:
    """
    Units the beneficiary can withdraw at ``now``.

    Args:
        record: Stream record
        now: Chain-relative time in seconds

    Returns:
        Withdrawable units, always within [0, remaining allocation]
    """
    remaining = remaining_allocation(record)
    if remaining == 0:
        return 0

    status = get_stream_status(record, now)

    if status == StreamStatus.SCHEDULED:
        return 0

    if status == StreamStatus.PAUSED:
        return withdrawable_while_paused(record)

    # Running without a streaming rate: nothing accrues over time
    if has_zero_rate(record):
        return 0

    earned = max(entitled_units(record, now), record.total_withdrawals_units)
    return min(remaining, earned - record.total_withdrawals_units)


def get_funds_left_in_stream(record: StreamRecord, now: int) -> int:
    """Allocated units that are neither withdrawn nor withdrawable yet."""
    left = remaining_allocation(record) - get_withdrawable_amount(record, now)
    return max(0, left)


def get_funds_sent_to_beneficiary(record: StreamRecord, now: int) -> int:
    """Units already withdrawn plus units withdrawable now."""
    return record.total_withdrawals_units + get_withdrawable_amount(record, now)
