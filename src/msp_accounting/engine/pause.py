"""Pause accounting for manually and automatically paused streams."""

import logging

from ..model.records import StreamRecord
from .arith import saturating_sub

logger = logging.getLogger(__name__)


def is_manually_paused(record: StreamRecord) -> bool:
    """A manual stop newer than the last manual resume."""
    return (
        record.last_manual_stop_block_time != 0
        and record.last_manual_stop_block_time > record.last_manual_resume_block_time
    )


def total_seconds_paused(record: StreamRecord) -> int:
    """
    Seconds spent paused since start.

    The counter is only updated on resume, so an ongoing manual pause is not
    included yet. Callers must not add the current pause on top.
    """
    return record.last_known_total_seconds_in_paused_status


def remaining_allocation(record: StreamRecord) -> int:
    """Allocation not yet withdrawn, clamped at zero."""
    remaining = record.allocation_assigned_units - record.total_withdrawals_units
    if remaining < 0:
        logger.warning(
            "Stream withdrawals (%d) exceed allocation (%d); clamping remaining allocation to 0",
            record.total_withdrawals_units,
            record.allocation_assigned_units,
        )
        return 0
    return remaining


def actual_streamed_seconds(record: StreamRecord, now: int) -> int:
    """Elapsed seconds since start minus recorded paused seconds."""
    seconds_since_start = now - record.start_utc_seconds
    return saturating_sub(seconds_since_start, total_seconds_paused(record))


def withdrawable_while_paused(record: StreamRecord) -> int:
    """
    Withdrawable balance of a paused stream.

    A manual pause freezes the balance at the snapshot taken when the stream
    was stopped. An automatic pause means the allocation ran out, so the whole
    remaining allocation is withdrawable.
    """
    remaining = remaining_allocation(record)
    if is_manually_paused(record):
        amount = record.last_manual_stop_withdrawable_units_snap
    else:
        amount = remaining
    return max(0, min(amount, remaining))
