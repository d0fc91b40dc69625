"""Cliff & rate calculator - how fast a stream vests and what vests up front."""

from typing import Optional

from ..constants import CLIFF_PERCENT_DENOMINATOR
from ..model.records import StreamRecord
from .arith import mul_div, saturating_sub


def has_zero_rate(record: StreamRecord) -> bool:
    """True for non-continuous streams (nothing vests over time)."""
    return record.rate_interval_seconds == 0 or record.rate_amount_units == 0


def units_per_second(record: StreamRecord) -> int:
    """
    Streaming rate in whole units per second.

    Truncates like the on-chain program; a zero interval yields 0.
    """
    if record.rate_interval_seconds == 0:
        return 0
    return record.rate_amount_units // record.rate_interval_seconds


def cliff_amount(record: StreamRecord) -> int:
    """
    Units vested immediately at start.

    Legacy streams may store the cliff as a percent (scaled by 10_000);
    when set it takes precedence over the flat amount.
    """
    if record.cliff_vest_percent > 0:
        return mul_div(
            record.cliff_vest_percent,
            record.allocation_assigned_units,
            CLIFF_PERCENT_DENOMINATOR,
            "cliff_amount",
        )
    return record.cliff_vest_amount_units


def streamable_units(record: StreamRecord) -> int:
    """Allocation left to stream after the cliff."""
    return saturating_sub(record.allocation_assigned_units, cliff_amount(record))


def streaming_seconds(record: StreamRecord) -> Optional[int]:
    """Seconds needed to stream the whole streamable allocation (None at zero rate)."""
    if has_zero_rate(record):
        return None
    return mul_div(
        streamable_units(record),
        record.rate_interval_seconds,
        record.rate_amount_units,
        "streaming_seconds",
    )


def streamed_units(record: StreamRecord, seconds: int) -> int:
    """
    Units streamed (excluding the cliff) after the given streaming seconds.

    Args:
        record: Stream record
        seconds: Seconds of actual streaming (pauses already removed)

    Returns:
        Streamed units, capped at the streamable allocation
    """
    if has_zero_rate(record) or seconds <= 0:
        return 0

    total_seconds = streaming_seconds(record)
    if seconds > total_seconds:
        return streamable_units(record)

    return mul_div(
        record.rate_amount_units,
        seconds,
        record.rate_interval_seconds,
        "streamed_units",
    )
