"""Depletion estimator - projected date a stream's allocation is fully vested.

Advisory only: the estimate is for display and must never gate withdrawals.
"""

import logging
from datetime import datetime

from ..errors import AccountingError
from ..model.records import StreamRecord, Timestamp
from .pause import total_seconds_paused
from .rates import streaming_seconds

logger = logging.getLogger(__name__)


def estimated_depletion_time(record: StreamRecord, now: int) -> int:
    """
    Epoch seconds at which the allocation will be fully streamed.

    Args:
        record: Stream record
        now: Chain-relative time in seconds, returned for zero-rate streams

    Returns:
        Depletion time in epoch seconds
    """
    seconds = streaming_seconds(record)
    if seconds is None:
        return now
    return record.start_utc_seconds + seconds + total_seconds_paused(record)


def estimated_depletion_date(record: StreamRecord, now: int) -> datetime:
    """Depletion time as an aware UTC datetime (``now`` if out of range)."""
    depletion = estimated_depletion_time(record, now)
    try:
        return Timestamp(depletion).to_datetime()
    except AccountingError:
        logger.warning("Depletion time %d is not representable; using now", depletion)
        return Timestamp(now).to_datetime()
