"""Stream status state machine.

Status is never stored on chain. It is recomputed from the record and the
chain-relative "now" exactly like the program's ``stream.get_status()``:

    now < start                      -> SCHEDULED
    manually paused                  -> PAUSED
    allocation > cliff + streamed    -> RUNNING
    otherwise (allocation exhausted) -> PAUSED (auto-paused)
"""

from ..constants import StreamStatus
from ..model.records import StreamRecord
from .pause import actual_streamed_seconds, is_manually_paused
from .rates import cliff_amount, streamed_units


def entitled_units(record: StreamRecord, now: int) -> int:
    """
    Units earned by the beneficiary up to ``now``.

    The cliff plus everything streamed while not paused. Equivalent to the
    non-stop earnings minus what would have streamed during recorded pauses,
    floored at zero.

    Args:
        record: Stream record
        now: Chain-relative time in seconds

    Returns:
        Earned units (withdrawn or not)
    """
    if now < record.start_utc_seconds:
        return 0
    streamed = streamed_units(record, actual_streamed_seconds(record, now))
    return cliff_amount(record) + streamed


def get_stream_status(record: StreamRecord, now: int) -> StreamStatus:
    """Derive the lifecycle status of a stream at ``now``."""
    if now < record.start_utc_seconds:
        return StreamStatus.SCHEDULED

    if is_manually_paused(record):
        return StreamStatus.PAUSED

    if record.allocation_assigned_units > entitled_units(record, now):
        return StreamStatus.RUNNING

    return StreamStatus.PAUSED


def is_auto_paused(record: StreamRecord, now: int) -> bool:
    """Paused because the allocation is exhausted, not by the treasurer."""
    return (
        get_stream_status(record, now) == StreamStatus.PAUSED
        and not is_manually_paused(record)
    )
