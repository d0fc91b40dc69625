"""Typed on-chain records."""

from .records import StreamRecord, StreamTemplate, Timestamp, TreasuryRecord, as_stream_record

__all__ = [
    "StreamRecord",
    "StreamTemplate",
    "Timestamp",
    "TreasuryRecord",
    "as_stream_record",
]
