"""Client-side read model for Money Streaming Program streams and treasuries."""

from .config import Config, load_config
from .constants import MspAction, StreamStatus, TimeUnit, TreasuryType
from .engine import (
    ChainTimeReference,
    calculate_action_fees,
    get_stream_status,
    get_valid_treasury_allocation,
    get_withdrawable_amount,
)
from .errors import AccountingError, ArithmeticOverflowError
from .model import StreamRecord, StreamTemplate, Timestamp, TreasuryRecord
from .views import (
    DerivedStreamView,
    TreasuryView,
    capture_time_reference,
    derive_stream_view,
    derive_stream_views,
    derive_treasury_view,
    get_vesting_flow_rate,
    refresh_stream_view,
    refresh_stream_views,
)

__version__ = "1.0.0"

__all__ = [
    "AccountingError",
    "ArithmeticOverflowError",
    "ChainTimeReference",
    "Config",
    "DerivedStreamView",
    "MspAction",
    "StreamRecord",
    "StreamStatus",
    "StreamTemplate",
    "TimeUnit",
    "Timestamp",
    "TreasuryRecord",
    "TreasuryType",
    "TreasuryView",
    "calculate_action_fees",
    "capture_time_reference",
    "derive_stream_view",
    "derive_stream_views",
    "derive_treasury_view",
    "get_stream_status",
    "get_valid_treasury_allocation",
    "get_vesting_flow_rate",
    "get_withdrawable_amount",
    "load_config",
    "refresh_stream_view",
    "refresh_stream_views",
]
