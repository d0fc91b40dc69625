"""Stream accounting engine: pure functions of a record and chain-relative time."""

from .arith import checked_u64, mul_div, saturating_sub
from .clock import ChainTimeReference, system_clock
from .depletion import estimated_depletion_date, estimated_depletion_time
from .pause import (
    actual_streamed_seconds,
    is_manually_paused,
    remaining_allocation,
    total_seconds_paused,
    withdrawable_while_paused,
)
from .rates import (
    cliff_amount,
    has_zero_rate,
    streamable_units,
    streamed_units,
    streaming_seconds,
    units_per_second,
)
from .status import entitled_units, get_stream_status, is_auto_paused
from .treasury import (
    TransactionFees,
    calculate_action_fees,
    get_valid_treasury_allocation,
)
from .withdrawable import (
    get_funds_left_in_stream,
    get_funds_sent_to_beneficiary,
    get_withdrawable_amount,
)

__all__ = [
    # Arithmetic
    "checked_u64",
    "mul_div",
    "saturating_sub",
    # Time
    "ChainTimeReference",
    "system_clock",
    # Cliff & rate
    "cliff_amount",
    "has_zero_rate",
    "streamable_units",
    "streamed_units",
    "streaming_seconds",
    "units_per_second",
    # Pauses
    "actual_streamed_seconds",
    "is_manually_paused",
    "remaining_allocation",
    "total_seconds_paused",
    "withdrawable_while_paused",
    # Status and balances
    "entitled_units",
    "get_stream_status",
    "is_auto_paused",
    "get_withdrawable_amount",
    "get_funds_left_in_stream",
    "get_funds_sent_to_beneficiary",
    # Depletion
    "estimated_depletion_time",
    "estimated_depletion_date",
    # Treasury
    "TransactionFees",
    "calculate_action_fees",
    "get_valid_treasury_allocation",
]
