"""Treasury allocation adjuster and action fee schedule.

When the treasurer pays withdrawal fees, every unit withdrawn from a stream
costs the treasury an extra percentage. Allocating the whole spare balance to
streams would leave nothing to cover those fees, so the allocation is reduced
until the fee on it fits in what stays unallocated.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config.schema import FeeSettings
from ..constants import CLIFF_PERCENT_DENOMINATOR, CLIFF_PERCENT_NUMERATOR, MspAction
from ..errors import AccountingError
from ..model.records import TreasuryRecord
from .arith import checked_u64, mul_div

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionFees:
    """Fees for one action, in SOL and percent."""
    blockchain_fee: float  # SOL
    msp_flat_fee: float  # SOL
    msp_percent_fee: float  # Percent of the amount moved (0.25 = 0.25%)


def calculate_action_fees(action: MspAction, schedule: Optional[FeeSettings] = None) -> TransactionFees:
    """
    Look up the fees charged for a program action.

    Args:
        action: Program action
        schedule: Fee schedule (defaults to the built-in schedule)

    Returns:
        TransactionFees with the blockchain fee converted to SOL
    """
    schedule = schedule or FeeSettings()
    fee = schedule.for_action(MspAction(action))
    return TransactionFees(
        blockchain_fee=fee.blockchain_fee_lamports / schedule.lamports_per_sol,
        msp_flat_fee=fee.msp_flat_fee,
        msp_percent_fee=fee.msp_percent_fee,
    )


def fee_numerator(fee_percent: float) -> int:
    """Percent fee scaled to the 1_000_000 denominator (0.25% -> 2_500)."""
    return int(round(fee_percent * CLIFF_PERCENT_NUMERATOR))


def get_valid_treasury_allocation(
    treasury: TreasuryRecord,
    allocation: int,
    fee_percent: Optional[float] = None,
    schedule: Optional[FeeSettings] = None,
) -> int:
    """
    Largest allocation whose later withdrawal fee the treasury can still cover.

    Args:
        treasury: Treasury record funding the stream
        allocation: Amount the treasurer wants to add, in token units
        fee_percent: Withdrawal fee percent (defaults to the schedule's
            withdraw fee)
        schedule: Fee schedule used when fee_percent is not given

    Returns:
        Safe allocation in token units

    Raises:
        AccountingError: If allocation or fee_percent is negative
    """
    if allocation < 0:
        raise AccountingError(f"Allocation must be non-negative, got {allocation}")
    if fee_percent is None:
        fee_percent = calculate_action_fees(MspAction.WITHDRAW, schedule).msp_percent_fee
    if fee_percent < 0:
        raise AccountingError(f"Fee percent must be non-negative, got {fee_percent}")

    numerator = fee_numerator(fee_percent)
    denominator = CLIFF_PERCENT_DENOMINATOR

    unallocated = treasury.unallocated_balance
    if unallocated < 0:
        logger.warning(
            "Treasury allocation (%d) exceeds balance (%d); treating unallocated balance as 0",
            treasury.allocation_assigned_units,
            treasury.last_known_balance_units,
        )
        unallocated = 0

    candidate = checked_u64(int(allocation) + unallocated, "treasury_allocation")
    base_allocation = mul_div(candidate, denominator, numerator + denominator, "base_allocation")
    fee_amount = mul_div(base_allocation, numerator, denominator, "fee_amount")

    if unallocated >= fee_amount:
        return base_allocation

    return candidate - fee_amount
