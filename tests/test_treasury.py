"""Tests for the treasury allocation adjuster and the action fee schedule."""

import logging

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from msp_accounting.config.schema import ActionFee, FeeSettings
from msp_accounting.constants import MspAction
from msp_accounting.engine.treasury import (
    TransactionFees,
    calculate_action_fees,
    fee_numerator,
    get_valid_treasury_allocation,
)
from msp_accounting.errors import AccountingError
from msp_accounting.model.records import TreasuryRecord


class TestActionFees:
    """Fee schedule lookup."""

    def test_withdraw_fees(self):
        fees = calculate_action_fees(MspAction.WITHDRAW)
        assert isinstance(fees, TransactionFees)
        assert fees.blockchain_fee == pytest.approx(0.005)
        assert fees.msp_flat_fee == 0.0
        assert fees.msp_percent_fee == 0.25

    def test_create_stream_with_funds_fees(self):
        fees = calculate_action_fees(MspAction.CREATE_STREAM_WITH_FUNDS)
        assert fees.blockchain_fee == pytest.approx(0.02)
        assert fees.msp_flat_fee == pytest.approx(0.000035)

    def test_transfer_stream_fees(self):
        fees = calculate_action_fees(MspAction.TRANSFER_STREAM)
        assert fees.blockchain_fee == pytest.approx(0.000005)

    def test_unlisted_action_is_free(self):
        fees = calculate_action_fees(MspAction.PAUSE_STREAM)
        assert fees == TransactionFees(0.0, 0.0, 0.0)

    def test_custom_schedule(self):
        schedule = FeeSettings(actions={'withdraw': ActionFee(msp_percent_fee=1.0)})
        assert calculate_action_fees(MspAction.WITHDRAW, schedule).msp_percent_fee == 1.0
        assert calculate_action_fees(MspAction.CREATE_STREAM, schedule).msp_flat_fee == 0.0

    def test_fee_numerator(self):
        """0.25% scaled to the 1_000_000 denominator."""
        assert fee_numerator(0.25) == 2_500
        assert fee_numerator(0) == 0


class TestValidTreasuryAllocation:
    """Fee-aware allocation adjuster."""

    def test_no_spare_balance_reduces_allocation(self):
        """Adding 50 to a treasury with nothing unallocated yields less than 50."""
        treasury = TreasuryRecord(last_known_balance_units=40, allocation_assigned_units=40)
        result = get_valid_treasury_allocation(treasury, 50, fee_percent=0.25)
        assert result < 50
        assert result == 49

    def test_fee_carved_out_of_candidate(self):
        """Without spare balance the fee comes out of the allocation itself."""
        treasury = TreasuryRecord(last_known_balance_units=0, allocation_assigned_units=0)
        # base = 1_000_000 * 1_000_000 // 1_002_500 = 997_506
        # fee  = 997_506 * 2_500 // 1_000_000 = 2_493
        assert get_valid_treasury_allocation(treasury, 1_000_000, fee_percent=0.25) == 997_507

    def test_spare_balance_covers_fee(self):
        """Spare balance alone covers the fee on the base allocation."""
        treasury = TreasuryRecord(last_known_balance_units=1_000_000, allocation_assigned_units=0)
        assert get_valid_treasury_allocation(treasury, 0, fee_percent=0.25) == 997_506

    def test_fee_never_exceeds_spare_balance(self):
        treasury = TreasuryRecord(last_known_balance_units=500_000, allocation_assigned_units=490_000)
        allocation = 1_000_000
        result = get_valid_treasury_allocation(treasury, allocation, fee_percent=0.25)
        candidate = allocation + treasury.unallocated_balance
        fee = result * 2_500 // 1_000_000
        assert result + fee <= candidate

    def test_zero_fee_allocates_everything(self):
        treasury = TreasuryRecord(last_known_balance_units=100, allocation_assigned_units=40)
        assert get_valid_treasury_allocation(treasury, 50, fee_percent=0) == 110

    def test_negative_unallocated_clamped(self, caplog):
        treasury = TreasuryRecord(last_known_balance_units=10, allocation_assigned_units=40)
        with caplog.at_level(logging.WARNING, logger="msp_accounting"):
            result = get_valid_treasury_allocation(treasury, 50, fee_percent=0.25)
        assert result == 49
        assert "exceeds balance" in caplog.text

    def test_default_fee_from_schedule(self):
        treasury = TreasuryRecord(last_known_balance_units=0, allocation_assigned_units=0)
        assert get_valid_treasury_allocation(treasury, 1_000_000) == 997_507

    def test_fee_from_custom_schedule(self):
        treasury = TreasuryRecord()
        schedule = FeeSettings(actions={'withdraw': ActionFee()})
        assert get_valid_treasury_allocation(treasury, 1_000, schedule=schedule) == 1_000

    def test_rejects_negative_allocation(self):
        with pytest.raises(AccountingError):
            get_valid_treasury_allocation(TreasuryRecord(), -1, fee_percent=0.25)

    def test_rejects_negative_fee(self):
        with pytest.raises(AccountingError):
            get_valid_treasury_allocation(TreasuryRecord(), 10, fee_percent=-0.1)
