"""Tests for record validation, legacy normalization and the time source."""

import logging

import pytest
import sys
import os
from datetime import datetime, timezone

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pydantic import ValidationError

from msp_accounting.constants import U64_MAX, Category, SubCategory, TreasuryType
from msp_accounting.engine.clock import ChainTimeReference
from msp_accounting.errors import AccountingError
from msp_accounting.model.records import (
    StreamRecord,
    StreamTemplate,
    Timestamp,
    TreasuryRecord,
    as_stream_record,
)


class TestTimestamp:
    """Explicit timestamp constructors."""

    def test_from_seconds(self):
        assert Timestamp.from_seconds(1_700_000_000).epoch_seconds == 1_700_000_000

    def test_from_millis_truncates(self):
        assert Timestamp.from_millis(1_700_000_000_999).epoch_seconds == 1_700_000_000

    def test_from_raw_seconds(self):
        """Ten digits or fewer are seconds."""
        assert Timestamp.from_raw(1_700_000_000).epoch_seconds == 1_700_000_000

    def test_from_raw_legacy_millis(self):
        """More than ten digits are legacy milliseconds."""
        assert Timestamp.from_raw(1_700_000_000_123).epoch_seconds == 1_700_000_000

    def test_from_raw_custom_threshold(self):
        assert Timestamp.from_raw(1_700_000_000_123, max_seconds_digits=13).epoch_seconds == 1_700_000_000_123

    def test_to_datetime(self):
        ts = Timestamp(1_700_000_000)
        assert ts.to_datetime() == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert ts.isoformat() == "2023-11-14T22:13:20+00:00"

    def test_to_datetime_out_of_range(self):
        with pytest.raises(AccountingError, match="outside the representable date range"):
            Timestamp(2**63).to_datetime()


class TestStreamRecord:
    """Stream record validation."""

    def test_defaults(self):
        record = StreamRecord()
        assert record.allocation_assigned_units == 0
        assert record.category == Category.DEFAULT
        assert record.name == ""

    def test_explicit_start_seconds(self):
        record = StreamRecord.from_account({'start_utc_seconds': 1_700_000_000})
        assert record.start_utc_seconds == 1_700_000_000

    def test_start_in_seconds_preferred(self):
        """The newer seconds field wins over the legacy start_utc."""
        record = StreamRecord.from_account({
            'start_utc_in_seconds': 1_700_000_500,
            'start_utc': 1_600_000_000_000,
        })
        assert record.start_utc_seconds == 1_700_000_500

    def test_legacy_start_millis(self):
        record = StreamRecord.from_account({
            'start_utc_in_seconds': 0,
            'start_utc': 1_600_000_000_000,
        })
        assert record.start_utc_seconds == 1_600_000_000

    def test_legacy_start_seconds(self):
        record = StreamRecord.from_account({'start_utc': 1_600_000_000})
        assert record.start_utc_seconds == 1_600_000_000

    def test_legacy_threshold_override(self):
        record = StreamRecord.from_account({'start_utc': 1_600_000_000_000}, max_seconds_digits=13)
        assert record.start_utc_seconds == 1_600_000_000_000

    def test_created_on_normalized(self):
        record = StreamRecord.from_account({'created_on_utc': 1_650_000_000_000})
        assert record.created_on_utc == 1_650_000_000

    def test_effective_created_falls_back_to_start(self):
        record = StreamRecord(start_utc_seconds=1_600_000_000)
        assert record.effective_created_on_utc.epoch_seconds == 1_600_000_000

    def test_name_from_bytes(self):
        record = StreamRecord.from_account({'name': b'Payroll\x00\x00\x00'})
        assert record.name == "Payroll"

    def test_name_from_byte_list(self):
        record = StreamRecord.from_account({'name': list(b'Seed round') + [0] * 22})
        assert record.name == "Seed round"

    def test_rejects_negative_counter(self):
        with pytest.raises(ValidationError):
            StreamRecord(allocation_assigned_units=-1)

    def test_rejects_counter_beyond_u64(self):
        with pytest.raises(ValidationError):
            StreamRecord(total_withdrawals_units=U64_MAX + 1)

    def test_accepts_u64_max(self):
        assert StreamRecord(allocation_assigned_units=U64_MAX).allocation_assigned_units == U64_MAX

    def test_frozen(self):
        record = StreamRecord()
        with pytest.raises(ValidationError):
            record.allocation_assigned_units = 10

    def test_unknown_fields_ignored(self):
        record = StreamRecord.from_account({'allocation_assigned_units': 10, 'padding': [0, 0]})
        assert record.allocation_assigned_units == 10

    def test_cliff_percent_human(self):
        assert StreamRecord(cliff_vest_percent=125_000).cliff_vest_percent_human == 12.5

    def test_vesting_category(self):
        record = StreamRecord.from_account({'category': 1, 'sub_category': 8})
        assert record.category == Category.VESTING
        assert record.sub_category == SubCategory.TEAM

    def test_as_stream_record(self):
        record = StreamRecord(allocation_assigned_units=5)
        assert as_stream_record(record) is record
        assert as_stream_record({'allocation_assigned_units': 5}) == record


class TestTreasuryRecord:
    """Treasury record validation."""

    def test_unallocated_balance(self):
        treasury = TreasuryRecord(last_known_balance_units=100, allocation_assigned_units=40)
        assert treasury.unallocated_balance == 60

    def test_unallocated_balance_can_be_negative(self):
        treasury = TreasuryRecord(last_known_balance_units=10, allocation_assigned_units=40)
        assert treasury.unallocated_balance == -30

    def test_created_on_normalized(self):
        treasury = TreasuryRecord.from_account({'created_on_utc': 1_650_000_000_000})
        assert treasury.created_on_utc == 1_650_000_000
        assert treasury.created_on.epoch_seconds == 1_650_000_000

    def test_treasury_type(self):
        assert TreasuryRecord.from_account({'treasury_type': 1}).treasury_type == TreasuryType.LOCK

    def test_too_many_labels(self):
        with pytest.raises(ValidationError):
            TreasuryRecord(labels=["a", "b", "c", "d", "e", "f"])

    def test_bump_range(self):
        with pytest.raises(ValidationError):
            TreasuryRecord(bump=256)


class TestStreamTemplate:
    """Vesting template."""

    def test_layout_field_name(self):
        template = StreamTemplate.from_account({
            'start_utc_in_seconds': 1_700_000_000,
            'duration_number_of_units': 12,
        })
        assert template.start_utc_seconds == 1_700_000_000
        assert template.start_utc.epoch_seconds == 1_700_000_000


class TestChainTimeReference:
    """Time source adapter."""

    def test_drift(self):
        reference = ChainTimeReference(block_time=1_000, local_time=1_060)
        assert reference.drift == 60

    def test_effective_now_follows_chain_clock(self):
        reference = ChainTimeReference(block_time=1_000, local_time=1_060)
        assert reference.effective_now(1_060) == 1_000
        assert reference.effective_now(2_060) == 2_000

    def test_effective_now_uses_clock(self):
        reference = ChainTimeReference(block_time=1_000, local_time=1_000, clock=lambda: 1_500.7)
        assert reference.effective_now() == 1_500

    def test_capture(self):
        reference = ChainTimeReference.capture(1_000, clock=lambda: 990)
        assert reference.local_time == 990
        assert reference.drift == -10

    def test_capture_warns_on_drift(self, caplog):
        with caplog.at_level(logging.WARNING, logger="msp_accounting"):
            ChainTimeReference.capture(1_000, clock=lambda: 2_000, drift_warning_seconds=300)
        assert "differs from chain time" in caplog.text

    def test_capture_quiet_within_threshold(self, caplog):
        with caplog.at_level(logging.WARNING, logger="msp_accounting"):
            ChainTimeReference.capture(1_000, clock=lambda: 1_100, drift_warning_seconds=300)
        assert caplog.text == ""
