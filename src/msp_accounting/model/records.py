"""Typed on-chain records consumed by the accounting engine.

Records arrive already decoded from account bytes (by an external reader) as
plain mappings. Validation happens here, once: every counter must fit in u64,
legacy millisecond timestamps are normalized to seconds and fixed-size name
buffers are decoded. Engine formulas only ever see these normalized values.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from ..constants import (
    CLIFF_PERCENT_NUMERATOR,
    MAX_TREASURY_LABELS,
    U64_MAX,
    Category,
    SubCategory,
    TreasuryType,
)
from ..errors import AccountingError

logger = logging.getLogger(__name__)

U64 = Annotated[int, Field(ge=0, le=U64_MAX)]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

DEFAULT_SECONDS_DIGITS = 10


@dataclass(frozen=True)
class Timestamp:
    """A point in time in whole seconds since the Unix epoch."""
    epoch_seconds: int

    @classmethod
    def from_seconds(cls, seconds: int) -> 'Timestamp':
        return cls(int(seconds))

    @classmethod
    def from_millis(cls, millis: int) -> 'Timestamp':
        return cls(int(millis) // 1000)

    @classmethod
    def from_raw(cls, raw: int, max_seconds_digits: int = DEFAULT_SECONDS_DIGITS) -> 'Timestamp':
        """
        Interpret a stored integer of ambiguous unit.

        Some legacy accounts stored timestamps in milliseconds. A value with
        more than ``max_seconds_digits`` decimal digits is treated as
        milliseconds and truncated to seconds.

        Args:
            raw: Stored integer
            max_seconds_digits: Longest decimal length still read as seconds

        Returns:
            Timestamp in seconds
        """
        raw = int(raw)
        if len(str(raw)) > max_seconds_digits:
            logger.debug("Treating legacy timestamp %d as milliseconds", raw)
            return cls.from_millis(raw)
        return cls.from_seconds(raw)

    def to_datetime(self) -> datetime:
        """
        Aware UTC datetime.

        Raises:
            AccountingError: If the time lies beyond the datetime range
                (after year 9999)
        """
        try:
            return _EPOCH + timedelta(seconds=self.epoch_seconds)
        except OverflowError:
            raise AccountingError(
                f"Timestamp {self.epoch_seconds} is outside the representable date range"
            ) from None

    def isoformat(self) -> str:
        return self.to_datetime().isoformat()


def _seconds_digits(info: ValidationInfo) -> int:
    context = info.context or {}
    return int(context.get('max_seconds_digits', DEFAULT_SECONDS_DIGITS))


def _decode_name(value: Any) -> str:
    """Decode a fixed-size name buffer, dropping NUL padding."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        value = bytes(value)
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode('utf-8', errors='replace')
    return str(value).rstrip('\x00').strip()


class _Record(BaseModel):
    """Base for on-chain records: immutable, unknown fields ignored."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    @classmethod
    def from_account(cls, data: Dict[str, Any], max_seconds_digits: Optional[int] = None):
        """
        Validate a decoded account mapping.

        Args:
            data: Decoded account fields
            max_seconds_digits: Override for the legacy millisecond heuristic
                (see TimeSettings in the configuration)

        Returns:
            Validated record
        """
        context = {}
        if max_seconds_digits is not None:
            context['max_seconds_digits'] = max_seconds_digits
        return cls.model_validate(data, context=context)


class StreamRecord(_Record):
    """Stream account state.

    Counters change only through on-chain instructions (withdraw, allocate,
    pause, resume); this object is a snapshot read at a given block time.
    """
    # Streaming rate: rate_amount_units per rate_interval_seconds
    rate_amount_units: U64 = 0
    rate_interval_seconds: U64 = 0
    start_utc_seconds: U64 = 0

    # Cliff: percent (scaled by 10_000) wins over the flat amount when set
    cliff_vest_amount_units: U64 = 0
    cliff_vest_percent: U64 = 0

    allocation_assigned_units: U64 = 0
    total_withdrawals_units: U64 = 0

    # Manual pause bookkeeping (0 = never)
    last_manual_stop_block_time: U64 = 0
    last_manual_resume_block_time: U64 = 0
    last_manual_stop_withdrawable_units_snap: U64 = 0
    last_known_total_seconds_in_paused_status: U64 = 0

    # Descriptive fields carried by the account layout
    version: int = Field(default=0, ge=0)
    initialized: bool = True
    name: str = ""
    treasurer_address: str = ""
    treasury_address: str = ""
    beneficiary_address: str = ""
    beneficiary_associated_token: str = ""
    allocation_reserved_units: U64 = 0
    last_withdrawal_units: U64 = 0
    last_withdrawal_block_time: U64 = 0
    last_manual_resume_remaining_allocation_units_snap: U64 = 0
    last_auto_stop_block_time: U64 = 0
    fee_payed_by_treasurer: bool = False
    created_on_utc: U64 = 0
    category: Category = Category.DEFAULT
    sub_category: SubCategory = SubCategory.DEFAULT

    @model_validator(mode='before')
    @classmethod
    def normalize_legacy_fields(cls, data: Any, info: ValidationInfo) -> Any:
        """Resolve the effective start time and normalize legacy encodings."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        digits = _seconds_digits(info)

        start_in_seconds = data.pop('start_utc_in_seconds', None)
        legacy_start = data.pop('start_utc', None)
        if data.get('start_utc_seconds') is None:
            # Newer layouts carry an explicit seconds field; older ones only
            # have start_utc, which may be in milliseconds.
            if start_in_seconds is not None and int(start_in_seconds) > 0:
                data['start_utc_seconds'] = int(start_in_seconds)
            elif legacy_start is not None:
                data['start_utc_seconds'] = Timestamp.from_raw(legacy_start, digits).epoch_seconds

        created = data.get('created_on_utc')
        if created:
            data['created_on_utc'] = Timestamp.from_raw(created, digits).epoch_seconds
        return data

    @field_validator('name', mode='before')
    @classmethod
    def decode_name(cls, v):
        return _decode_name(v)

    @property
    def start_utc(self) -> Timestamp:
        return Timestamp(self.start_utc_seconds)

    @property
    def effective_created_on_utc(self) -> Timestamp:
        """Creation time, falling back to the start time for old accounts."""
        if self.created_on_utc > 0:
            return Timestamp(self.created_on_utc)
        return self.start_utc

    @property
    def cliff_vest_percent_human(self) -> float:
        """Cliff percent as a plain percentage (e.g. 12.5)."""
        return self.cliff_vest_percent / CLIFF_PERCENT_NUMERATOR


class TreasuryRecord(_Record):
    """Treasury account state."""
    last_known_balance_units: U64 = 0
    allocation_assigned_units: U64 = 0
    allocation_reserved_units: U64 = 0
    total_withdrawals_units: U64 = 0
    total_streams: U64 = 0

    version: int = Field(default=0, ge=0)
    initialized: bool = True
    bump: int = Field(default=0, ge=0, le=255)
    slot: U64 = 0
    name: str = ""
    treasurer: str = ""
    associated_token: str = ""
    mint: str = ""
    labels: List[str] = Field(default_factory=list, max_length=MAX_TREASURY_LABELS)
    treasury_type: TreasuryType = TreasuryType.OPEN
    auto_close: bool = False
    created_on_utc: U64 = 0
    category: Category = Category.DEFAULT
    sub_category: SubCategory = SubCategory.DEFAULT

    @field_validator('name', mode='before')
    @classmethod
    def decode_name(cls, v):
        return _decode_name(v)

    @field_validator('created_on_utc', mode='before')
    @classmethod
    def normalize_created_on(cls, v, info: ValidationInfo):
        if v is None:
            return 0
        return Timestamp.from_raw(v, _seconds_digits(info)).epoch_seconds

    @property
    def unallocated_balance(self) -> int:
        """Balance not assigned to any stream; negative in malformed states."""
        return self.last_known_balance_units - self.allocation_assigned_units

    @property
    def created_on(self) -> Timestamp:
        return Timestamp(self.created_on_utc)


class StreamTemplate(_Record):
    """Vesting treasury template shared by the streams it creates."""
    version: int = Field(default=0, ge=0)
    bump: int = Field(default=0, ge=0, le=255)
    start_utc_seconds: U64 = 0
    cliff_vest_percent: U64 = 0
    rate_interval_seconds: U64 = 0
    duration_number_of_units: U64 = 0
    fee_payed_by_treasurer: bool = False

    @model_validator(mode='before')
    @classmethod
    def accept_layout_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and 'start_utc_in_seconds' in data:
            data = dict(data)
            data.setdefault('start_utc_seconds', data.pop('start_utc_in_seconds'))
        return data

    @property
    def start_utc(self) -> Timestamp:
        return Timestamp(self.start_utc_seconds)


RecordLike = Union[StreamRecord, Dict[str, Any]]


def as_stream_record(value: RecordLike, max_seconds_digits: Optional[int] = None) -> StreamRecord:
    """Accept a validated record or a decoded mapping."""
    if isinstance(value, StreamRecord):
        return value
    return StreamRecord.from_account(value, max_seconds_digits)
