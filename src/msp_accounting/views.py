"""Derived stream and treasury views.

A view is the client-facing snapshot of a record at one chain-relative
moment. It is rebuilt on every read and never persisted: any instruction that
changes the record (withdraw, top-up, pause, resume) makes it stale, and the
record must be fetched again before the view is trusted for a new
transaction. Between fetches a view can be refreshed from the record it
carries, keeping the clock drift observed at fetch time.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .constants import (
    CLIFF_PERCENT_DENOMINATOR,
    DEFAULT_PUBLIC_KEY,
    MAX_SAFE_INTEGER,
    Category,
    StreamStatus,
    SubCategory,
    TimeUnit,
    TreasuryType,
    ViewFlavor,
)
from .config.schema import Config
from .engine.arith import mul_div
from .engine.clock import ChainTimeReference, LocalClock
from .engine.depletion import estimated_depletion_date
from .engine.pause import is_manually_paused, remaining_allocation
from .engine.rates import cliff_amount, units_per_second
from .engine.status import get_stream_status
from .engine.withdrawable import (
    get_funds_left_in_stream,
    get_funds_sent_to_beneficiary,
    get_withdrawable_amount,
)
from .errors import AccountingError
from .model.records import (
    RecordLike,
    StreamRecord,
    StreamTemplate,
    Timestamp,
    TreasuryRecord,
    as_stream_record,
)

logger = logging.getLogger(__name__)

# Fields emitted by to_friendly()/to_raw(), in order
STREAM_VIEW_FIELDS = (
    'id',
    'name',
    'status',
    'start_utc',
    'created_on_utc',
    'created_block_time',
    'seconds_since_start',
    'estimated_depletion_date',
    'cliff_vest_amount',
    'cliff_vest_percent',
    'allocation_assigned',
    'rate_amount',
    'rate_interval_seconds',
    'units_per_second',
    'total_withdrawals_amount',
    'remaining_allocation',
    'withdrawable_amount',
    'funds_left_in_stream',
    'funds_sent_to_beneficiary',
    'is_manually_paused',
    'fee_payed_by_treasurer',
    'category',
    'sub_category',
    'last_retrieved_block_time',
    'last_retrieved_time_in_seconds',
)


def _friendly_value(value: Any, max_safe_integer: int) -> Any:
    """Project a raw value to its human-facing form."""
    if isinstance(value, StreamStatus):
        return value.name.title()
    if isinstance(value, (Category, SubCategory, TreasuryType)):
        return int(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        # Large integers cannot travel as exact JSON numbers
        return value if abs(value) <= max_safe_integer else str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _seconds_digits(config: Optional[Config]) -> Optional[int]:
    return config.time.legacy_seconds_digits if config is not None else None


def _to_datetime(timestamp: Timestamp, label: str, account_id: str) -> Optional[datetime]:
    """Datetime for display, or None when the stored time is out of range."""
    try:
        return timestamp.to_datetime()
    except AccountingError as e:
        logger.warning("Unrepresentable %s for account %s: %s", label, account_id or "<unknown>", e)
        return None


@dataclass
class DerivedStreamView:
    """Financial state of a stream at one chain-relative moment."""
    id: str
    name: str
    status: StreamStatus
    start_utc: Optional[datetime]  # None when past the datetime range
    created_on_utc: Optional[datetime]
    created_block_time: int
    seconds_since_start: int  # Negative while scheduled
    estimated_depletion_date: datetime

    cliff_vest_amount: int
    cliff_vest_percent: float  # Human percent (12.5 = 12.5%)
    allocation_assigned: int
    rate_amount: int
    rate_interval_seconds: int
    units_per_second: int
    total_withdrawals_amount: int

    remaining_allocation: int
    withdrawable_amount: int
    funds_left_in_stream: int
    funds_sent_to_beneficiary: int
    is_manually_paused: bool

    fee_payed_by_treasurer: bool
    category: Category
    sub_category: SubCategory

    time_reference: ChainTimeReference = field(repr=False)
    record: StreamRecord = field(repr=False)

    @property
    def last_retrieved_block_time(self) -> int:
        """Chain time the view is anchored to."""
        return self.time_reference.block_time

    @property
    def last_retrieved_time_in_seconds(self) -> int:
        """Local time the view is anchored to."""
        return self.time_reference.local_time

    def to_raw(self) -> Dict[str, Any]:
        """Full-width integers, enum status and datetime objects."""
        return {name: getattr(self, name) for name in STREAM_VIEW_FIELDS}

    def to_friendly(self, max_safe_integer: int = MAX_SAFE_INTEGER) -> Dict[str, Any]:
        """
        JSON-safe projection of the same values.

        Integers above ``max_safe_integer`` become decimal strings, dates
        become ISO-8601 strings and the status its name.
        """
        return {
            name: _friendly_value(value, max_safe_integer)
            for name, value in self.to_raw().items()
        }

    def project(self, flavor: ViewFlavor = ViewFlavor.FRIENDLY, **kwargs) -> Dict[str, Any]:
        """Project the view in the requested flavor."""
        if ViewFlavor(flavor) == ViewFlavor.RAW:
            return self.to_raw()
        return self.to_friendly(**kwargs)


def derive_stream_view(
    record: RecordLike,
    time_reference: ChainTimeReference,
    stream_id: Optional[str] = None,
    local_now: Optional[float] = None,
    created_block_time: Optional[int] = None,
    config: Optional[Config] = None,
) -> DerivedStreamView:
    """
    Derive the current financial state of a stream.

    Args:
        record: Stream record (or decoded account mapping)
        time_reference: Chain and local times captured when the record was fetched
        stream_id: Stream account address
        local_now: Local wall clock to evaluate at (defaults to the reference clock)
        created_block_time: Override for the creation time used for ordering
        config: Configuration (legacy timestamp threshold for decoded mappings)

    Returns:
        DerivedStreamView
    """
    record = as_stream_record(record, _seconds_digits(config))
    now = time_reference.effective_now(local_now)

    created = record.effective_created_on_utc
    if created_block_time is None:
        created_block_time = created.epoch_seconds

    return DerivedStreamView(
        id=stream_id or "",
        name=record.name,
        status=get_stream_status(record, now),
        start_utc=_to_datetime(record.start_utc, "start time", stream_id),
        created_on_utc=_to_datetime(created, "creation time", stream_id),
        created_block_time=created_block_time,
        seconds_since_start=now - record.start_utc_seconds,
        estimated_depletion_date=estimated_depletion_date(record, now),
        cliff_vest_amount=cliff_amount(record),
        cliff_vest_percent=record.cliff_vest_percent_human,
        allocation_assigned=record.allocation_assigned_units,
        rate_amount=record.rate_amount_units,
        rate_interval_seconds=record.rate_interval_seconds,
        units_per_second=units_per_second(record),
        total_withdrawals_amount=record.total_withdrawals_units,
        remaining_allocation=remaining_allocation(record),
        withdrawable_amount=get_withdrawable_amount(record, now),
        funds_left_in_stream=get_funds_left_in_stream(record, now),
        funds_sent_to_beneficiary=get_funds_sent_to_beneficiary(record, now),
        is_manually_paused=is_manually_paused(record),
        fee_payed_by_treasurer=record.fee_payed_by_treasurer,
        category=record.category,
        sub_category=record.sub_category,
        time_reference=time_reference,
        record=record,
    )


def refresh_stream_view(view: DerivedStreamView, local_now: Optional[float] = None) -> DerivedStreamView:
    """
    Re-derive a view without reading the chain again.

    The drift between local and chain clocks observed at fetch time is kept,
    so the refreshed view follows the chain's clock.
    """
    reference = view.time_reference
    if local_now is None:
        local_now = reference.clock()
    local_time = int(local_now)
    refreshed = ChainTimeReference(
        block_time=local_time - reference.drift,
        local_time=local_time,
        clock=reference.clock,
    )
    return derive_stream_view(
        view.record,
        refreshed,
        stream_id=view.id,
        local_now=local_time,
        created_block_time=view.created_block_time,
    )


def derive_stream_views(
    records: Union[Mapping[str, RecordLike], Iterable[RecordLike]],
    time_reference: ChainTimeReference,
    local_now: Optional[float] = None,
    config: Optional[Config] = None,
) -> List[DerivedStreamView]:
    """
    Derive views for a list of streams, newest first.

    Args:
        records: Records keyed by stream address, or an iterable of records
        time_reference: Time reference shared by the fetch
        local_now: Local wall clock to evaluate at
        config: Configuration (legacy timestamp threshold for decoded mappings)

    Returns:
        Views ordered by creation time, descending
    """
    if isinstance(records, Mapping):
        items = records.items()
    else:
        items = ((None, record) for record in records)

    views = [
        derive_stream_view(record, time_reference, stream_id=stream_id, local_now=local_now, config=config)
        for stream_id, record in items
    ]
    return sort_stream_views(views)


def refresh_stream_views(
    views: Sequence[DerivedStreamView],
    local_now: Optional[float] = None,
) -> List[DerivedStreamView]:
    """Refresh every view at the same local time."""
    return [refresh_stream_view(view, local_now) for view in views]


def sort_stream_views(views: Iterable[DerivedStreamView]) -> List[DerivedStreamView]:
    """Order views by creation time, newest first."""
    return sorted(views, key=lambda view: view.created_block_time, reverse=True)


@dataclass
class TreasuryView:
    """Client-facing projection of a treasury record."""
    id: str
    version: int
    initialized: bool
    name: str
    bump: int
    slot: int
    labels: List[str]
    mint: str
    auto_close: bool
    created_on_utc: str  # ISO-8601, empty when out of range
    treasury_type: TreasuryType
    treasurer: str
    associated_token: str  # Empty when unset on chain
    balance: str
    allocation_reserved: str
    allocation_assigned: str
    total_withdrawals: str
    total_streams: int
    category: Category
    sub_category: SubCategory
    record: TreasuryRecord = field(repr=False)


def derive_treasury_view(
    treasury: Union[TreasuryRecord, Dict[str, Any]],
    treasury_id: str = "",
    config: Optional[Config] = None,
) -> TreasuryView:
    """Project a treasury record into its client-facing view."""
    if not isinstance(treasury, TreasuryRecord):
        treasury = TreasuryRecord.from_account(treasury, _seconds_digits(config))

    created_on = _to_datetime(treasury.created_on, "creation time", treasury_id)

    associated_token = treasury.associated_token
    if associated_token in ("", DEFAULT_PUBLIC_KEY):
        logger.warning("Invalid treasury associated token for account: %s", treasury_id)
        associated_token = ""

    return TreasuryView(
        id=treasury_id,
        version=treasury.version,
        initialized=treasury.initialized,
        name=treasury.name,
        bump=treasury.bump,
        slot=treasury.slot,
        labels=list(treasury.labels),
        mint=treasury.mint,
        auto_close=treasury.auto_close,
        created_on_utc=created_on.isoformat() if created_on is not None else "",
        treasury_type=treasury.treasury_type,
        treasurer=treasury.treasurer,
        associated_token=associated_token,
        balance=str(treasury.last_known_balance_units),
        allocation_reserved=str(treasury.allocation_reserved_units),
        allocation_assigned=str(treasury.allocation_assigned_units),
        total_withdrawals=str(treasury.total_withdrawals_units),
        total_streams=treasury.total_streams,
        category=treasury.category,
        sub_category=treasury.sub_category,
        record=treasury,
    )


def _time_unit(seconds: int) -> Union[TimeUnit, int]:
    try:
        return TimeUnit(seconds)
    except ValueError:
        logger.warning("Template rate interval %d is not a standard time unit", seconds)
        return seconds


def get_vesting_flow_rate(
    template: StreamTemplate,
    views: Iterable[DerivedStreamView],
    total_streams: int,
) -> Tuple[int, Union[TimeUnit, int], int]:
    """
    Aggregate streaming rate of a vesting treasury.

    Args:
        template: The treasury's stream template
        views: Views of the treasury's vesting streams
        total_streams: Stream count reported by the treasury

    Returns:
        (units per template interval, template interval, total allocation)

    Raises:
        AccountingError: If the template has a zero duration
    """
    interval = _time_unit(template.rate_interval_seconds)
    if total_streams == 0:
        return 0, interval, 0

    if template.duration_number_of_units == 0:
        raise AccountingError("Stream template duration must be positive")

    total_allocation = 0
    flow_rate = 0
    for view in views:
        total_allocation += view.allocation_assigned
        if view.status != StreamStatus.RUNNING:
            continue
        if view.remaining_allocation <= 0:
            continue

        cliff = mul_div(
            view.allocation_assigned,
            template.cliff_vest_percent,
            CLIFF_PERCENT_DENOMINATOR,
            "template_cliff",
        )
        flow_rate += (view.allocation_assigned - cliff) // template.duration_number_of_units

    return flow_rate, interval, total_allocation


def capture_time_reference(
    block_time: int,
    config: Optional[Config] = None,
    clock: Optional[LocalClock] = None,
) -> ChainTimeReference:
    """Capture a time reference, warning on drift beyond the configured limit."""
    kwargs = {}
    if clock is not None:
        kwargs['clock'] = clock
    drift_warning = config.time.drift_warning_seconds if config is not None else None
    return ChainTimeReference.capture(block_time, drift_warning_seconds=drift_warning, **kwargs)
