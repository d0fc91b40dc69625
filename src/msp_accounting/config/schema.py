"""Pydantic schema for configuration validation."""

import hashlib
import json
from typing import Any, Dict, Literal

from pydantic import BaseModel, Field, field_validator

from ..constants import LAMPORTS_PER_SOL, MAX_SAFE_INTEGER, MspAction


class ActionFee(BaseModel):
    """Fees charged for a single program action."""
    blockchain_fee_lamports: int = Field(ge=0, default=0, description="Network fee in lamports")
    msp_flat_fee: float = Field(ge=0, default=0.0, description="Flat protocol fee in SOL")
    msp_percent_fee: float = Field(
        ge=0, le=100, default=0.0,
        description="Protocol fee as a percent of the amount moved (e.g. 0.25 = 0.25%)"
    )


def default_action_fees() -> Dict[str, ActionFee]:
    """Fee schedule currently charged by the program."""
    return {
        "create_treasury": ActionFee(blockchain_fee_lamports=15_000_000, msp_flat_fee=0.00001),
        "create_stream": ActionFee(blockchain_fee_lamports=15_000_000, msp_flat_fee=0.00001),
        "create_stream_with_funds": ActionFee(blockchain_fee_lamports=20_000_000, msp_flat_fee=0.000035),
        "schedule_one_time_payment": ActionFee(blockchain_fee_lamports=15_000_000, msp_flat_fee=0.000035),
        "add_funds": ActionFee(msp_flat_fee=0.000025),
        "withdraw": ActionFee(blockchain_fee_lamports=5_000_000, msp_percent_fee=0.25),
        "close_stream": ActionFee(msp_flat_fee=0.00001, msp_percent_fee=0.25),
        "close_treasury": ActionFee(msp_flat_fee=0.00001),
        "transfer_stream": ActionFee(blockchain_fee_lamports=5_000, msp_flat_fee=0.00001),
        "treasury_withdraw": ActionFee(msp_percent_fee=0.25),
    }


class FeeSettings(BaseModel):
    """Protocol fee schedule."""
    lamports_per_sol: int = Field(gt=0, default=LAMPORTS_PER_SOL, description="Lamports in one SOL")
    actions: Dict[str, ActionFee] = Field(
        default_factory=default_action_fees,
        description="Fees keyed by lowercase action name (e.g. 'withdraw')"
    )

    @field_validator('actions')
    @classmethod
    def validate_action_names(cls, v):
        """Only known program actions may carry fees."""
        known = {action.name.lower() for action in MspAction}
        unknown = sorted(set(v) - known)
        if unknown:
            raise ValueError(f"Unknown MSP actions in fee schedule: {', '.join(unknown)}")
        return v

    def for_action(self, action: MspAction) -> ActionFee:
        """Fees for an action; unconfigured actions are free."""
        return self.actions.get(action.name.lower(), ActionFee())

    @property
    def withdraw_percent_fee(self) -> float:
        """Percent fee charged on withdrawals."""
        return self.for_action(MspAction.WITHDRAW).msp_percent_fee


class TimeSettings(BaseModel):
    """Timestamp normalization and clock drift."""
    legacy_seconds_digits: int = Field(
        ge=1, default=10,
        description="Stored timestamps longer than this many digits are read as milliseconds"
    )
    drift_warning_seconds: int = Field(
        ge=0, default=300,
        description="Warn when local and chain clocks differ by more than this"
    )


class ViewSettings(BaseModel):
    """Presentation of derived views."""
    max_safe_integer: int = Field(
        gt=0, default=MAX_SAFE_INTEGER,
        description="Largest integer emitted as a number in friendly views"
    )


class LoggingSettings(BaseModel):
    """Logging setup."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    format: str = Field(default="%(asctime)s %(levelname)s %(name)s: %(message)s")

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        """Accept lowercase level names."""
        return v.upper() if isinstance(v, str) else v


class Config(BaseModel):
    """Complete configuration for the accounting engine."""
    fees: FeeSettings = Field(default_factory=FeeSettings)
    time: TimeSettings = Field(default_factory=TimeSettings)
    views: ViewSettings = Field(default_factory=ViewSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def compute_hash(self) -> str:
        """Compute config hash for reproducibility."""
        config_dict = self.model_dump()
        config_str = json.dumps(config_dict, sort_keys=True)
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create config from dictionary."""
        return cls(**(data or {}))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump()
