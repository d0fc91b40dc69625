"""Time source adapter - keeps re-evaluations aligned with the chain clock.

A record is fetched together with the chain's block time. Any later
evaluation without a fresh chain read shifts the local wall clock by the
drift observed at fetch time, so derived values follow the chain's notion
of "now" rather than the caller's.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

LocalClock = Callable[[], float]


def system_clock() -> float:
    """Seconds since epoch from the local wall clock."""
    return time.time()


@dataclass(frozen=True)
class ChainTimeReference:
    """Chain and local times captured at the moment a record was fetched."""
    block_time: int  # Chain time reported at fetch (seconds)
    local_time: int  # Local wall clock at fetch (seconds)
    clock: LocalClock = system_clock

    @classmethod
    def capture(
        cls,
        block_time: int,
        clock: LocalClock = system_clock,
        drift_warning_seconds: Optional[int] = None,
    ) -> 'ChainTimeReference':
        """
        Build a reference from the chain's block time and the current local time.

        Args:
            block_time: Block time reported by the chain at fetch
            clock: Local wall clock
            drift_warning_seconds: Log a warning when the absolute drift
                exceeds this many seconds

        Returns:
            ChainTimeReference
        """
        reference = cls(block_time=int(block_time), local_time=int(clock()), clock=clock)
        if drift_warning_seconds is not None and abs(reference.drift) > drift_warning_seconds:
            logger.warning(
                "Local clock differs from chain time by %d seconds", reference.drift
            )
        return reference

    @property
    def drift(self) -> int:
        """Local time minus chain time at fetch."""
        return self.local_time - self.block_time

    def effective_now(self, local_now: Optional[float] = None) -> int:
        """Chain-relative "now" for the given (or current) local time."""
        if local_now is None:
            local_now = self.clock()
        return int(local_now) - self.drift
