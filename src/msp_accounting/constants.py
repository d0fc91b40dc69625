"""Protocol constants and enumerations shared by records, engine and views."""

from enum import Enum, IntEnum

# Cliff and fee percentages are stored scaled by 10_000 (hundredths of a
# percent); dividing the scaled value by 1_000_000 yields a fraction.
CLIFF_PERCENT_NUMERATOR = 10_000
CLIFF_PERCENT_DENOMINATOR = 1_000_000

U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1

# Largest integer a JavaScript number represents exactly
MAX_SAFE_INTEGER = 2**53 - 1

LAMPORTS_PER_SOL = 1_000_000_000

MAX_TREASURY_LABELS = 5


class StreamStatus(IntEnum):
    """Lifecycle status of a stream, derived from time and counters."""
    SCHEDULED = 1
    RUNNING = 2
    PAUSED = 3


class TreasuryType(IntEnum):
    """Treasury flavor."""
    OPEN = 0
    LOCK = 1


class Category(IntEnum):
    """Primary category of treasury and stream accounts."""
    DEFAULT = 0
    VESTING = 1


class SubCategory(IntEnum):
    """Sub category of vesting accounts."""
    DEFAULT = 0
    ADVISOR = 1
    DEVELOPMENT = 2
    FOUNDATION = 3
    INVESTOR = 4
    MARKETING = 5
    PARTNERSHIP = 6
    SEED = 7
    TEAM = 8
    COMMUNITY = 9


class TimeUnit(IntEnum):
    """Preferred time unit, valued in seconds."""
    SECOND = 0
    MINUTE = 60
    HOUR = 3600
    DAY = 86400
    WEEK = 604800
    MONTH = 2629750
    YEAR = 31557000


class MspAction(IntEnum):
    """Program instructions that carry a fee."""
    SCHEDULE_ONE_TIME_PAYMENT = 1
    CREATE_STREAM = 2
    CREATE_STREAM_WITH_FUNDS = 3
    ADD_FUNDS = 4
    WITHDRAW = 5
    PAUSE_STREAM = 6
    RESUME_STREAM = 7
    PROPOSE_UPDATE = 8
    ANSWER_UPDATE = 9
    CREATE_TREASURY = 10
    CLOSE_STREAM = 11
    CLOSE_TREASURY = 12
    TRANSFER_STREAM = 13
    TREASURY_WITHDRAW = 14


class ViewFlavor(str, Enum):
    """Presentation flavor of a derived view."""
    FRIENDLY = "friendly"
    RAW = "raw"

# Base58 encoding of the all-zero public key
DEFAULT_PUBLIC_KEY = "11111111111111111111111111111111"
