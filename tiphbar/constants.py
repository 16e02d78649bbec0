from enum import Enum, IntEnum


APP_NAME = "TipHBAR"
APP_DESCRIPTION = "Micro-tipping platform for creators"
APP_ICON_URL = "https://tiphbar.app/icon.png"

DEFAULT_TIP_MEMO = "Tip via TipHBAR"
# The ledger rejects transaction memos longer than this many encoded bytes.
MAX_MEMO_BYTES = 100

TINYBARS_PER_HBAR = 100_000_000
HBAR_DECIMAL_PLACES = 8
# Total HBAR in existence, no single amount can exceed it.
MAX_HBAR_SUPPLY = 50_000_000_000

# Seconds. The extension call includes the time the user spends on the approval prompt.
DEFAULT_EXTENSION_TIMEOUT = 120.0
DEFAULT_MIRROR_NODE_TIMEOUT = 10.0
DEFAULT_IDENTITY_SERVICE_TIMEOUT = 10.0


class WalletConnectionState(IntEnum):
    DISCONNECTED = 0
    CONNECTING = 1
    CONNECTED = 2


class AccountVerificationResult(IntEnum):
    VERIFIED = 0
    # The candidate does not have the `shard.realm.number` form, no request was made.
    INVALID_FORMAT = 1
    # The mirror node answered and does not know the account.
    NOT_FOUND = 2
    # The mirror node could not be reached, timed out or failed on its side.
    NETWORK_ERROR = 3


class TipStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class NotificationSeverity(IntEnum):
    INFO = 0
    WARNING = 1
    ERROR = 2
