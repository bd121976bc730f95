"""Draw state machine of the raffle."""

from .errors import (
    DrawNotDue,
    InsufficientPayment,
    RaffleError,
    RoundNotOpen,
    TransferFailed,
    Unauthorized,
    UnknownRequest,
)
from .ledger import EntryLedger
from .machine import RaffleStateMachine
from .notifications import (
    DrawRequested,
    Notification,
    NotificationChannel,
    RaffleEntered,
    WinnerPicked,
)
from .requester import RandomnessOracle, RandomnessRequestParams, RandomnessRequester
from .resolver import PayoutChannel, WinnerResolver
from .round import RaffleState, RandomnessRequest, Round
from .upkeep import check_upkeep, is_draw_due

__all__ = [
    "DrawNotDue",
    "DrawRequested",
    "EntryLedger",
    "InsufficientPayment",
    "Notification",
    "NotificationChannel",
    "PayoutChannel",
    "RaffleEntered",
    "RaffleError",
    "RaffleState",
    "RaffleStateMachine",
    "RandomnessOracle",
    "RandomnessRequest",
    "RandomnessRequestParams",
    "RandomnessRequester",
    "RoundNotOpen",
    "Round",
    "TransferFailed",
    "Unauthorized",
    "UnknownRequest",
    "WinnerPicked",
    "WinnerResolver",
    "check_upkeep",
    "is_draw_due",
]
