"""Round state shared by the draw components."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional


class RaffleState(str, enum.Enum):
    """Lifecycle states of a raffle round."""

    OPEN = "open"
    DRAWING = "drawing"


@dataclass(frozen=True)
class RandomnessRequest:
    """Outstanding randomness request issued to the oracle.

    Attributes
    ----------
    id : str
        Correlation id assigned by the oracle.
    issued_at : datetime
        Time the request was issued.
    """

    id: str
    issued_at: datetime


@dataclass
class Round:
    """The single live round of a raffle instance.

    ``pending_request`` is set exactly while ``state`` is
    :attr:`RaffleState.DRAWING`, except during the oracle call that issues it.
    ``settling`` is true while the winner of the previous draw is being paid.
    """

    entry_fee: int
    draw_interval: timedelta
    last_draw_timestamp: datetime
    state: RaffleState = RaffleState.OPEN
    pool: int = 0
    participants: list[str] = field(default_factory=list)
    pending_request: Optional[RandomnessRequest] = None
    recent_winner: Optional[str] = None
    settling: bool = False

    @property
    def pending_request_id(self) -> Optional[str]:
        if self.pending_request is None:
            return None
        return self.pending_request.id

    def snapshot(self) -> "Round":
        """Return an independent copy used to roll back a failed operation."""
        return Round(
            entry_fee=self.entry_fee,
            draw_interval=self.draw_interval,
            last_draw_timestamp=self.last_draw_timestamp,
            state=self.state,
            pool=self.pool,
            participants=list(self.participants),
            pending_request=self.pending_request,
            recent_winner=self.recent_winner,
        )

    def restore(self, snapshot: "Round") -> None:
        """Overwrite every mutable field with the values held by ``snapshot``."""
        self.state = snapshot.state
        self.pool = snapshot.pool
        self.participants = list(snapshot.participants)
        self.pending_request = snapshot.pending_request
        self.recent_winner = snapshot.recent_winner
        self.last_draw_timestamp = snapshot.last_draw_timestamp

    def carry_over(self, participants: list[str], pool: int) -> None:
        """Append entries admitted into a round that was later rolled back."""
        self.participants.extend(participants)
        self.pool += pool

    def reset(self, now: datetime, winner: str) -> None:
        """Start a fresh round after ``winner`` has been picked."""
        self.participants = []
        self.pool = 0
        self.state = RaffleState.OPEN
        self.last_draw_timestamp = now
        self.pending_request = None
        self.recent_winner = winner

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return (
            f"<Round(state={self.state.value}, participants={len(self.participants)}, "
            f"pool={self.pool}, pending_request_id={self.pending_request_id})>"
        )


__all__ = ["RaffleState", "RandomnessRequest", "Round"]
