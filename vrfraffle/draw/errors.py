"""Errors raised by the raffle draw state machine."""

from __future__ import annotations

from typing import Optional

from .round import RaffleState


class RaffleError(Exception):
    """Base class for every failure signalled by the raffle core."""


class InsufficientPayment(RaffleError):
    def __init__(self, payment: int, entry_fee: int) -> None:
        super().__init__(f"Payment {payment} is below the entry fee {entry_fee}")
        self.payment = payment
        self.entry_fee = entry_fee


class RoundNotOpen(RaffleError):
    def __init__(self, state: RaffleState) -> None:
        super().__init__(f"Round is not accepting entries (state={state.value})")
        self.state = state


class DrawNotDue(RaffleError):
    """A draw was triggered while the upkeep condition does not hold.

    Attributes
    ----------
    participant_count : int
        Number of participants at the time of the attempt.
    pool : int
        Pool balance at the time of the attempt.
    state : RaffleState
        Round state at the time of the attempt.
    """

    def __init__(self, participant_count: int, pool: int, state: RaffleState) -> None:
        super().__init__(
            "Draw is not due "
            f"(participants={participant_count}, pool={pool}, state={state.value})"
        )
        self.participant_count = participant_count
        self.pool = pool
        self.state = state


class UnknownRequest(RaffleError):
    def __init__(self, request_id: Optional[str]) -> None:
        super().__init__(f"No pending randomness request matches id {request_id!r}")
        self.request_id = request_id


class Unauthorized(RaffleError):
    def __init__(self, caller: Optional[str]) -> None:
        super().__init__(f"Caller {caller!r} is not the designated oracle channel")
        self.caller = caller


class TransferFailed(RaffleError):
    def __init__(self, winner: str, amount: int) -> None:
        super().__init__(f"Transfer of {amount} to {winner!r} failed")
        self.winner = winner
        self.amount = amount


__all__ = [
    "RaffleError",
    "InsufficientPayment",
    "RoundNotOpen",
    "DrawNotDue",
    "UnknownRequest",
    "Unauthorized",
    "TransferFailed",
]
