"""Entry admission for the current round."""

from __future__ import annotations

import logging
from datetime import datetime

from .errors import InsufficientPayment, RoundNotOpen
from .notifications import NotificationChannel, RaffleEntered
from .round import RaffleState, Round

logger = logging.getLogger(__name__)


class EntryLedger:
    """Holds the participant list and pool of a :class:`Round`."""

    def __init__(self, round_: Round, channel: NotificationChannel) -> None:
        self._round = round_
        self._channel = channel

    def admit(self, participant: str, payment: int, now: datetime) -> None:
        """Admit ``participant`` into the round in exchange for ``payment``.

        The whole payment is added to the pool. Paying more than the entry fee
        is accepted and the excess is not refunded.

        Parameters
        ----------
        participant : str
            Identity of the entrant. The same identity may enter many times.
        payment : int
            Amount paid, in the smallest currency unit.
        now : datetime
            Time of admission, recorded on the notification.

        Raises
        ------
        ValueError
            If ``participant`` is empty.
        RoundNotOpen
            If the round is currently drawing, whatever the payment.
        InsufficientPayment
            If ``payment`` is below the entry fee.
        """
        if not participant:
            raise ValueError("participant must not be empty")
        if self._round.state is not RaffleState.OPEN:
            raise RoundNotOpen(self._round.state)
        if payment < self._round.entry_fee:
            raise InsufficientPayment(payment, self._round.entry_fee)

        self._round.participants.append(participant)
        self._round.pool += payment

        logger.info(
            f"Admitted {participant} with payment {payment} "
            f"(participants={len(self._round.participants)}, pool={self._round.pool})"
        )
        self._channel.publish(
            RaffleEntered(participant=participant, payment=payment, emitted_at=now)
        )


__all__ = ["EntryLedger"]
