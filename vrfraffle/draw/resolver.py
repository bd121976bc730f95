"""Turns a randomness fulfillment into a paid winner and a fresh round."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from .errors import TransferFailed, Unauthorized, UnknownRequest
from .notifications import NotificationChannel, WinnerPicked
from .round import Round

logger = logging.getLogger(__name__)


class PayoutChannel(ABC):
    """Moves the pool to the winner."""

    @abstractmethod
    def transfer(self, recipient: str, amount: int) -> None:
        """Pay ``amount`` to ``recipient``; raise on failure."""


class WinnerResolver:
    """Consumes the oracle callback for the pending randomness request."""

    def __init__(
        self,
        round_: Round,
        payout: PayoutChannel,
        channel: NotificationChannel,
        oracle_identity: str,
    ) -> None:
        self._round = round_
        self._payout = payout
        self._channel = channel
        self._oracle_identity = oracle_identity

    def resolve(
        self,
        caller: Optional[str],
        request_id: str,
        random_value: int,
        now: datetime,
    ) -> str:
        """Pick and pay the winner of the pending draw.

        Parameters
        ----------
        caller : Optional[str]
            Identity of the invoker. Only the configured oracle identity is
            accepted.
        request_id : str
            Correlation id of the fulfilled request.
        random_value : int
            Random word delivered by the oracle.
        now : datetime
            Resolution time, stored as the new last draw timestamp.

        Returns
        -------
        str
            The winner identity.

        Notes
        -----
        Every state mutation is applied before the payout:

        1. ``winner = participants[random_value % len(participants)]``.
        2. The round is reset: participants cleared, pool zeroed, state OPEN,
           last draw timestamp set to ``now``, pending request cleared and the
           winner recorded.
        3. The previously held pool is transferred to the winner.
        4. A :class:`WinnerPicked` notification is published.

        A payout that calls back into the raffle therefore only ever sees the
        fresh, open, empty round. It may enter that round, but it cannot
        start a new draw until the payout has returned.

        Raises
        ------
        Unauthorized
            If ``caller`` is not the oracle identity.
        UnknownRequest
            If no request is pending or ``request_id`` does not match it.
            A second resolution of the same id always lands here.
        ValueError
            If ``random_value`` is negative.
        TransferFailed
            If the payout raised. The round is restored to its state before
            the call, still drawing with the same pending request. Entries
            admitted while the payout was running are kept and appended to it.
        """
        if caller != self._oracle_identity:
            logger.warning(f"Rejected resolution of {request_id!r} from {caller!r}")
            raise Unauthorized(caller)

        round_ = self._round
        if round_.pending_request is None or round_.pending_request.id != request_id:
            logger.warning(
                f"Rejected resolution of {request_id!r}; "
                f"pending request is {round_.pending_request_id!r}"
            )
            raise UnknownRequest(request_id)
        if random_value < 0:
            raise ValueError("random_value must be non-negative")

        winner_index = random_value % len(round_.participants)
        winner = round_.participants[winner_index]
        prize = round_.pool

        before = round_.snapshot()
        round_.reset(now, winner)

        round_.settling = True
        try:
            self._payout.transfer(winner, prize)
        except Exception as e:
            # Entries admitted during the payout stay; they join the restored round.
            admitted, admitted_pool = list(round_.participants), round_.pool
            round_.restore(before)
            round_.carry_over(admitted, admitted_pool)
            logger.error(f"Payout of {prize} to {winner} failed: {e}")
            raise TransferFailed(winner, prize) from e
        finally:
            round_.settling = False

        logger.info(
            f"Winner {winner} picked at index {winner_index} for request "
            f"{request_id}; paid {prize}"
        )
        self._channel.publish(
            WinnerPicked(winner=winner, request_id=request_id, prize=prize, emitted_at=now)
        )
        return winner


__all__ = ["PayoutChannel", "WinnerResolver"]
