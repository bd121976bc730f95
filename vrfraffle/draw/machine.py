"""Public surface of a raffle instance."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable, Optional

from .ledger import EntryLedger
from .notifications import NotificationChannel
from .requester import RandomnessOracle, RandomnessRequester
from .resolver import PayoutChannel, WinnerResolver
from .round import RaffleState, RandomnessRequest, Round
from .upkeep import check_upkeep

if TYPE_CHECKING:
    from ..config import RaffleConfig


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RaffleStateMachine:
    """Owns the live :class:`Round` and serializes every operation on it.

    State moves ``OPEN -> DRAWING`` on a successful :meth:`trigger_draw` and
    ``DRAWING -> OPEN`` on a successful :meth:`resolve`. There is no terminal
    state. A failed operation leaves the round unchanged.

    Every public method runs under one re-entrant lock, so ``admit``,
    ``trigger_draw`` and ``resolve`` never interleave. Re-entrancy lets a
    payout performed during :meth:`resolve` call back into the raffle from
    the same thread; it then observes the already reset round.

    A pending randomness request has no timeout. If the oracle never answers,
    the round stays in ``DRAWING`` until a matching :meth:`resolve` arrives.
    """

    def __init__(
        self,
        config: "RaffleConfig",
        oracle: RandomnessOracle,
        payout: PayoutChannel,
        *,
        channel: Optional[NotificationChannel] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """Create a raffle whose first round opens now.

        Parameters
        ----------
        config : RaffleConfig
            Entry fee, interval and oracle parameters.
        oracle : RandomnessOracle
            Outbound oracle channel used to request randomness.
        payout : PayoutChannel
            Channel used to pay winners.
        channel : Optional[NotificationChannel], default: None
            Channel notifications are published to. A private one is created
            when omitted.
        clock : Optional[Clock], default: None
            Source of the current time. Defaults to UTC wall-clock time.
        """
        self._config = config
        self._clock = clock or utc_now
        self._lock = threading.RLock()
        self.channel = channel or NotificationChannel()
        self._round = Round(
            entry_fee=config.entry_fee,
            draw_interval=config.draw_interval,
            last_draw_timestamp=self._clock(),
        )
        self._ledger = EntryLedger(self._round, self.channel)
        self._requester = RandomnessRequester(
            self._round, oracle, config.randomness_params(), self.channel
        )
        self._resolver = WinnerResolver(
            self._round, payout, self.channel, config.oracle_identity
        )

    # -------- operations --------
    def admit(self, participant: str, payment: int) -> None:
        """Enter ``participant`` into the current round. See :class:`EntryLedger`."""
        with self._lock:
            self._ledger.admit(participant, payment, self._clock())

    def check_upkeep(self) -> tuple[bool, bytes]:
        with self._lock:
            return check_upkeep(self._round, self._clock())

    def is_draw_due(self) -> bool:
        due, _ = self.check_upkeep()
        return due

    def trigger_draw(self) -> str:
        """Lock the round and request randomness; return the correlation id."""
        with self._lock:
            return self._requester.trigger_draw(self._clock())

    def resolve(
        self, request_id: str, random_value: int, *, caller: Optional[str]
    ) -> str:
        """Deliver randomness for ``request_id``; return the winner.

        ``caller`` must be the configured oracle identity.
        """
        with self._lock:
            return self._resolver.resolve(
                caller, request_id, random_value, self._clock()
            )

    # -------- accessors --------
    def get_state(self) -> RaffleState:
        with self._lock:
            return self._round.state

    def get_participants(self) -> list[str]:
        with self._lock:
            return list(self._round.participants)

    def get_player(self, index: int) -> str:
        with self._lock:
            return self._round.participants[index]

    def get_number_of_players(self) -> int:
        with self._lock:
            return len(self._round.participants)

    def get_pool(self) -> int:
        with self._lock:
            return self._round.pool

    def get_recent_winner(self) -> Optional[str]:
        with self._lock:
            return self._round.recent_winner

    def get_last_draw_timestamp(self) -> datetime:
        with self._lock:
            return self._round.last_draw_timestamp

    def get_pending_request(self) -> Optional[RandomnessRequest]:
        with self._lock:
            return self._round.pending_request

    def get_entrance_fee(self) -> int:
        return self._config.entry_fee

    def get_interval(self) -> timedelta:
        return self._config.draw_interval

    def get_num_words(self) -> int:
        return self._config.num_words

    def get_request_confirmations(self) -> int:
        return self._config.request_confirmations

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<RaffleStateMachine({self._round!r})>"


__all__ = ["Clock", "RaffleStateMachine", "utc_now"]
