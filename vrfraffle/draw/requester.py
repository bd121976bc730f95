"""Issues the randomness request that starts a draw."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from .errors import DrawNotDue
from .notifications import DrawRequested, NotificationChannel
from .round import RaffleState, RandomnessRequest, Round
from .upkeep import is_draw_due

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RandomnessRequestParams:
    """Parameters sent to the oracle with every randomness request.

    Attributes
    ----------
    key_hash : str
        Selector of the randomness source (gas lane) on the oracle side.
    subscription_id : str
        Subscription credited for the request.
    request_confirmations : int
        Confirmations the oracle waits for before answering.
    callback_gas_limit : int
        Resource limit granted to the fulfillment callback.
    num_words : int
        Number of random words requested.
    """

    key_hash: str
    subscription_id: str
    request_confirmations: int
    callback_gas_limit: int
    num_words: int = 1


class RandomnessOracle(ABC):
    """Outbound side of the oracle channel."""

    @abstractmethod
    def request_randomness(self, params: RandomnessRequestParams) -> str:
        """Submit a request and return the oracle-assigned correlation id.

        The random value is delivered later, out of band, through
        :meth:`vrfraffle.draw.machine.RaffleStateMachine.resolve`. The
        pending request is only recorded once this method has returned, so
        a fulfillment delivered from inside the call is rejected with
        :class:`~vrfraffle.draw.errors.UnknownRequest`. Implementations that
        answer synchronously must defer delivery until after they return.
        """


class RandomnessRequester:
    """Locks the round and issues exactly one outstanding randomness request."""

    def __init__(
        self,
        round_: Round,
        oracle: RandomnessOracle,
        params: RandomnessRequestParams,
        channel: NotificationChannel,
    ) -> None:
        self._round = round_
        self._oracle = oracle
        self._params = params
        self._channel = channel
        self._issued_ids: set[str] = set()

    def trigger_draw(self, now: datetime) -> str:
        """Start a draw and return the correlation id of the request.

        The upkeep condition is evaluated again here, whatever the caller
        checked before.

        Raises
        ------
        DrawNotDue
            If the upkeep condition does not hold at ``now``, or the previous
            winner is still being paid.
        RuntimeError
            If the oracle returns an empty or already used correlation id.
            Any exception raised by the oracle propagates unchanged. In both
            cases the round is left open with no pending request.
        """
        round_ = self._round
        # A winner still being paid blocks a new draw until the payout returns.
        if round_.settling or not is_draw_due(round_, now):
            raise DrawNotDue(len(round_.participants), round_.pool, round_.state)

        # The round must already read as drawing while the oracle is called.
        round_.state = RaffleState.DRAWING
        try:
            request_id = self._oracle.request_randomness(self._params)
            if not request_id:
                raise RuntimeError("Oracle returned an empty correlation id")
            if request_id in self._issued_ids:
                raise RuntimeError(
                    f"Oracle returned correlation id {request_id!r} more than once"
                )
        except Exception:
            round_.state = RaffleState.OPEN
            raise

        self._issued_ids.add(request_id)
        round_.pending_request = RandomnessRequest(id=request_id, issued_at=now)

        logger.info(
            f"Requested randomness {request_id} for {len(round_.participants)} "
            f"participants (pool={round_.pool})"
        )
        self._channel.publish(
            DrawRequested(
                subscription_id=self._params.subscription_id,
                request_id=request_id,
                emitted_at=now,
            )
        )
        return request_id


__all__ = ["RandomnessOracle", "RandomnessRequestParams", "RandomnessRequester"]
