import logging
from typing import Any, Mapping, Optional

from .draw.errors import DrawNotDue
from .draw.machine import RaffleStateMachine

logger = logging.getLogger(__name__)


def perform_upkeep(machine: RaffleStateMachine) -> Optional[str]:
    """Run one automation tick against ``machine``.

    The helper is what a scheduler calls periodically:

    1. Ask the raffle whether a draw is due.
    2. If so, trigger it and return the correlation id of the request.

    ``trigger_draw`` checks the condition again under the raffle lock. If the
    round changed between the two steps the tick is skipped instead of failing.

    Returns
    -------
    Optional[str]
        The correlation id when a draw was started, otherwise ``None``.
    """
    due, _ = machine.check_upkeep()
    if not due:
        return None
    try:
        return machine.trigger_draw()
    except DrawNotDue as e:
        logger.info(f"Skipping upkeep, draw no longer due: {e}")
        return None


def deliver_fulfillment(
    machine: RaffleStateMachine,
    payload: Mapping[str, Any],
    *,
    caller: Optional[str],
) -> str:
    """Resolve a draw from an oracle fulfillment payload.

    Parameters
    ----------
    machine : RaffleStateMachine
        The raffle to resolve.
    payload : Mapping[str, Any]
        Fulfillment body of the form
        ``{"request_id": "...", "random_words": [<int>, ...]}``. Only the first
        word is used.
    caller : Optional[str]
        Authenticated identity of the sender, checked by the raffle.

    Returns
    -------
    str
        The winner identity.

    Raises
    ------
    ValueError
        If the payload is malformed.
    """
    request_id = payload.get("request_id")
    if not request_id:
        raise ValueError("Fulfillment payload did not include a request_id")

    words = payload.get("random_words")
    if not isinstance(words, (list, tuple)) or not words:
        raise ValueError("Fulfillment payload did not include random_words")
    try:
        random_value = int(words[0])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Random word {words[0]!r} is not an integer") from exc

    return machine.resolve(str(request_id), random_value, caller=caller)
