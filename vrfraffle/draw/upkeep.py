"""Decides whether a draw is due."""

from __future__ import annotations

import logging
from datetime import datetime

from .round import RaffleState, Round

logger = logging.getLogger(__name__)

# Reserved for callers that want to hand data from the check to the trigger.
EMPTY_PERFORM_DATA = b""


def check_upkeep(round_: Round, now: datetime) -> tuple[bool, bytes]:
    """Return whether a draw is due together with an auxiliary payload.

    A draw is due when all of the following hold:

    1. the round is open,
    2. at least ``draw_interval`` has elapsed since the last draw,
    3. the round has participants,
    4. the pool is positive.

    The function has no side effects and may be polled at any frequency.
    The payload is currently always empty.
    """
    is_open = round_.state is RaffleState.OPEN
    interval_elapsed = now - round_.last_draw_timestamp >= round_.draw_interval
    has_participants = len(round_.participants) > 0
    has_pool = round_.pool > 0
    due = is_open and interval_elapsed and has_participants and has_pool

    logger.debug(
        f"Upkeep check: open={is_open} interval_elapsed={interval_elapsed} "
        f"participants={has_participants} pool={has_pool} -> due={due}"
    )
    return due, EMPTY_PERFORM_DATA


def is_draw_due(round_: Round, now: datetime) -> bool:
    """Return only the boolean part of :func:`check_upkeep`."""
    due, _ = check_upkeep(round_, now)
    return due


__all__ = ["EMPTY_PERFORM_DATA", "check_upkeep", "is_draw_due"]
