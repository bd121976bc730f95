"""Append-only outbound notification channel for raffle events."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, ClassVar, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RaffleEntered:
    """A participant was admitted into the current round."""

    kind: ClassVar[str] = "entered"

    participant: str
    payment: int
    emitted_at: datetime


@dataclass(frozen=True)
class DrawRequested:
    """Randomness was requested for the current round."""

    kind: ClassVar[str] = "draw_requested"

    subscription_id: str
    request_id: str
    emitted_at: datetime


@dataclass(frozen=True)
class WinnerPicked:
    """A winner was picked and paid the pool."""

    kind: ClassVar[str] = "winner_picked"

    winner: str
    request_id: str
    prize: int
    emitted_at: datetime


Notification = Union[RaffleEntered, DrawRequested, WinnerPicked]
Subscriber = Callable[[Notification], None]


class NotificationChannel:
    """Publishes notifications to subscribers and keeps every one published.

    Subscribers are observers only. An exception raised by a subscriber is
    logged and does not reach the publisher.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._history: list[Notification] = []
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        with self._lock:
            try:
                self._subscribers.remove(subscriber)
            except ValueError:
                logger.debug(f"Subscriber {subscriber!r} was not registered")

    @property
    def history(self) -> tuple[Notification, ...]:
        """Every notification published so far, oldest first."""
        with self._lock:
            return tuple(self._history)

    def publish(self, notification: Notification) -> None:
        with self._lock:
            self._history.append(notification)
            subscribers = list(self._subscribers)

        for subscriber in subscribers:
            try:
                subscriber(notification)
            except Exception as e:
                logger.error(
                    f"Subscriber {subscriber!r} failed to handle {notification.kind}: {e}"
                )


__all__ = [
    "DrawRequested",
    "Notification",
    "NotificationChannel",
    "RaffleEntered",
    "Subscriber",
    "WinnerPicked",
]
