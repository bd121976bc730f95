"""Database models for indexed raffle notifications and draw history."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import Base
from ..db.utils import dt_iso

# Amounts are stored as decimal strings; a pool can exceed 64 bits.
AMOUNT_TYPE = String(78)


def _amount_or_none(value: Optional[str]) -> Optional[int]:
    return int(value) if value is not None else None


class RaffleEventRecord(Base):
    """One published raffle notification."""

    __tablename__ = "raffle_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key."""

    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    """Notification kind ("entered", "draw_requested" or "winner_picked")."""

    participant: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    payment: Mapped[Optional[str]] = mapped_column(AMOUNT_TYPE, nullable=True)
    subscription_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    request_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    winner: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    prize: Mapped[Optional[str]] = mapped_column(AMOUNT_TYPE, nullable=True)

    emitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    """Time the raffle published the notification."""

    __table_args__ = (
        CheckConstraint(
            "kind IN ('entered','draw_requested','winner_picked')", name="kind_enum"
        ),
        Index("ix_raffle_events_kind", "kind"),
        Index("ix_raffle_events_request_id", "request_id"),
    )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "participant": self.participant,
            "payment": _amount_or_none(self.payment),
            "subscription_id": self.subscription_id,
            "request_id": self.request_id,
            "winner": self.winner,
            "prize": _amount_or_none(self.prize),
            "emitted_at": dt_iso(self.emitted_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return (
            f"<RaffleEventRecord(id={self.id}, kind='{self.kind}', "
            f"request_id={self.request_id}, emitted_at={self.emitted_at})>"
        )


class DrawRecord(Base):
    """A draw from randomness request to paid winner."""

    __tablename__ = "raffle_draws"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key."""

    request_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    """Oracle correlation id of the draw."""

    subscription_id: Mapped[str] = mapped_column(String(255), nullable=False)
    """Subscription credited for the randomness request."""

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    """``"pending"`` until the winner is paid, then ``"resolved"``."""

    winner: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    prize: Mapped[Optional[str]] = mapped_column(AMOUNT_TYPE, nullable=True)

    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    resolved_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint("status IN ('pending','resolved')", name="status_enum"),
        Index("ix_raffle_draws_requested_at", "requested_at"),
    )

    def __init__(
        self,
        *,
        request_id: str,
        subscription_id: str,
        requested_at: datetime,
        status: str = "pending",
        winner: Optional[str] = None,
        prize: Optional[int] = None,
        resolved_at: Optional[datetime] = None,
    ) -> None:
        self.request_id = request_id
        self.subscription_id = subscription_id
        self.requested_at = requested_at
        self.status = status
        self.winner = winner
        self.prize = str(prize) if prize is not None else None
        self.resolved_at = resolved_at

    @classmethod
    def get_by_request_id(cls, session: Session, request_id: str) -> Optional["DrawRecord"]:
        """Return the draw with correlation id ``request_id`` if it exists."""

        return session.scalar(select(cls).where(cls.request_id == request_id))

    @property
    def prize_amount(self) -> Optional[int]:
        return _amount_or_none(self.prize)

    def to_json(self) -> dict[str, Any]:
        return {
            "request_id": self.request_id,
            "subscription_id": self.subscription_id,
            "status": self.status,
            "winner": self.winner,
            "prize": self.prize_amount,
            "requested_at": dt_iso(self.requested_at),
            "resolved_at": dt_iso(self.resolved_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return (
            f"<DrawRecord(id={self.id}, request_id='{self.request_id}', "
            f"status='{self.status}', winner={self.winner})>"
        )


__all__ = ["DrawRecord", "RaffleEventRecord"]
