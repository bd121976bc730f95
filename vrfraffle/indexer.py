"""Persist raffle notifications for external querying."""

from __future__ import annotations

import logging
from typing import Optional

from alembic.runtime.migration import MigrationContext
from sqlalchemy import func, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .draw.notifications import (
    DrawRequested,
    Notification,
    RaffleEntered,
    WinnerPicked,
)
from .models import DrawRecord, RaffleEventRecord

logger = logging.getLogger(__name__)


class NotificationIndexer:
    """Channel subscriber that writes every notification to the database.

    Each notification is stored in its own transaction as a
    :class:`RaffleEventRecord`. Draw notifications additionally open and close
    the matching :class:`DrawRecord`.

    Examples
    --------
    >>> indexer = NotificationIndexer(index_sessionmaker(make_engine()))
    >>> machine.channel.subscribe(indexer)
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def __call__(self, notification: Notification) -> None:
        with self._session_factory.begin() as session:
            session.add(self._event_record(notification))
            if isinstance(notification, DrawRequested):
                session.add(
                    DrawRecord(
                        request_id=notification.request_id,
                        subscription_id=notification.subscription_id,
                        requested_at=notification.emitted_at,
                    )
                )
            elif isinstance(notification, WinnerPicked):
                self._complete_draw(session, notification)

    @staticmethod
    def _event_record(notification: Notification) -> RaffleEventRecord:
        record = RaffleEventRecord(
            kind=notification.kind, emitted_at=notification.emitted_at
        )
        if isinstance(notification, RaffleEntered):
            record.participant = notification.participant
            record.payment = str(notification.payment)
        elif isinstance(notification, DrawRequested):
            record.subscription_id = notification.subscription_id
            record.request_id = notification.request_id
        elif isinstance(notification, WinnerPicked):
            record.request_id = notification.request_id
            record.winner = notification.winner
            record.prize = str(notification.prize)
        return record

    @staticmethod
    def _complete_draw(session: Session, notification: WinnerPicked) -> None:
        draw = DrawRecord.get_by_request_id(session, notification.request_id)
        if draw is None:
            # The indexer was subscribed after the draw was requested.
            logger.warning(
                f"No draw record for request {notification.request_id}; "
                "winner stored as event only"
            )
            return
        draw.status = "resolved"
        draw.winner = notification.winner
        draw.prize = str(notification.prize)
        draw.resolved_at = notification.emitted_at


def draw_history(session: Session, limit: int = 5) -> list[DrawRecord]:
    """Return the most recent draws, newest first.

    Raises
    ------
    ValueError
        If ``limit`` is not positive.
    """
    if limit <= 0:
        raise ValueError("limit must be a positive integer")
    stmt = (
        select(DrawRecord)
        .order_by(DrawRecord.requested_at.desc(), DrawRecord.id.desc())
        .limit(limit)
    )
    return list(session.scalars(stmt).all())


def events_for_request(
    session: Session, request_id: str, kind: Optional[str] = None
) -> list[RaffleEventRecord]:
    """Return the notifications recorded for ``request_id`` in emission order."""
    stmt = select(RaffleEventRecord).where(RaffleEventRecord.request_id == request_id)
    if kind is not None:
        stmt = stmt.where(RaffleEventRecord.kind == kind)
    stmt = stmt.order_by(RaffleEventRecord.emitted_at.asc(), RaffleEventRecord.id.asc())
    return list(session.scalars(stmt).all())


def index_status(engine: Engine) -> dict:
    """Report the migration revision of the index and how full its tables are.

    Returns a dict with ``revision`` (``None`` when no migration has been
    applied) and ``tables``, mapping each index table name to its row count,
    or to ``None`` when the table does not exist.
    """
    with engine.connect() as connection:
        revision = MigrationContext.configure(connection).get_current_revision()
        existing = set(inspect(connection).get_table_names())
        tables: dict[str, Optional[int]] = {}
        for table in (RaffleEventRecord.__table__, DrawRecord.__table__):
            if table.name not in existing:
                tables[table.name] = None
                continue
            tables[table.name] = connection.scalar(
                select(func.count()).select_from(table)
            )
    return {"revision": revision, "tables": tables}


__all__ = ["NotificationIndexer", "draw_history", "events_for_request", "index_status"]
