"""Engine and session factory for the notification index."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .utils import resolve_sqlite_url

load_dotenv()
# Project root directory (repo root)
ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_DB_URL = "sqlite:///./dev.db"


def configured_database_url() -> str:
    """Return ``DB_URL`` with relative sqlite paths anchored at the repo root."""
    return resolve_sqlite_url(os.getenv("DB_URL", DEFAULT_DB_URL), ROOT_DIR)


def _echo_from_env() -> bool:
    return os.getenv("DB_ECHO", "").strip().lower() in {"1", "true", "yes", "on"}


def make_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """Create the engine the :class:`~vrfraffle.indexer.NotificationIndexer` writes through.

    The indexer runs inside ``publish``, on whichever thread admitted,
    triggered or resolved, so sqlite connections are not pinned to the thread
    that opened them. An in-memory sqlite database shares one connection
    across threads, since every new connection would see an empty database.
    Server databases get ``pool_pre_ping`` because the upkeep loop may sit
    idle longer than the server keeps connections open.

    Parameters
    ----------
    database_url : str, optional
        Overrides ``DB_URL``.
    echo : bool, optional
        Log emitted SQL. Defaults to the ``DB_ECHO`` environment variable.
    """
    url = make_url(database_url or configured_database_url())
    if echo is None:
        echo = _echo_from_env()

    options: dict = {}
    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = True

    return create_engine(url, echo=echo, future=True, **options)


def index_sessionmaker(engine: Engine) -> sessionmaker:
    """Session factory handed to the indexer and the draw history queries."""
    return sessionmaker(
        bind=engine,
        # Draw records are read back after the writing transaction has closed.
        expire_on_commit=False,
        future=True,
    )
