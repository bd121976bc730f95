from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .raffle import DrawRecord, RaffleEventRecord  # noqa: F401

__all__ = [
    "Base",
    "DrawRecord",
    "RaffleEventRecord",
]
