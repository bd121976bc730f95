from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory

from vrfraffle.db.engine import make_engine
from vrfraffle.indexer import index_status

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _alembic_config() -> Config:
    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return alembic_cfg


def upgrade_db(target_revision: str = "head") -> None:
    """Apply Alembic migrations up to the requested revision."""
    command.upgrade(_alembic_config(), target_revision)


def head_revision() -> Optional[str]:
    return ScriptDirectory.from_config(_alembic_config()).get_current_head()


def print_index_status() -> None:
    """Print the schema revision and the row counts of the raffle index tables."""
    status = index_status(make_engine())
    head = head_revision()
    revision = status["revision"]
    if revision == head:
        note = "up to date"
    else:
        note = f"head is {head}"
    print(f"Index schema revision: {revision or '<none>'} ({note})")
    for name, count in status["tables"].items():
        print(f"  {name}: {'missing' if count is None else f'{count} rows'}")


def main() -> None:
    """Migrate the raffle index database and report its state."""
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("--revision", default="head", help="target revision")
    parser.add_argument(
        "--status-only", action="store_true", help="report without migrating"
    )
    args = parser.parse_args()

    if not args.status_only:
        upgrade_db(args.revision)
    print_index_status()


if __name__ == "__main__":
    main()
