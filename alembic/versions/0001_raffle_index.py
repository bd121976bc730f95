"""create raffle event and draw tables

Revision ID: 0001_raffle_index
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_raffle_index"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "raffle_events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column("participant", sa.String(length=255), nullable=True),
        sa.Column("payment", sa.String(length=78), nullable=True),
        sa.Column("subscription_id", sa.String(length=255), nullable=True),
        sa.Column("request_id", sa.String(length=255), nullable=True),
        sa.Column("winner", sa.String(length=255), nullable=True),
        sa.Column("prize", sa.String(length=78), nullable=True),
        sa.Column("emitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "kind IN ('entered','draw_requested','winner_picked')",
            name=op.f("ck_raffle_events_kind_enum"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_raffle_events")),
    )
    op.create_index("ix_raffle_events_kind", "raffle_events", ["kind"])
    op.create_index("ix_raffle_events_request_id", "raffle_events", ["request_id"])

    op.create_table(
        "raffle_draws",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("request_id", sa.String(length=255), nullable=False),
        sa.Column("subscription_id", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("winner", sa.String(length=255), nullable=True),
        sa.Column("prize", sa.String(length=78), nullable=True),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('pending','resolved')", name=op.f("ck_raffle_draws_status_enum")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_raffle_draws")),
        sa.UniqueConstraint("request_id", name=op.f("uq_raffle_draws_request_id")),
    )
    op.create_index("ix_raffle_draws_requested_at", "raffle_draws", ["requested_at"])


def downgrade() -> None:
    op.drop_index("ix_raffle_draws_requested_at", table_name="raffle_draws")
    op.drop_table("raffle_draws")
    op.drop_index("ix_raffle_events_request_id", table_name="raffle_events")
    op.drop_index("ix_raffle_events_kind", table_name="raffle_events")
    op.drop_table("raffle_events")
