"""add milestone_awards table

Revision ID: 0002
Revises: 0001
Create Date: 2026-02-21

Ledger of goal-streak badges already celebrated.
Unique constraint (agent_id, milestone_id, metric, goal_type) keeps each
celebration one-time. Append-only; downgrade drops cleanly.
"""
from alembic import op
import sqlalchemy as sa

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "milestone_awards",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("agent_id", sa.Integer(), sa.ForeignKey("agent_profiles.id"), nullable=False),
        sa.Column("milestone_id", sa.String(32), nullable=False),
        sa.Column("metric", sa.String(16), nullable=False),
        sa.Column("goal_type", sa.String(16), nullable=False),
        sa.Column("rarity", sa.String(16), nullable=False),
        sa.Column("streak", sa.Integer(), nullable=False),
        sa.Column(
            "awarded_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_milestone_awards_agent_id", "milestone_awards", ["agent_id"])
    op.create_unique_constraint(
        "uq_milestone_award_agent_milestone",
        "milestone_awards",
        ["agent_id", "milestone_id", "metric", "goal_type"],
    )


def downgrade() -> None:
    op.drop_constraint("uq_milestone_award_agent_milestone", "milestone_awards", type_="unique")
    op.drop_index("ix_milestone_awards_agent_id", table_name="milestone_awards")
    op.drop_table("milestone_awards")
