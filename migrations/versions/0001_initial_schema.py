"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-02-20 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- agent_profiles ---
    op.create_table(
        "agent_profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("full_name", sa.String(128), nullable=False),
        sa.Column("login_streak_current", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("login_streak_longest", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_login_date", sa.Date(), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_agent_profiles_id", "agent_profiles", ["id"])

    # --- login_credits ---
    op.create_table(
        "login_credits",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("agent_id", sa.Integer(), sa.ForeignKey("agent_profiles.id"), nullable=False),
        sa.Column("login_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("agent_id", "login_date", name="uq_login_credit_agent_date"),
    )
    op.create_index("ix_login_credits_id", "login_credits", ["id"])
    op.create_index("ix_login_credits_agent_id", "login_credits", ["agent_id"])

    # --- agent_goals ---
    op.create_table(
        "agent_goals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("agent_id", sa.Integer(), sa.ForeignKey("agent_profiles.id"), nullable=False),
        sa.Column("goal_type", sa.String(16), nullable=False),
        sa.Column("metric", sa.String(16), nullable=False),
        sa.Column("target_value", sa.Float(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("completed_at", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_agent_goals_id", "agent_goals", ["id"])
    op.create_index("ix_agent_goals_agent_id", "agent_goals", ["agent_id"])
    op.create_index("ix_agent_goals_end_date", "agent_goals", ["end_date"])

    # --- call_feedback ---
    op.create_table(
        "call_feedback",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("agent_id", sa.Integer(), nullable=False),
        sa.Column("contact_id", sa.Integer(), nullable=False),
        sa.Column("feedback_status", sa.String(32), nullable=False),
        sa.Column("call_timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_call_feedback_id", "call_feedback", ["id"])
    op.create_index("ix_call_feedback_agent_id", "call_feedback", ["agent_id"])
    op.create_index("ix_call_feedback_contact_id", "call_feedback", ["contact_id"])
    op.create_index("ix_call_feedback_call_timestamp", "call_feedback", ["call_timestamp"])

    # --- contact_history ---
    op.create_table(
        "contact_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("agent_id", sa.Integer(), nullable=False),
        sa.Column("contact_id", sa.Integer(), nullable=False),
        sa.Column("action_type", sa.String(32), nullable=False),
        sa.Column("action_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_contact_history_id", "contact_history", ["id"])
    op.create_index("ix_contact_history_agent_id", "contact_history", ["agent_id"])
    op.create_index("ix_contact_history_contact_id", "contact_history", ["contact_id"])

    # --- leads ---
    op.create_table(
        "leads",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("contact_id", sa.Integer(), nullable=False),
        sa.Column("agent_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="new"),
        sa.Column("deal_value", sa.Float(), nullable=True),
        sa.Column("expected_close_date", sa.Date(), nullable=True),
        sa.Column("lead_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_leads_id", "leads", ["id"])
    op.create_index("ix_leads_contact_id", "leads", ["contact_id"])
    op.create_index("ix_leads_agent_id", "leads", ["agent_id"])


def downgrade() -> None:
    op.drop_table("leads")
    op.drop_table("contact_history")
    op.drop_table("call_feedback")
    op.drop_table("agent_goals")
    op.drop_table("login_credits")
    op.drop_table("agent_profiles")
