"""
MilestoneAward: ledger of goal-streak badges already celebrated.

One row per (agent, milestone, metric, goal_type); the unique constraint keeps
celebrations one-time even when two evaluations race.
"""
from datetime import datetime
from sqlalchemy import Integer, String, DateTime, ForeignKey, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from telesales.db.base import Base


class MilestoneAward(Base):
    __tablename__ = "milestone_awards"
    __table_args__ = (
        UniqueConstraint(
            "agent_id", "milestone_id", "metric", "goal_type",
            name="uq_milestone_award_agent_milestone",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    agent_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("agent_profiles.id"), nullable=False, index=True
    )
    milestone_id: Mapped[str] = mapped_column(String(32), nullable=False)
    metric: Mapped[str] = mapped_column(String(16), nullable=False)
    goal_type: Mapped[str] = mapped_column(String(16), nullable=False)
    rarity: Mapped[str] = mapped_column(String(16), nullable=False)
    streak: Mapped[int] = mapped_column(Integer, nullable=False)
    awarded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
