from datetime import datetime, date
from sqlalchemy import Integer, String, Float, Boolean, DateTime, Date, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from telesales.db.base import Base


class AgentGoal(Base):
    __tablename__ = "agent_goals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    agent_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("agent_profiles.id"), nullable=False, index=True
    )
    goal_type: Mapped[str] = mapped_column(String(16), nullable=False, comment='"weekly" or "monthly"')
    metric: Mapped[str] = mapped_column(
        String(16), nullable=False, comment='"calls" | "interested" | "leads" | "conversion"'
    )
    target_value: Mapped[float] = mapped_column(Float, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    completed_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
