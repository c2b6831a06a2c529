"""
LoginCredit: one row per (agent, calendar day) that was credited.

Append-only. The unique constraint is what makes crediting at-most-once per
day when two logins race.
"""
from datetime import datetime, date
from sqlalchemy import Integer, DateTime, Date, ForeignKey, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from telesales.db.base import Base


class LoginCredit(Base):
    __tablename__ = "login_credits"
    __table_args__ = (
        UniqueConstraint("agent_id", "login_date", name="uq_login_credit_agent_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    agent_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("agent_profiles.id"), nullable=False, index=True
    )
    login_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
