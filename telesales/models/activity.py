"""
Call feedback and contact history: the raw interaction log of a contact.

Both are immutable once written. Lead scoring and goal measurement read them;
nothing in this service updates them.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from telesales.db.base import Base


class CallFeedback(Base):
    __tablename__ = "call_feedback"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    agent_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    contact_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    feedback_status: Mapped[str] = mapped_column(
        String(32), nullable=False,
        comment="interested | not_interested | not_answered | callback | wrong_number",
    )
    call_timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class ContactHistory(Base):
    __tablename__ = "contact_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    agent_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    contact_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    action_type: Mapped[str] = mapped_column(
        String(32), nullable=False, comment="note | status_change | whatsapp"
    )
    action_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
