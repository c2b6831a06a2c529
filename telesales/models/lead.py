from datetime import datetime, date
from sqlalchemy import Integer, String, Float, DateTime, Date, func
from sqlalchemy.orm import Mapped, mapped_column

from telesales.db.base import Base


class Lead(Base):
    __tablename__ = "leads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    contact_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    agent_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="new")
    deal_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    expected_close_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    lead_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
