"""
Collaborator guard: every SQLAlchemy failure leaves the session clean and
reaches the caller as DataUnavailableError. No retries here.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from telesales.core.errors import DataUnavailableError

logger = logging.getLogger(__name__)


@contextmanager
def collaborator(db: Session, source: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Data source %s failed: %s", source, exc)
        raise DataUnavailableError(source, reason=exc.__class__.__name__) from exc
