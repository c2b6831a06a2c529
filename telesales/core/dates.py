"""
Date coercion shared by the core engines.

Engines accept `date`/`datetime` objects or ISO-8601 strings. Anything that
cannot be parsed raises InvalidInputError instead of leaking a bad value
into streak or score arithmetic.
"""
from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Union

from telesales.core.errors import InvalidInputError

DateLike = Union[date, datetime, str]


def to_date(value: Optional[DateLike], field: str) -> Optional[date]:
    """
    Coerce to a calendar date. None passes through. An aware datetime is
    taken at its UTC date; a naive one is already UTC.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _utc_date(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) > 10:
                return _utc_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
            return date.fromisoformat(text)
        except ValueError:
            raise InvalidInputError(f"Unparseable date for {field}.", field=field, value=value)
    raise InvalidInputError(f"Expected a date for {field}.", field=field, value=value)


def to_datetime(value: Optional[DateLike], field: str) -> Optional[datetime]:
    """
    Coerce to an aware datetime. Naive values are taken as UTC; a bare date
    means midnight UTC of that day.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise InvalidInputError(f"Unparseable timestamp for {field}.", field=field, value=value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    raise InvalidInputError(f"Expected a timestamp for {field}.", field=field, value=value)


def _utc_date(value: datetime) -> date:
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(timezone.utc).date()


def local_now(now: Optional[DateLike], tz: tzinfo) -> datetime:
    """`now` expressed in the streak timezone."""
    instant = to_datetime(now, "now")
    if instant is None:
        raise InvalidInputError("now is required.", field="now")
    return instant.astimezone(tz)


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)
