# local-time helpers shared by the streak and progress engines
# "today" is the caller's local calendar date, no timezone normalization

from datetime import date, datetime
from typing import Callable, Optional

Clock = Callable[[], datetime]


def local_now() -> datetime:
    return datetime.now()


def parse_day(value: Optional[str]) -> Optional[date]:
    """date portion of an iso date or timestamp string, None if unparseable"""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def days_between(earlier: date, later: date) -> int:
    return (later - earlier).days
