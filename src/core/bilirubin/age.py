"""Postnatal age from birth and evaluation times."""

import math
from datetime import date, datetime, time
from typing import Optional, Tuple

SECONDS_PER_HOUR = 3600


def birth_datetime(day: date, hour: int) -> datetime:
    """Combine a calendar date with a whole hour of the day."""
    return datetime.combine(day, time(hour=hour))


def postnatal_age_hours(birth: datetime, evaluation: Optional[datetime] = None) -> int:
    """
    Completed hours since birth, never negative.

    The evaluation time is usually the lab sample time; without one the
    current time is used.
    """
    if evaluation is None:
        evaluation = datetime.now(tz=birth.tzinfo)
    elapsed = (evaluation - birth).total_seconds()
    return max(0, math.floor(elapsed / SECONDS_PER_HOUR))


def split_age(hours: int) -> Tuple[int, int]:
    """(days, remaining hours)"""
    return divmod(int(hours), 24)
