"""
Shared helpers for the analytics components.

All month arithmetic happens in UTC: naive datetimes coming from the
store are interpreted as UTC, aware ones are converted.
"""

import calendar
import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple, Optional

from .policy import MONTH_LABEL_FORMAT


class MonthWindow(NamedTuple):
    label: str
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= BaseComponent.ensure_utc(moment) <= self.end


class BaseComponent:
    """Base class for the stateless analytics components."""

    @staticmethod
    def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
        """Division that returns ``default`` instead of raising on a zero denominator."""
        if denominator == 0:
            return default
        return numerator / denominator

    @staticmethod
    def ensure_utc(moment: datetime) -> datetime:
        if moment.tzinfo is None:
            return moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(timezone.utc)

    @classmethod
    def resolve_now(cls, now: Optional[datetime]) -> datetime:
        """Pinned clock for deterministic runs; wall clock otherwise."""
        if now is None:
            return datetime.now(timezone.utc)
        return cls.ensure_utc(now)

    @staticmethod
    def days_between(later: datetime, earlier: datetime) -> float:
        return (later - earlier).total_seconds() / 86400

    @staticmethod
    def round_half_up(value: float) -> int:
        """Round .5 towards +inf (built-in round() uses banker's rounding)."""
        return int(math.floor(value + 0.5))

    @staticmethod
    def round_to(value: float, places: int) -> float:
        """
        Round to ``places`` decimals with ties away from zero.

        Works on the exact binary value, so 40.25 -> 40.3 and 1.125 -> 1.13
        where built-in round() would give 40.2 and 1.12.
        """
        quantum = Decimal(1).scaleb(-places)
        return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))

    @staticmethod
    def shift_months(moment: datetime, months: int) -> datetime:
        """Move ``moment`` by whole calendar months, clamping the day (31 Mar - 1 = 28/29 Feb)."""
        index = moment.year * 12 + (moment.month - 1) + months
        year, month0 = divmod(index, 12)
        last_day = calendar.monthrange(year, month0 + 1)[1]
        return moment.replace(year=year, month=month0 + 1, day=min(moment.day, last_day))

    @classmethod
    def month_window(cls, moment: datetime) -> MonthWindow:
        """Inclusive [first instant, last instant] of the calendar month containing ``moment``."""
        moment = cls.ensure_utc(moment)
        last_day = calendar.monthrange(moment.year, moment.month)[1]
        start = moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        end = moment.replace(day=last_day, hour=23, minute=59, second=59, microsecond=999999)
        return MonthWindow(moment.strftime(MONTH_LABEL_FORMAT), start, end)

    @classmethod
    def trailing_months(cls, now: datetime, count: int) -> list[MonthWindow]:
        """The ``count`` calendar months ending with the month of ``now``, oldest first."""
        return [
            cls.month_window(cls.shift_months(now, -(count - 1 - i)))
            for i in range(count)
        ]
