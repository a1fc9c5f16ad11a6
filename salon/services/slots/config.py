# salon/services/slots/config.py
"""
Business calendar for slots calculation.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from functools import lru_cache

from .exceptions import InvalidArgument

MINUTES_PER_DAY = 24 * 60

WEEKDAY_NAMES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


@dataclass(frozen=True)
class BusinessCalendar:
    """
    Operating window of the salon.

    Attributes:
        open_hour: First bookable hour (slots start at open_hour:00)
        close_hour: Closing hour (no slot starts at or after close_hour:00)
        slot_granularity_minutes: Step between candidate start times
        closed_weekdays: Weekdays without slots (0 = Monday, 6 = Sunday)
        allow_overrun_past_close: Whether a service may end after closing
    """
    open_hour: int = 9
    close_hour: int = 18
    slot_granularity_minutes: int = 30
    closed_weekdays: frozenset[int] = field(default_factory=lambda: frozenset({6}))
    allow_overrun_past_close: bool = True

    def __post_init__(self):
        """Validate configuration."""
        object.__setattr__(self, "closed_weekdays", frozenset(self.closed_weekdays))

        if not 0 <= self.open_hour <= 23:
            raise InvalidArgument(f"open_hour must be within 0..23, got {self.open_hour}")
        if not 1 <= self.close_hour <= 24:
            raise InvalidArgument(f"close_hour must be within 1..24, got {self.close_hour}")
        if self.open_hour >= self.close_hour:
            raise InvalidArgument(
                f"open_hour ({self.open_hour}) must be before close_hour ({self.close_hour})"
            )
        if self.slot_granularity_minutes <= 0:
            raise InvalidArgument(
                f"slot_granularity_minutes must be positive, got {self.slot_granularity_minutes}"
            )
        if self.slot_granularity_minutes > self.open_minutes_total:
            raise InvalidArgument(
                f"slot_granularity_minutes ({self.slot_granularity_minutes}) "
                f"exceeds the opening window ({self.open_minutes_total} min)"
            )
        bad = [d for d in self.closed_weekdays if not 0 <= d <= 6]
        if bad:
            raise InvalidArgument(f"closed_weekdays must be within 0..6, got {sorted(bad)}")

    @property
    def open_minute(self) -> int:
        return self.open_hour * 60

    @property
    def close_minute(self) -> int:
        return self.close_hour * 60

    @property
    def open_minutes_total(self) -> int:
        return self.close_minute - self.open_minute

    def is_closed(self, target_date: date) -> bool:
        return target_date.weekday() in self.closed_weekdays

    def candidate_start_minutes(self) -> list[int]:
        """
        Candidate slot starts as minutes since midnight.

        9..18 step 30 → [540, 570, ..., 1050] (18 starts)
        """
        return list(range(self.open_minute, self.close_minute, self.slot_granularity_minutes))


@lru_cache
def get_business_calendar() -> BusinessCalendar:
    """
    Business calendar built from settings (singleton).
    """
    from ...config import settings

    return BusinessCalendar(
        open_hour=settings.business_open_hour,
        close_hour=settings.business_close_hour,
        slot_granularity_minutes=settings.slot_granularity_minutes,
        closed_weekdays=frozenset(settings.closed_weekdays),
        allow_overrun_past_close=settings.allow_overrun_past_close,
    )


# ── Time helpers ─────────────────────────────────────────────────────────


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" or "HH:MM:SS" to minutes since midnight."""
    return time_to_minutes(parse_time(value))


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM" (wraps past midnight)."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def time_to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> time:
    minutes %= MINUTES_PER_DAY
    return time(minutes // 60, minutes % 60)


def parse_time(value: time | str) -> time:
    """Accept a time or an "HH:MM[:SS]" string."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise InvalidArgument(f"Expected time or 'HH:MM' string, got {value!r}")
    try:
        return time.fromisoformat(value.strip())
    except ValueError:
        raise InvalidArgument(f"Unparsable time: {value!r}")


def parse_date(value: date | str) -> date:
    """Accept a date or a "YYYY-MM-DD" string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidArgument(f"Expected date or 'YYYY-MM-DD' string, got {value!r}")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidArgument(f"Unparsable date: {value!r}")
