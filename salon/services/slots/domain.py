# salon/services/slots/domain.py
"""
Value objects consumed and produced by the availability engine.

They are plain frozen dataclasses: the stores build them from ORM rows,
the engine only reads them.
"""

from dataclasses import dataclass, field
from datetime import time

ITEM_SERVICE = "service"
ITEM_COMBO = "combo"
ITEM_TYPES = (ITEM_SERVICE, ITEM_COMBO)

STATUS_CONFIRMED = "confirmed"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
STATUS_NO_SHOW = "no_show"
STATUS_PENDING = "pending"
RESERVATION_STATUSES = (
    STATUS_CONFIRMED,
    STATUS_COMPLETED,
    STATUS_CANCELLED,
    STATUS_NO_SHOW,
    STATUS_PENDING,
)


@dataclass(frozen=True)
class BookableItem:
    """A service, or a combo of services booked as one appointment."""
    id: int
    name: str
    type: str
    duration_minutes: int
    component_service_ids: tuple[int, ...]

    # Pricing (filled by the catalog, ignored by the engine)
    original_price_cents: int = 0
    final_price_cents: int = 0
    savings_cents: int = 0
    applied_discount_id: int | None = None
    category_id: int | None = None
    description: str | None = None


@dataclass(frozen=True)
class Employee:
    id: int
    full_name: str
    qualified_service_ids: frozenset[int] = frozenset()

    def can_perform(self, item: BookableItem) -> bool:
        return set(item.component_service_ids) <= self.qualified_service_ids


@dataclass(frozen=True)
class ExistingReservation:
    """A booked interval on the computed date."""
    employee_id: int
    start_time: time | str
    end_time: time | str
    status: str = STATUS_CONFIRMED

    @property
    def is_blocking(self) -> bool:
        return self.status != STATUS_CANCELLED


@dataclass(frozen=True)
class BlockedTime:
    """Time an employee is unavailable (break, errand, day-off hours)."""
    employee_id: int
    start_time: time | str
    end_time: time | str


@dataclass(frozen=True)
class WorkingHours:
    """An employee's working window for one weekday."""
    start_time: time | str
    end_time: time | str


@dataclass(frozen=True)
class TimeSlot:
    """
    Candidate start time for one employee.

    Two slots are equal when start_time and employee_id match.
    """
    start_time: time
    employee_id: int
    employee_name: str = field(default="", compare=False)
    end_time: time | None = field(default=None, compare=False)

    @property
    def time_str(self) -> str:
        return self.start_time.strftime("%H:%M")
