# salon/services/slots/__init__.py
"""
Slots calculation module.

Pure availability computation for a service or combo on one day.
Data loading lives in the catalog/staff/reservation stores.
"""

from .config import BusinessCalendar, get_business_calendar
from .domain import (
    BlockedTime,
    BookableItem,
    Employee,
    ExistingReservation,
    TimeSlot,
    WorkingHours,
)
from .exceptions import InvalidArgument
from .availability import compute_available_slots

__all__ = [
    "BusinessCalendar",
    "get_business_calendar",
    "BlockedTime",
    "BookableItem",
    "Employee",
    "ExistingReservation",
    "TimeSlot",
    "WorkingHours",
    "InvalidArgument",
    "compute_available_slots",
]
