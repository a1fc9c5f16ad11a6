# salon/services/booking.py
"""
Booking service shared by the guest and the authenticated booking flows.

find_available_slots: catalog + staff + reservations → compute_available_slots
submit_booking:       advisory re-check → ReservationStore.insert
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from sqlalchemy.orm import Session

from ..models.generated import Reservations as DBReservation
from .catalog import CatalogStore
from .reservations import NewReservation, ReservationStore, SlotConflictError
from .slots import (
    BookableItem,
    BusinessCalendar,
    TimeSlot,
    compute_available_slots,
    get_business_calendar,
)
from .slots.config import MINUTES_PER_DAY, minutes_to_time, parse_date, parse_time, time_to_minutes
from .slots.domain import ITEM_COMBO, ITEM_SERVICE
from .slots.exceptions import InvalidArgument
from .staff import StaffDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayAvailability:
    item: BookableItem
    date: date
    slots: list[TimeSlot]


@dataclass(frozen=True)
class BookingRequest:
    item_id: int
    item_type: str
    date: date
    start_time: time
    employee_id: int
    client_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    notes: Optional[str] = None


class BookingService:

    def __init__(
        self,
        db: Session,
        calendar: BusinessCalendar | None = None,
        today: date | None = None,
    ):
        self.catalog = CatalogStore(db, today=today)
        self.staff = StaffDirectory(db)
        self.reservations = ReservationStore(db)
        self.calendar = calendar or get_business_calendar()

    def find_available_slots(
        self,
        item_id: int,
        item_type: str,
        target_date: date | str,
        employee_id: int | None = None,
        now: datetime | None = None,
    ) -> DayAvailability:
        """
        Available slots for an item on a date.

        Raises:
            ItemNotFound, EmployeeNotFound, InvalidArgument
        """
        now = now or datetime.now()
        target_date = parse_date(target_date)

        item = self.catalog.get_active_bookable_item(item_id, item_type)
        employee_filter = self.staff.get_employee(employee_id) if employee_id is not None else None

        slots = compute_available_slots(
            item,
            target_date,
            employee_filter,
            self.staff.get_employees_qualified_for(item.component_service_ids),
            self.reservations.get_non_cancelled_reservations_for(target_date),
            self.calendar,
            now,
            blocked_times=self.reservations.get_blocked_times_for(target_date),
            working_hours=self.staff.get_working_hours(target_date),
        )

        logger.debug(
            f"Availability: {item_type}={item_id}, date={target_date}, "
            f"employee_id={employee_id}, slots={len(slots)}"
        )
        return DayAvailability(item=item, date=target_date, slots=slots)

    def submit_booking(self, request: BookingRequest, now: datetime | None = None) -> DBReservation:
        """
        Book the requested slot.

        Raises:
            SlotConflictError: slot no longer offered or taken concurrently;
                               the caller should re-fetch availability
            ItemNotFound, EmployeeNotFound, InvalidArgument
        """
        start_time = parse_time(request.start_time)

        availability = self.find_available_slots(
            request.item_id,
            request.item_type,
            request.date,
            employee_id=request.employee_id,
            now=now,
        )
        wanted = TimeSlot(start_time=start_time, employee_id=request.employee_id)
        if wanted not in availability.slots:
            logger.info(
                f"Slot no longer offered: employee_id={request.employee_id}, "
                f"date={availability.date}, start={start_time}"
            )
            raise SlotConflictError(request.employee_id, availability.date, start_time)

        item = availability.item
        end_min = time_to_minutes(start_time) + item.duration_minutes
        if end_min >= MINUTES_PER_DAY:
            raise InvalidArgument(f"{item.name} starting at {start_time} would end after midnight")

        candidate = NewReservation(
            employee_id=request.employee_id,
            appointment_date=availability.date,
            start_time=start_time,
            end_time=minutes_to_time(end_min),
            service_id=item.id if item.type == ITEM_SERVICE else None,
            combo_id=item.id if item.type == ITEM_COMBO else None,
            client_id=request.client_id,
            customer_name=request.customer_name,
            customer_email=request.customer_email,
            customer_phone=request.customer_phone,
            final_price_cents=item.final_price_cents,
            notes=request.notes,
        )
        return self.reservations.insert(candidate)
