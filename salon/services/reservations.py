# salon/services/reservations.py
"""
Reservation store.

Reads the reservations/blocked times the availability engine needs and
inserts new reservations. Insert locks the employee's agenda, then
re-checks the interval in the same transaction: between "show slots" and
"book" another client may have taken the slot, which surfaces as
SlotConflictError (retryable).
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from sqlalchemy.orm import Session

from ..models.generated import (
    BlockedTimes as DBBlockedTime,
    Employees as DBEmployee,
    Reservations as DBReservation,
)
from .slots.config import parse_time, time_to_minutes
from .slots.domain import (
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
    STATUS_PENDING,
    BlockedTime,
    ExistingReservation,
)
from .slots.exceptions import InvalidArgument

logger = logging.getLogger(__name__)


class SlotConflictError(Exception):
    """The employee/interval was booked concurrently. Re-fetch slots and retry."""

    def __init__(self, employee_id: int, appointment_date: date, start_time: time):
        self.employee_id = employee_id
        self.appointment_date = appointment_date
        self.start_time = start_time
        super().__init__(
            f"Employee {employee_id} is no longer available on "
            f"{appointment_date.isoformat()} at {start_time.strftime('%H:%M')}"
        )


class ReservationNotFound(LookupError):
    def __init__(self, reservation_id: int):
        self.reservation_id = reservation_id
        super().__init__(f"Reservation {reservation_id} not found")


@dataclass(frozen=True)
class NewReservation:
    """Candidate reservation submitted by a booking flow."""
    employee_id: int
    appointment_date: date
    start_time: time
    end_time: time
    service_id: Optional[int] = None
    combo_id: Optional[int] = None
    client_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    final_price_cents: Optional[int] = None
    notes: Optional[str] = None

    @property
    def is_guest(self) -> bool:
        return self.client_id is None


class ReservationStore:

    def __init__(self, db: Session):
        self.db = db

    # ── Read ─────────────────────────────────────────────────────────────

    def get_non_cancelled_reservations_for(self, target_date: date) -> list[ExistingReservation]:
        rows = (
            self._active_query(target_date)
            .order_by(DBReservation.employee_id, DBReservation.start_time)
            .all()
        )
        return [
            ExistingReservation(
                employee_id=r.employee_id,
                start_time=r.start_time,
                end_time=r.end_time,
                status=r.status,
            )
            for r in rows
        ]

    def get_blocked_times_for(self, target_date: date) -> list[BlockedTime]:
        rows = (
            self.db.query(DBBlockedTime)
            .filter(DBBlockedTime.date == target_date.isoformat())
            .order_by(DBBlockedTime.employee_id, DBBlockedTime.start_time)
            .all()
        )
        return [
            BlockedTime(employee_id=r.employee_id, start_time=r.start_time, end_time=r.end_time)
            for r in rows
        ]

    def get(self, reservation_id: int) -> DBReservation:
        obj = self.db.get(DBReservation, reservation_id)
        if not obj:
            raise ReservationNotFound(reservation_id)
        return obj

    # ── Write ────────────────────────────────────────────────────────────

    def insert(self, candidate: NewReservation) -> DBReservation:
        """
        Insert a reservation unless it overlaps the employee's agenda.

        Status is "confirmed" for authenticated clients, "pending" for guests.

        Raises:
            InvalidArgument: end_time not after start_time, or no item given
            SlotConflictError: overlap with a non-cancelled reservation
                               or a blocked time of the same employee
        """
        if (candidate.service_id is None) == (candidate.combo_id is None):
            raise InvalidArgument("Exactly one of service_id / combo_id is required")

        start_min = time_to_minutes(candidate.start_time)
        end_min = time_to_minutes(candidate.end_time)
        if end_min <= start_min:
            raise InvalidArgument(
                f"end_time {candidate.end_time} must be after start_time {candidate.start_time}"
            )

        self._lock_agenda(candidate.employee_id)
        if self._overlaps(candidate, start_min, end_min):
            self.db.rollback()
            logger.info(
                f"Reservation conflict: employee_id={candidate.employee_id}, "
                f"date={candidate.appointment_date}, start={candidate.start_time}"
            )
            raise SlotConflictError(
                candidate.employee_id, candidate.appointment_date, candidate.start_time
            )

        obj = DBReservation(
            employee_id=candidate.employee_id,
            service_id=candidate.service_id,
            combo_id=candidate.combo_id,
            appointment_date=candidate.appointment_date.isoformat(),
            start_time=candidate.start_time.strftime("%H:%M"),
            end_time=candidate.end_time.strftime("%H:%M"),
            status=STATUS_PENDING if candidate.is_guest else STATUS_CONFIRMED,
            is_guest_booking=1 if candidate.is_guest else 0,
            client_id=candidate.client_id,
            customer_name=candidate.customer_name,
            customer_email=candidate.customer_email,
            customer_phone=candidate.customer_phone,
            final_price_cents=candidate.final_price_cents,
            notes=candidate.notes,
        )
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)

        logger.info(
            f"Reservation created: id={obj.id}, employee_id={obj.employee_id}, "
            f"time={obj.appointment_date} {obj.start_time}-{obj.end_time}, status={obj.status}"
        )
        return obj

    def cancel(self, reservation_id: int) -> DBReservation:
        obj = self.get(reservation_id)
        if obj.status != STATUS_CANCELLED:
            obj.status = STATUS_CANCELLED
            self.db.commit()
            self.db.refresh(obj)
            logger.info(f"Reservation cancelled: id={obj.id}")
        return obj

    # ── Helpers ──────────────────────────────────────────────────────────

    def _active_query(self, target_date: date):
        return self.db.query(DBReservation).filter(
            DBReservation.appointment_date == target_date.isoformat(),
            DBReservation.status != STATUS_CANCELLED,
        )

    def _lock_agenda(self, employee_id: int) -> None:
        """
        Serialize writers per employee until commit/rollback.

        A no-op UPDATE of the employee row: a row lock on PostgreSQL, the
        database write lock on SQLite (which ignores SELECT ... FOR UPDATE).
        A concurrent insert for the same employee waits here, then sees the
        committed reservation in _overlaps.
        """
        (
            self.db.query(DBEmployee)
            .filter(DBEmployee.id == employee_id)
            .update({DBEmployee.id: DBEmployee.id}, synchronize_session=False)
        )

    def _overlaps(self, candidate: NewReservation, start_min: int, end_min: int) -> bool:
        reservations = (
            self._active_query(candidate.appointment_date)
            .filter(DBReservation.employee_id == candidate.employee_id)
            .all()
        )
        blocked = (
            self.db.query(DBBlockedTime)
            .filter(
                DBBlockedTime.date == candidate.appointment_date.isoformat(),
                DBBlockedTime.employee_id == candidate.employee_id,
            )
            .all()
        )

        for row in [*reservations, *blocked]:
            busy_start = time_to_minutes(parse_time(row.start_time))
            busy_end = time_to_minutes(parse_time(row.end_time))
            if start_min < busy_end and end_min > busy_start:
                return True
        return False
