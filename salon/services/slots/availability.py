# salon/services/slots/availability.py
"""
Service/combo availability for a single day.

Pure computation: the caller fetches the item, employees and reservations
and passes them in. No I/O, no clock reads (``now`` is an argument), so the
same inputs always produce the same list.

Takes into account:
- Business calendar (open/close hours, step, closed weekdays)
- Employees qualified for every component service
- "Today" cutoff (only slots strictly after now)
- Existing non-cancelled reservations and blocked times
- Optional per-employee working hours
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime

from .config import (
    MINUTES_PER_DAY,
    BusinessCalendar,
    minutes_to_time,
    parse_date,
    parse_time,
    time_to_minutes,
)
from .domain import (
    BlockedTime,
    BookableItem,
    Employee,
    ExistingReservation,
    TimeSlot,
    WorkingHours,
)
from .exceptions import InvalidArgument


def compute_available_slots(
    item: BookableItem,
    target_date: date | str,
    employee_filter: Employee | None,
    all_employees: Sequence[Employee],
    existing_reservations: Sequence[ExistingReservation],
    calendar: BusinessCalendar,
    now: datetime,
    *,
    blocked_times: Sequence[BlockedTime] = (),
    working_hours: Mapping[int, WorkingHours] | None = None,
) -> list[TimeSlot]:
    """
    Enumerate bookable (start time, employee) pairs for one day.

    Args:
        item: Service or combo; only duration and component ids are used
        target_date: Day to compute (date or "YYYY-MM-DD")
        employee_filter: Preferred employee, or None for any qualified one
        all_employees: Roster to pick qualified employees from
        existing_reservations: Reservations on target_date (any status)
        calendar: Business calendar
        now: Current local datetime
        blocked_times: Extra busy intervals on target_date
        working_hours: employee_id → working window for target_date.
                       None disables the check; an employee missing from
                       the mapping has no slots.

    Returns:
        Slots sorted by start time; ties keep employee order.

    Raises:
        InvalidArgument: malformed duration, date, time or calendar.
    """
    if not isinstance(calendar, BusinessCalendar):
        raise InvalidArgument(f"calendar must be a BusinessCalendar, got {type(calendar).__name__}")
    if not isinstance(now, datetime):
        raise InvalidArgument(f"now must be a datetime, got {type(now).__name__}")
    duration = item.duration_minutes
    if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
        raise InvalidArgument(
            f"duration_minutes must be a positive integer, got {item.duration_minutes!r}"
        )

    target_date = parse_date(target_date)

    # Step 1: Closed weekday
    if calendar.is_closed(target_date):
        return []

    # Step 2: Eligible employees (the filter narrows, never widens)
    candidates = [employee_filter] if employee_filter is not None else all_employees
    employees = _unique_by_id(e for e in candidates if e.can_perform(item))
    if not employees:
        return []

    # Step 3: Busy intervals per employee (minutes since midnight)
    busy = _busy_intervals(existing_reservations, blocked_times)
    windows = _working_windows(working_hours)

    # Step 4: Today cutoff
    cutoff = now.time() if target_date == now.date() else None

    starts = calendar.candidate_start_minutes()
    close_minute = calendar.close_minute

    slots: list[TimeSlot] = []
    for employee in employees:
        employee_busy = busy.get(employee.id, [])

        if windows is not None:
            window = windows.get(employee.id)
            if window is None:
                continue
        else:
            window = None

        for start in starts:
            end = start + duration
            start_time = minutes_to_time(start)

            if cutoff is not None and not start_time > cutoff:
                continue
            # a booking ends on its own day
            if end >= MINUTES_PER_DAY:
                continue
            if not calendar.allow_overrun_past_close and end > close_minute:
                continue
            if window is not None and not window[0] <= start < window[1]:
                continue
            if any(start < busy_end and end > busy_start for busy_start, busy_end in employee_busy):
                continue

            slots.append(TimeSlot(
                start_time=start_time,
                employee_id=employee.id,
                employee_name=employee.full_name,
                end_time=minutes_to_time(end),
            ))

    # sorted() is stable: employee-major insertion order breaks ties
    return sorted(slots, key=lambda s: s.start_time)


# ── Helpers ──────────────────────────────────────────────────────────────


def _unique_by_id(employees: Iterable[Employee]) -> list[Employee]:
    seen: set[int] = set()
    unique = []
    for employee in employees:
        if employee.id not in seen:
            seen.add(employee.id)
            unique.append(employee)
    return unique


def _busy_intervals(
    reservations: Sequence[ExistingReservation],
    blocked_times: Sequence[BlockedTime],
) -> dict[int, list[tuple[int, int]]]:
    """Group blocking intervals by employee id."""
    busy: dict[int, list[tuple[int, int]]] = {}

    for res in reservations:
        if not res.is_blocking:
            continue
        interval = _interval(res.start_time, res.end_time)
        busy.setdefault(res.employee_id, []).append(interval)

    for blocked in blocked_times:
        interval = _interval(blocked.start_time, blocked.end_time)
        busy.setdefault(blocked.employee_id, []).append(interval)

    return busy


def _working_windows(
    working_hours: Mapping[int, WorkingHours] | None,
) -> dict[int, tuple[int, int]] | None:
    if working_hours is None:
        return None
    return {
        employee_id: _interval(wh.start_time, wh.end_time)
        for employee_id, wh in working_hours.items()
    }


def _interval(start, end) -> tuple[int, int]:
    start_min = time_to_minutes(parse_time(start))
    end_min = time_to_minutes(parse_time(end))
    if end_min <= start_min:
        raise InvalidArgument(f"Interval end {end!r} must be after start {start!r}")
    return start_min, end_min
