# salon/routers/slots.py
"""
Slots API endpoints.

GET /slots/day - Available time slots for a service/combo on a day
"""

from datetime import date, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..schemas.slots import SlotsDayResponse, TimeSlotRead
from ..services.booking import BookingService
from ..services.catalog import ItemNotFound
from ..services.slots import get_business_calendar
from ..services.staff import EmployeeNotFound


router = APIRouter(prefix="/slots", tags=["slots"])


def check_booking_window(target_date: date) -> None:
    """400 unless target_date is between today and the booking horizon."""
    today = date.today()
    max_date = today + timedelta(days=settings.booking_horizon_days)

    if target_date < today:
        raise HTTPException(status_code=400, detail="Date cannot be in the past")

    if target_date > max_date:
        raise HTTPException(
            status_code=400,
            detail=f"Date cannot be more than {settings.booking_horizon_days} days ahead",
        )


@router.get("/day", response_model=SlotsDayResponse)
def get_slots_day(
    item_id: int,
    item_type: str = "service",
    target_date: date = Query(..., alias="date"),
    employee_id: int | None = None,
    db: Session = Depends(get_db),
):
    """Get available time slots for a service/combo on a specific day."""
    calendar = get_business_calendar()

    check_booking_window(target_date)

    service = BookingService(db, calendar=calendar)
    try:
        availability = service.find_available_slots(
            item_id, item_type, target_date, employee_id=employee_id
        )
    except (ItemNotFound, EmployeeNotFound) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:  # InvalidArgument, unknown item_type
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return SlotsDayResponse(
        item_id=item_id,
        item_type=item_type,
        date=target_date,
        duration_minutes=availability.item.duration_minutes,
        employee_id=employee_id,
        slots=[
            TimeSlotRead(
                start_time=s.time_str,
                end_time=s.end_time.strftime("%H:%M"),
                employee_id=s.employee_id,
                employee_name=s.employee_name,
            )
            for s in availability.slots
        ],
        open_hour=calendar.open_hour,
        close_hour=calendar.close_hour,
        slot_granularity_minutes=calendar.slot_granularity_minutes,
    )
