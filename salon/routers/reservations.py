# salon/routers/reservations.py
# API: POST = book a slot (409 if taken), cancel via POST /{id}/cancel

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.reservations import ReservationCreate, ReservationRead
from ..services.booking import BookingRequest, BookingService
from ..services.catalog import ItemNotFound
from ..services.reservations import ReservationNotFound, ReservationStore, SlotConflictError
from ..services.slots import InvalidArgument
from ..services.slots.config import parse_time
from ..services.staff import EmployeeNotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reservations", tags=["reservations"])

SLOT_TAKEN_DETAIL = "This time was just taken, please choose another"


@router.post("/", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationCreate,
    db: Session = Depends(get_db),
):
    try:
        request = BookingRequest(
            item_id=data.item_id,
            item_type=data.item_type,
            date=data.date,
            start_time=parse_time(data.start_time),
            employee_id=data.employee_id,
            client_id=data.client_id,
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_phone=data.customer_phone,
            notes=data.notes,
        )
        return BookingService(db).submit_booking(request)
    except SlotConflictError as e:
        logger.info(f"Booking rejected: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SLOT_TAKEN_DETAIL)
    except (ItemNotFound, EmployeeNotFound) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidArgument as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{id}", response_model=ReservationRead)
def get_reservation(id: int, db: Session = Depends(get_db)):
    try:
        return ReservationStore(db).get(id)
    except ReservationNotFound:
        raise HTTPException(status_code=404, detail="Not found")


@router.post("/{id}/cancel", response_model=ReservationRead)
def cancel_reservation(id: int, db: Session = Depends(get_db)):
    try:
        return ReservationStore(db).cancel(id)
    except ReservationNotFound:
        raise HTTPException(status_code=404, detail="Not found")
