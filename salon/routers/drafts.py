# salon/routers/drafts.py
"""
Draft booking endpoints.

A guest picks a slot, the draft is kept in Redis while they log in,
then /drafts/{id}/resume books it for the authenticated client.
"""

import logging
from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..redis_client import get_redis
from ..schemas.drafts import DraftCreate, DraftRead, DraftResume
from ..schemas.reservations import ReservationRead
from ..services.booking import BookingService
from ..services.catalog import ItemNotFound
from ..services.drafts import (
    ClientIdentity,
    DraftBooking,
    DraftNotFound,
    DraftStore,
    resume_on_login,
)
from ..services.reservations import SlotConflictError
from ..services.slots import InvalidArgument, TimeSlot
from ..services.slots.config import parse_time
from ..services.staff import EmployeeNotFound
from .reservations import SLOT_TAKEN_DETAIL
from .slots import check_booking_window

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/drafts", tags=["drafts"])


def get_draft_store(redis: Redis = Depends(get_redis)) -> DraftStore:
    return DraftStore(redis, settings.draft_ttl_seconds)


@router.post("/", response_model=DraftRead, status_code=status.HTTP_201_CREATED)
def create_draft(
    data: DraftCreate,
    db: Session = Depends(get_db),
    store: DraftStore = Depends(get_draft_store),
):
    check_booking_window(data.date)

    service = BookingService(db)
    try:
        start_time = parse_time(data.start_time)
        availability = service.find_available_slots(
            data.item_id, data.item_type, data.date, employee_id=data.employee_id
        )
    except (ItemNotFound, EmployeeNotFound) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidArgument as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    # only a slot that is offered right now can be kept
    wanted = TimeSlot(start_time=start_time, employee_id=data.employee_id)
    slot = next((s for s in availability.slots if s == wanted), None)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SLOT_TAKEN_DETAIL)

    draft = DraftBooking.create(
        item=availability.item,
        target_date=availability.date,
        slot=slot,
        notes=data.notes,
        now=datetime.now(),
        ttl_seconds=store.ttl_seconds,
    )
    store.save(draft)
    return DraftRead(**asdict(draft))


@router.get("/{draft_id}", response_model=DraftRead)
def get_draft(draft_id: str, store: DraftStore = Depends(get_draft_store)):
    try:
        return DraftRead(**asdict(store.get(draft_id)))
    except DraftNotFound:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="Draft not found or expired")


@router.delete("/{draft_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_draft(draft_id: str, store: DraftStore = Depends(get_draft_store)):
    if not store.delete(draft_id):
        raise HTTPException(status_code=404, detail="Not found")


@router.post("/{draft_id}/resume", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
def resume_draft(
    draft_id: str,
    data: DraftResume,
    db: Session = Depends(get_db),
    store: DraftStore = Depends(get_draft_store),
):
    client = ClientIdentity(
        client_id=data.client_id,
        full_name=data.full_name,
        email=data.email,
        phone=data.phone,
    )
    try:
        return resume_on_login(store, draft_id, client, BookingService(db))
    except DraftNotFound:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="Draft not found or expired")
    except SlotConflictError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SLOT_TAKEN_DETAIL)
    except (ItemNotFound, EmployeeNotFound) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidArgument as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
