# salon/services/drafts.py
"""
Draft bookings: the chosen slot kept across a login redirect.

Key format: booking_draft:{uuid}
Value: JSON of DraftBooking, stored with SETEX (TTL = draft_ttl_seconds).

A draft is resumed exactly once: on success or on a slot conflict it is
deleted; a missing or expired draft raises DraftNotFound.
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from typing import Optional
from uuid import uuid4

from redis import Redis

from .slots import BookableItem, TimeSlot
from .slots.config import parse_date, parse_time

logger = logging.getLogger(__name__)

DRAFT_PREFIX = "booking_draft"


class DraftNotFound(LookupError):
    def __init__(self, draft_id: str):
        self.draft_id = draft_id
        super().__init__(f"Draft {draft_id} not found or expired")


@dataclass(frozen=True)
class DraftBooking:
    id: str
    item_id: int
    item_type: str
    date: str        # YYYY-MM-DD
    start_time: str  # HH:MM
    employee_id: int
    created_at: str
    expires_at: str
    employee_name: str = ""
    notes: Optional[str] = None

    @classmethod
    def create(
        cls,
        item: BookableItem,
        target_date: date,
        slot: TimeSlot,
        now: datetime,
        ttl_seconds: int,
        notes: Optional[str] = None,
    ) -> "DraftBooking":
        return cls(
            id=uuid4().hex,
            item_id=item.id,
            item_type=item.type,
            date=target_date.isoformat(),
            start_time=slot.time_str,
            employee_id=slot.employee_id,
            employee_name=slot.employee_name,
            notes=notes,
            created_at=now.isoformat(timespec="seconds"),
            expires_at=(now + timedelta(seconds=ttl_seconds)).isoformat(timespec="seconds"),
        )

    def is_expired(self, now: datetime) -> bool:
        return datetime.fromisoformat(self.expires_at) <= now

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, raw: str) -> "DraftBooking":
        return cls(**json.loads(raw))


@dataclass(frozen=True)
class ClientIdentity:
    """The authenticated client a draft is booked for."""
    client_id: int
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class DraftStore:
    """Redis storage for draft bookings."""

    def __init__(self, redis: Redis, ttl_seconds: int):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def _key(self, draft_id: str) -> str:
        return f"{DRAFT_PREFIX}:{draft_id}"

    def save(self, draft: DraftBooking) -> None:
        self.redis.setex(self._key(draft.id), self.ttl_seconds, draft.to_json())
        logger.info(f"Draft saved: {draft.id} (expires {draft.expires_at})")

    def get(self, draft_id: str, now: datetime | None = None) -> DraftBooking:
        raw = self.redis.get(self._key(draft_id))
        if raw is None:
            raise DraftNotFound(draft_id)
        if isinstance(raw, bytes):
            raw = raw.decode()

        draft = DraftBooking.from_json(raw)
        if draft.is_expired(now or datetime.now()):
            self.delete(draft_id)
            raise DraftNotFound(draft_id)
        return draft

    def delete(self, draft_id: str) -> bool:
        return bool(self.redis.delete(self._key(draft_id)))


def resume_on_login(
    store: DraftStore,
    draft_id: str,
    client: ClientIdentity,
    booking_service,
    now: datetime | None = None,
):
    """
    Book a saved draft for a client who just logged in.

    Returns:
        The created reservation.

    Raises:
        DraftNotFound: draft missing or expired
        SlotConflictError: slot taken meanwhile (draft is discarded)
    """
    from .booking import BookingRequest
    from .reservations import SlotConflictError

    now = now or datetime.now()
    draft = store.get(draft_id, now)

    request = BookingRequest(
        item_id=draft.item_id,
        item_type=draft.item_type,
        date=parse_date(draft.date),
        start_time=parse_time(draft.start_time),
        employee_id=draft.employee_id,
        client_id=client.client_id,
        customer_name=client.full_name,
        customer_email=client.email,
        customer_phone=client.phone,
        notes=draft.notes,
    )

    try:
        reservation = booking_service.submit_booking(request, now=now)
    except SlotConflictError:
        store.delete(draft_id)
        logger.info(f"Draft {draft_id} discarded: slot no longer available")
        raise

    store.delete(draft_id)
    logger.info(f"Draft {draft_id} resumed as reservation {reservation.id}")
    return reservation
