# salon/services/wizard.py
"""
Booking wizard as an explicit finite state machine.

    SELECTING_SERVICE → SELECTING_DATE → SELECTING_SLOT → ENTERING_DETAILS
        → AUTHENTICATING (guests, when login is required)
        → SUBMITTING → CONFIRMED

Every transition is gated by a validation predicate. Only submit() enters
SUBMITTING. A slot lost to a concurrent booking sends the wizard back to
SELECTING_SLOT.
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from .drafts import DraftBooking
from .slots import BookableItem, BusinessCalendar, TimeSlot

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class WizardState(str, Enum):
    SELECTING_SERVICE = "selecting_service"
    SELECTING_DATE = "selecting_date"
    SELECTING_SLOT = "selecting_slot"
    ENTERING_DETAILS = "entering_details"
    AUTHENTICATING = "authenticating"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"


class InvalidTransition(Exception):
    def __init__(self, state: WizardState, action: str, reason: str = ""):
        self.state = state
        self.action = action
        message = f"Cannot {action} while {state.value}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


@dataclass(frozen=True)
class CustomerDetails:
    full_name: str
    email: str
    phone: Optional[str] = None
    notes: Optional[str] = None


# Where back() leads from each state
_PREVIOUS = {
    WizardState.SELECTING_DATE: WizardState.SELECTING_SERVICE,
    WizardState.SELECTING_SLOT: WizardState.SELECTING_DATE,
    WizardState.ENTERING_DETAILS: WizardState.SELECTING_SLOT,
    WizardState.AUTHENTICATING: WizardState.ENTERING_DETAILS,
}


class BookingWizard:

    def __init__(
        self,
        calendar: BusinessCalendar,
        today: date,
        client_id: int | None = None,
        require_auth: bool = True,
        horizon_days: int | None = None,
    ):
        self.calendar = calendar
        self.today = today
        self.client_id = client_id
        self.require_auth = require_auth
        self.horizon_days = horizon_days

        self.state = WizardState.SELECTING_SERVICE
        self.item: BookableItem | None = None
        self.date: date | None = None
        self.slot: TimeSlot | None = None
        self.details: CustomerDetails | None = None
        self.reservation_id: int | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.client_id is not None

    # ── Transitions ──────────────────────────────────────────────────────

    def select_service(self, item: BookableItem) -> WizardState:
        self._expect("select a service", WizardState.SELECTING_SERVICE, WizardState.SELECTING_DATE)
        if item is None or item.duration_minutes <= 0:
            raise InvalidTransition(self.state, "select a service", "item is not bookable")
        if self.item is not None and self.item != item:
            self.date = None
            self.slot = None
        self.item = item
        return self._go(WizardState.SELECTING_DATE)

    def select_date(self, target_date: date) -> WizardState:
        self._expect("select a date", WizardState.SELECTING_DATE, WizardState.SELECTING_SLOT)
        reason = self.date_rejection(target_date)
        if reason:
            raise InvalidTransition(self.state, "select a date", reason)
        if self.date != target_date:
            self.slot = None
        self.date = target_date
        return self._go(WizardState.SELECTING_SLOT)

    def select_slot(self, slot: TimeSlot) -> WizardState:
        self._expect("select a slot", WizardState.SELECTING_SLOT)
        if slot is None:
            raise InvalidTransition(self.state, "select a slot", "no slot given")
        self.slot = slot
        return self._go(WizardState.ENTERING_DETAILS)

    def enter_details(self, details: CustomerDetails) -> WizardState:
        """Store contact details; guests who must log in go to AUTHENTICATING."""
        self._expect("enter details", WizardState.ENTERING_DETAILS)
        reason = self.details_rejection(details)
        if reason:
            raise InvalidTransition(self.state, "enter details", reason)
        self.details = details
        if self.require_auth and not self.is_authenticated:
            return self._go(WizardState.AUTHENTICATING)
        return self.state

    def authenticate(self, client_id: int) -> WizardState:
        self._expect("authenticate", WizardState.AUTHENTICATING)
        if client_id is None:
            raise InvalidTransition(self.state, "authenticate", "client id required")
        self.client_id = client_id
        return self.state

    def submit(self) -> WizardState:
        self._expect("submit", WizardState.ENTERING_DETAILS, WizardState.AUTHENTICATING)
        reason = self.submit_rejection()
        if reason:
            raise InvalidTransition(self.state, "submit", reason)
        return self._go(WizardState.SUBMITTING)

    def confirm(self, reservation_id: int) -> WizardState:
        self._expect("confirm", WizardState.SUBMITTING)
        self.reservation_id = reservation_id
        return self._go(WizardState.CONFIRMED)

    def slot_taken(self) -> WizardState:
        """Submission hit a conflict: pick another slot."""
        self._expect("handle a taken slot", WizardState.SUBMITTING)
        self.slot = None
        return self._go(WizardState.SELECTING_SLOT)

    def back(self) -> WizardState:
        previous = _PREVIOUS.get(self.state)
        if previous is None:
            raise InvalidTransition(self.state, "go back")
        return self._go(previous)

    # ── Predicates ───────────────────────────────────────────────────────

    def date_rejection(self, target_date: date) -> str | None:
        if target_date is None:
            return "no date given"
        if target_date < self.today:
            return "date is in the past"
        if self.horizon_days is not None and target_date > self.today + timedelta(days=self.horizon_days):
            return f"date is more than {self.horizon_days} days ahead"
        if self.calendar.is_closed(target_date):
            return "the salon is closed that day"
        return None

    def details_rejection(self, details: CustomerDetails) -> str | None:
        if details is None:
            return "no details given"
        if not details.full_name or not details.full_name.strip():
            return "name is required"
        if not self.is_authenticated and not EMAIL_RE.match(details.email or ""):
            return "a valid email is required"
        return None

    def submit_rejection(self) -> str | None:
        if self.item is None:
            return "no service selected"
        if self.date is None:
            return "no date selected"
        if self.slot is None:
            return "no slot selected"
        if self.details is None:
            return "details are missing"
        if self.require_auth and not self.is_authenticated:
            return "login required"
        return None

    # ── Drafts ───────────────────────────────────────────────────────────

    def to_draft(self, ttl_seconds: int, now) -> DraftBooking:
        """Snapshot the chosen booking so it survives the login redirect."""
        if self.item is None or self.date is None or self.slot is None:
            raise InvalidTransition(self.state, "save a draft", "booking is incomplete")
        return DraftBooking.create(
            item=self.item,
            target_date=self.date,
            slot=self.slot,
            notes=self.details.notes if self.details else None,
            now=now,
            ttl_seconds=ttl_seconds,
        )

    # ── Internals ────────────────────────────────────────────────────────

    def _expect(self, action: str, *states: WizardState) -> None:
        if self.state not in states:
            raise InvalidTransition(self.state, action)

    def _go(self, state: WizardState) -> WizardState:
        self.state = state
        return state
