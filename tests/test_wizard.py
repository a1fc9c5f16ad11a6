"""Test the booking wizard state machine."""
import pytest
from datetime import date, datetime, time

from salon.services.slots import BookableItem, TimeSlot
from salon.services.wizard import (
    BookingWizard,
    CustomerDetails,
    InvalidTransition,
    WizardState,
)

TODAY = date(2029, 12, 31)      # Monday
TUESDAY = date(2030, 1, 1)
SUNDAY = date(2030, 1, 6)

HAIRCUT = BookableItem(1, "Haircut", "service", 60, (1,))
COLOR = BookableItem(2, "Color", "service", 90, (2,))
SLOT = TimeSlot(time(10, 0), 1, "Ana Mora")
GUEST = CustomerDetails(full_name="Carla Ruiz", email="carla@example.com", notes="first visit")


@pytest.fixture
def wizard(calendar):
    return BookingWizard(calendar, today=TODAY, horizon_days=60)


def walk_to_details(wizard):
    wizard.select_service(HAIRCUT)
    wizard.select_date(TUESDAY)
    wizard.select_slot(SLOT)
    return wizard


class TestHappyPaths:

    def test_guest_goes_through_authentication(self, wizard):
        assert wizard.state == WizardState.SELECTING_SERVICE

        assert wizard.select_service(HAIRCUT) == WizardState.SELECTING_DATE
        assert wizard.select_date(TUESDAY) == WizardState.SELECTING_SLOT
        assert wizard.select_slot(SLOT) == WizardState.ENTERING_DETAILS
        assert wizard.enter_details(GUEST) == WizardState.AUTHENTICATING
        assert wizard.authenticate(42) == WizardState.AUTHENTICATING
        assert wizard.submit() == WizardState.SUBMITTING
        assert wizard.confirm(1001) == WizardState.CONFIRMED

        assert wizard.client_id == 42
        assert wizard.reservation_id == 1001

    def test_authenticated_user_skips_authentication(self, calendar):
        wizard = walk_to_details(BookingWizard(calendar, today=TODAY, client_id=7))

        assert wizard.enter_details(CustomerDetails(full_name="Carla", email="")) == WizardState.ENTERING_DETAILS
        assert wizard.submit() == WizardState.SUBMITTING

    def test_guest_booking_without_login(self, calendar):
        wizard = walk_to_details(BookingWizard(calendar, today=TODAY, require_auth=False))

        wizard.enter_details(GUEST)

        assert wizard.submit() == WizardState.SUBMITTING
        assert wizard.client_id is None


class TestGuards:

    def test_cannot_skip_steps(self, wizard):
        with pytest.raises(InvalidTransition):
            wizard.select_slot(SLOT)
        with pytest.raises(InvalidTransition):
            wizard.select_date(TUESDAY)

    @pytest.mark.parametrize("target, reason", [
        (date(2029, 12, 30), "past"),
        (SUNDAY, "closed"),
        (date(2030, 6, 1), "60 days"),
    ])
    def test_date_rejections(self, wizard, target, reason):
        wizard.select_service(HAIRCUT)

        with pytest.raises(InvalidTransition, match=reason):
            wizard.select_date(target)
        assert wizard.state == WizardState.SELECTING_DATE

    def test_today_is_allowed(self, wizard):
        wizard.select_service(HAIRCUT)

        assert wizard.select_date(TODAY) == WizardState.SELECTING_SLOT

    def test_unbookable_item(self, wizard):
        with pytest.raises(InvalidTransition):
            wizard.select_service(BookableItem(3, "Broken", "service", 0, (3,)))

    @pytest.mark.parametrize("details", [
        CustomerDetails(full_name="  ", email="carla@example.com"),
        CustomerDetails(full_name="Carla", email="not-an-email"),
    ])
    def test_guest_details_validated(self, wizard, details):
        walk_to_details(wizard)

        with pytest.raises(InvalidTransition):
            wizard.enter_details(details)
        assert wizard.state == WizardState.ENTERING_DETAILS

    def test_confirm_only_when_submitting(self, wizard):
        walk_to_details(wizard)

        with pytest.raises(InvalidTransition):
            wizard.confirm(1)

    def test_submit_needs_details(self, calendar):
        wizard = walk_to_details(BookingWizard(calendar, today=TODAY, client_id=7))

        with pytest.raises(InvalidTransition, match="details are missing"):
            wizard.submit()
        assert wizard.state == WizardState.ENTERING_DETAILS

    def test_guest_cannot_submit_before_login(self, wizard):
        walk_to_details(wizard)
        wizard.enter_details(GUEST)

        with pytest.raises(InvalidTransition, match="login required"):
            wizard.submit()
        assert wizard.state == WizardState.AUTHENTICATING

    def test_submit_not_allowed_before_slot(self, wizard):
        wizard.select_service(HAIRCUT)
        wizard.select_date(TUESDAY)

        with pytest.raises(InvalidTransition):
            wizard.submit()


class TestNavigation:

    def test_back_walks_to_previous_step(self, wizard):
        walk_to_details(wizard)

        assert wizard.back() == WizardState.SELECTING_SLOT
        assert wizard.back() == WizardState.SELECTING_DATE
        assert wizard.back() == WizardState.SELECTING_SERVICE
        with pytest.raises(InvalidTransition):
            wizard.back()

    def test_changing_service_clears_date_and_slot(self, wizard):
        walk_to_details(wizard)
        wizard.back()
        wizard.back()

        wizard.select_service(COLOR)

        assert wizard.date is None
        assert wizard.slot is None

    def test_changing_date_clears_slot(self, wizard):
        walk_to_details(wizard)
        wizard.back()
        wizard.back()

        wizard.select_date(date(2030, 1, 2))

        assert wizard.slot is None

    def test_slot_taken_returns_to_slot_selection(self, calendar):
        wizard = walk_to_details(BookingWizard(calendar, today=TODAY, client_id=7))
        wizard.enter_details(GUEST)
        wizard.submit()

        assert wizard.slot_taken() == WizardState.SELECTING_SLOT
        assert wizard.slot is None
        assert wizard.date == TUESDAY

    def test_no_back_while_submitting(self, calendar):
        wizard = walk_to_details(BookingWizard(calendar, today=TODAY, client_id=7))
        wizard.enter_details(GUEST)
        wizard.submit()

        with pytest.raises(InvalidTransition):
            wizard.back()


class TestDrafts:

    def test_draft_snapshot(self, wizard):
        walk_to_details(wizard)
        wizard.enter_details(GUEST)
        now = datetime(2029, 12, 31, 15, 0)

        draft = wizard.to_draft(ttl_seconds=3600, now=now)

        assert draft.item_id == HAIRCUT.id
        assert draft.item_type == "service"
        assert draft.date == "2030-01-01"
        assert draft.start_time == "10:00"
        assert draft.employee_id == 1
        assert draft.notes == "first visit"
        assert draft.expires_at == "2029-12-31T16:00:00"

    def test_incomplete_booking_has_no_draft(self, wizard):
        wizard.select_service(HAIRCUT)

        with pytest.raises(InvalidTransition):
            wizard.to_draft(ttl_seconds=3600, now=datetime(2029, 12, 31, 15, 0))
