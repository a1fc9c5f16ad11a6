# salon/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from datetime import date
from pydantic import BaseModel, Field


class TimeSlotRead(BaseModel):
    """One bookable start time for one employee."""
    start_time: str = Field(description="HH:MM")
    end_time: str = Field(description="HH:MM (may pass closing time)")
    employee_id: int
    employee_name: str


class SlotsDayResponse(BaseModel):
    """Available slots for an item on a day."""
    item_id: int
    item_type: str
    date: date
    duration_minutes: int
    employee_id: int | None = None
    slots: list[TimeSlotRead]

    # Metadata
    open_hour: int
    close_hour: int
    slot_granularity_minutes: int
