# salon/schemas/reservations.py

import re
from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator


class ReservationCreate(BaseModel):
    item_id: int
    item_type: Literal["service", "combo"] = "service"
    date: date
    start_time: str = Field(description="Time in HH:MM format")
    employee_id: int

    client_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if not re.match(r"^\d{2}:\d{2}$", v):
            raise ValueError("Time must be in HH:MM format")
        return v


class ReservationRead(BaseModel):
    id: int
    employee_id: int
    service_id: Optional[int] = None
    combo_id: Optional[int] = None
    client_id: Optional[int] = None

    appointment_date: str
    start_time: str
    end_time: str
    status: str
    is_guest_booking: bool

    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    final_price_cents: Optional[int] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}
