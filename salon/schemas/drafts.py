# salon/schemas/drafts.py

import re
from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator


class DraftCreate(BaseModel):
    item_id: int
    item_type: Literal["service", "combo"] = "service"
    date: date
    start_time: str = Field(description="Time in HH:MM format")
    employee_id: int
    notes: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if not re.match(r"^\d{2}:\d{2}$", v):
            raise ValueError("Time must be in HH:MM format")
        return v


class DraftRead(BaseModel):
    id: str
    item_id: int
    item_type: str
    date: str
    start_time: str
    employee_id: int
    employee_name: str
    notes: Optional[str] = None
    created_at: str
    expires_at: str

    model_config = {"from_attributes": True}


class DraftResume(BaseModel):
    """The client who just logged in."""
    client_id: int
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
