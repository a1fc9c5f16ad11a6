# salon/schemas/catalog.py

from typing import Literal, Optional
from pydantic import BaseModel


class BookableItemRead(BaseModel):
    id: int
    name: str
    type: Literal["service", "combo"]
    description: Optional[str] = None
    duration_minutes: int
    component_service_ids: list[int]
    category_id: Optional[int] = None

    original_price_cents: int
    final_price_cents: int
    savings_cents: int
    applied_discount_id: Optional[int] = None

    model_config = {"from_attributes": True}
