# salon/schemas/employees.py

from pydantic import BaseModel


class EmployeeRead(BaseModel):
    id: int
    full_name: str
    qualified_service_ids: list[int]

    model_config = {"from_attributes": True}
