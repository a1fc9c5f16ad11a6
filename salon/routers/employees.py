# salon/routers/employees.py
# Read-only: staff is managed by the admin back-office

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.employees import EmployeeRead
from ..services.slots import Employee
from ..services.staff import EmployeeNotFound, StaffDirectory

router = APIRouter(prefix="/employees", tags=["employees"])


def _to_read(e: Employee) -> EmployeeRead:
    return EmployeeRead(
        id=e.id,
        full_name=e.full_name,
        qualified_service_ids=sorted(e.qualified_service_ids),
    )


@router.get("/", response_model=list[EmployeeRead])
def list_employees(service_id: int | None = None, db: Session = Depends(get_db)):
    staff = StaffDirectory(db)
    if service_id is not None:
        employees = staff.get_employees_qualified_for([service_id])
    else:
        employees = staff.list_employees()
    return [_to_read(e) for e in employees]


@router.get("/{id}", response_model=EmployeeRead)
def get_employee(id: int, db: Session = Depends(get_db)):
    try:
        return _to_read(StaffDirectory(db).get_employee(id))
    except EmployeeNotFound:
        raise HTTPException(status_code=404, detail="Not found")
