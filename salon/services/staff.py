# salon/services/staff.py
"""
Staff directory: employees, their service qualifications and schedules.
"""

from collections.abc import Iterable
from datetime import date

from sqlalchemy.orm import Session

from ..models.generated import (
    Employees as DBEmployee,
    EmployeeSchedules as DBEmployeeSchedule,
    t_employee_services,
)
from .slots.domain import Employee, WorkingHours


class EmployeeNotFound(LookupError):
    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Active employee {employee_id} not found")


class StaffDirectory:
    """Read-only access to employees."""

    def __init__(self, db: Session):
        self.db = db

    def list_employees(self) -> list[Employee]:
        """Active employees ordered by full name."""
        rows = (
            self.db.query(DBEmployee)
            .filter(DBEmployee.is_active == 1)
            .order_by(DBEmployee.full_name, DBEmployee.id)
            .all()
        )
        qualified = self._qualifications([r.id for r in rows])
        return [
            Employee(
                id=r.id,
                full_name=r.full_name,
                qualified_service_ids=frozenset(qualified.get(r.id, ())),
            )
            for r in rows
        ]

    def get_employee(self, employee_id: int) -> Employee:
        row = (
            self.db.query(DBEmployee)
            .filter(DBEmployee.id == employee_id, DBEmployee.is_active == 1)
            .first()
        )
        if not row:
            raise EmployeeNotFound(employee_id)
        qualified = self._qualifications([row.id])
        return Employee(
            id=row.id,
            full_name=row.full_name,
            qualified_service_ids=frozenset(qualified.get(row.id, ())),
        )

    def get_employees_qualified_for(self, service_ids: Iterable[int]) -> list[Employee]:
        """Active employees qualified for every one of service_ids."""
        required = set(service_ids)
        return [
            e for e in self.list_employees()
            if required <= e.qualified_service_ids
        ]

    def get_working_hours(self, target_date: date) -> dict[int, WorkingHours] | None:
        """
        Working windows for target_date's weekday.

        Returns:
            None when no schedules are configured at all (no restriction),
            otherwise employee_id → WorkingHours for employees working that day.
        """
        if self.db.query(DBEmployeeSchedule.id).first() is None:
            return None

        rows = (
            self.db.query(DBEmployeeSchedule)
            .filter(
                DBEmployeeSchedule.day_of_week == target_date.weekday(),
                DBEmployeeSchedule.is_available == 1,
            )
            .order_by(DBEmployeeSchedule.id)
            .all()
        )
        hours: dict[int, WorkingHours] = {}
        for row in rows:
            # First row wins if an employee has duplicates
            hours.setdefault(row.employee_id, WorkingHours(row.start_time, row.end_time))
        return hours

    def _qualifications(self, employee_ids: list[int]) -> dict[int, set[int]]:
        if not employee_ids:
            return {}
        rows = self.db.execute(
            t_employee_services.select().where(
                t_employee_services.c.employee_id.in_(employee_ids)
            )
        ).mappings().all()

        result: dict[int, set[int]] = {}
        for row in rows:
            result.setdefault(row["employee_id"], set()).add(row["service_id"])
        return result
