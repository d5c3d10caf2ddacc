"""Display-shape adapter for clients built against the older naming.

Storage and services use ``empno`` / ``firstname`` / ``deptcode`` …;
some UI components expect ``id`` / ``first_name`` / ``name``.  The
conversion happens only at the HTTP boundary (``?shape=display``).
"""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel

from hr_records.departments.schemas import DepartmentRow
from hr_records.employees.schemas import EmployeeRow

Shape = Literal["record", "display"]


class EmployeeDisplay(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    hire_date: Optional[date] = None
    department_id: Optional[str] = None
    job_title: Optional[str] = None


class DepartmentDisplay(BaseModel):
    id: str
    name: Optional[str] = None
    employee_count: Optional[int] = None


def employee_to_display(row: EmployeeRow) -> EmployeeDisplay:
    return EmployeeDisplay(
        id=row.empno,
        first_name=row.firstname,
        last_name=row.lastname,
        email=row.email,
        hire_date=row.hiredate,
        department_id=row.current.deptcode if row.current else None,
        job_title=row.current.jobdesc if row.current else None,
    )


def department_to_display(row: DepartmentRow) -> DepartmentDisplay:
    return DepartmentDisplay(
        id=row.deptcode,
        name=row.deptname,
        employee_count=row.employee_count,
    )


def employee_from_display(payload: dict) -> dict:
    """Map a display-shaped employee payload onto form field names.

    Keys already in the storage convention pass through unchanged.
    """
    renames = {
        "id": "empno",
        "first_name": "firstname",
        "last_name": "lastname",
        "hire_date": "hiredate",
        "department_id": "deptcode",
    }
    return {renames.get(key, key): value for key, value in payload.items()}
