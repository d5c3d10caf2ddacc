"""Employee Pydantic v2 schemas — form input and table rows.

Naming conventions:
  - *Form / *UpdateForm → dialog inputs (write)
  - *Row                → table rows (read)
"""


from datetime import date
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    model_validator,
)
from pydantic_core import PydanticCustomError

from hr_records.common.constants import CODE_MAX_LENGTH, GenderType
from hr_records.common.forms import blank_to_none, non_negative_salary, required_text

FirstName = Annotated[str, BeforeValidator(required_text("First name")), Field(max_length=50)]
LastName = Annotated[str, BeforeValidator(required_text("Last name")), Field(max_length=50)]
HireDate = Annotated[date, BeforeValidator(required_text("Hire date"))]
OptionalDate = Annotated[Optional[date], BeforeValidator(blank_to_none)]
OptionalCode = Annotated[
    Optional[str], BeforeValidator(blank_to_none), Field(max_length=CODE_MAX_LENGTH),
]
Salary = Annotated[
    Optional[Decimal],
    BeforeValidator(blank_to_none),
    AfterValidator(non_negative_salary),
]


# ═════════════════════════════════════════════════════════════════════
# Read schemas
# ═════════════════════════════════════════════════════════════════════


class AssignmentSummary(BaseModel):
    """An employee's current job-history row with its display fields."""

    effdate: date
    jobcode: str
    jobdesc: Optional[str] = None
    deptcode: Optional[str] = None
    deptname: Optional[str] = None
    salary: Optional[Decimal] = None


class EmployeeRow(BaseModel):
    """Employee table row."""

    model_config = ConfigDict(from_attributes=True)

    empno: str
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    gender: Optional[str] = None
    birthdate: Optional[date] = None
    email: Optional[str] = None
    hiredate: Optional[date] = None
    sepdate: Optional[date] = None
    current: Optional[AssignmentSummary] = None


class EmployeeCreated(BaseModel):
    """Result of the add-employee flow (two independent writes)."""

    employee: EmployeeRow
    assignment_error: Optional[str] = None


# ═════════════════════════════════════════════════════════════════════
# Write schemas
# ═════════════════════════════════════════════════════════════════════


class _AssignmentFields(BaseModel):
    deptcode: OptionalCode = None
    jobcode: OptionalCode = None
    salary: Salary = None

    @property
    def has_assignment(self) -> bool:
        return any(
            name in self.model_fields_set and getattr(self, name) is not None
            for name in ("deptcode", "jobcode", "salary")
        )

    @model_validator(mode="after")
    def _job_required_for_assignment(self):
        if self.has_assignment and not self.jobcode:
            raise PydanticCustomError(
                "required", "Job is required when assigning a department or salary",
            )
        return self


class EmployeeForm(_AssignmentFields):
    """Add-employee dialog.  ``empno`` is generated when left blank."""

    empno: OptionalCode = None
    firstname: FirstName
    lastname: LastName
    gender: Annotated[Optional[GenderType], BeforeValidator(blank_to_none)] = None
    birthdate: OptionalDate = None
    email: Annotated[Optional[EmailStr], BeforeValidator(blank_to_none)] = None
    hiredate: HireDate
    sepdate: OptionalDate = None


class EmployeeUpdateForm(_AssignmentFields):
    """Edit-employee dialog (all fields optional; provided names must be non-blank)."""

    firstname: Optional[FirstName] = None
    lastname: Optional[LastName] = None
    gender: Annotated[Optional[GenderType], BeforeValidator(blank_to_none)] = None
    birthdate: OptionalDate = None
    email: Annotated[Optional[EmailStr], BeforeValidator(blank_to_none)] = None
    hiredate: Optional[HireDate] = None
    sepdate: OptionalDate = None
    effdate: OptionalDate = None

    def employee_changes(self) -> dict:
        """Submitted employee columns (assignment fields excluded)."""
        changes = self.model_dump(
            exclude_unset=True,
            exclude={"deptcode", "jobcode", "salary", "effdate"},
        )
        if isinstance(changes.get("gender"), GenderType):
            changes["gender"] = changes["gender"].value
        # Required columns cannot be cleared from the edit dialog.
        for name in ("firstname", "lastname", "hiredate"):
            if name in changes and changes[name] is None:
                del changes[name]
        return changes
