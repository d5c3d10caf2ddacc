"""Department Pydantic v2 schemas."""


from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from hr_records.common.constants import CODE_MAX_LENGTH
from hr_records.common.forms import blank_to_none, required_text

DepartmentName = Annotated[
    str, BeforeValidator(required_text("Department name")), Field(max_length=50),
]


class DepartmentRow(BaseModel):
    """Department plus the number of job-history rows referencing it."""

    model_config = ConfigDict(from_attributes=True)

    deptcode: str
    deptname: Optional[str] = None
    employee_count: int = 0


class DepartmentForm(BaseModel):
    """Add-department dialog.  ``deptcode`` is generated when left blank."""

    deptcode: Annotated[
        Optional[str], BeforeValidator(blank_to_none), Field(max_length=CODE_MAX_LENGTH),
    ] = None
    deptname: DepartmentName


class DepartmentUpdateForm(BaseModel):
    """Edit-department dialog."""

    deptname: DepartmentName
