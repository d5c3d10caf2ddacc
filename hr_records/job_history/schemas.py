"""Job and job-history Pydantic v2 schemas."""


from datetime import date
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field

from hr_records.common.constants import CODE_MAX_LENGTH
from hr_records.common.forms import blank_to_none, non_negative_salary, required_text


class JobOption(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    jobcode: str
    jobdesc: Optional[str] = None


class JobHistoryRow(BaseModel):
    """Job-history row with one hop of joined display fields."""

    empno: str
    effdate: date
    jobcode: str
    deptcode: Optional[str] = None
    salary: Optional[Decimal] = None
    employee_name: Optional[str] = None
    deptname: Optional[str] = None
    jobdesc: Optional[str] = None


class AssignmentForm(BaseModel):
    """Record (or correct) an employee's job assignment."""

    jobcode: Annotated[
        str, BeforeValidator(required_text("Job")), Field(max_length=CODE_MAX_LENGTH),
    ]
    deptcode: Annotated[
        Optional[str], BeforeValidator(blank_to_none), Field(max_length=CODE_MAX_LENGTH),
    ] = None
    salary: Annotated[
        Optional[Decimal], BeforeValidator(blank_to_none), AfterValidator(non_negative_salary),
    ] = None
    effdate: Annotated[Optional[date], BeforeValidator(blank_to_none)] = None


class FilterLabel(BaseModel):
    """A removable active-filter chip."""

    key: str
    value: str
    label: str


class JobHistoryView(BaseModel):
    rows: list[JobHistoryRow]
    filters: list[FilterLabel] = []
