"""Dashboard Pydantic v2 response schemas."""


from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel


class CountFigure(BaseModel):
    count: int


class AverageSalaryFigure(BaseModel):
    """Average of current salaries, rounded to cents."""

    value: Decimal
    source: Literal["server", "client"]


class FigureResult(BaseModel):
    """One independently resolved dashboard card."""

    status: Literal["ok", "error"]
    value: Any = None
    error: Optional[str] = None


class DashboardView(BaseModel):
    employee_count: FigureResult
    department_count: FigureResult
    recent_job_history: FigureResult
    average_salary: FigureResult
