"""Job and JobHistory ORM models.

A job-history row is keyed by (employee, effective date); the row with
the latest ``effdate`` is the employee's current assignment.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_records.database import Base
from hr_records.departments.models import Department
from hr_records.employees.models import Employee


class Job(Base):
    """Job title / position."""

    __tablename__ = "job"

    jobcode: Mapped[str] = mapped_column(sa.String(20), primary_key=True)
    jobdesc: Mapped[Optional[str]] = mapped_column(sa.String(100))

    def __repr__(self) -> str:
        return f"<Job {self.jobcode} {self.jobdesc!r}>"


class JobHistory(Base):
    """One dated assignment of an employee to a job and department."""

    __tablename__ = "jobhistory"

    empno: Mapped[str] = mapped_column(
        sa.String(20), sa.ForeignKey("employee.empno"), primary_key=True,
    )
    effdate: Mapped[date] = mapped_column(sa.Date, primary_key=True)
    jobcode: Mapped[str] = mapped_column(
        sa.String(20), sa.ForeignKey("job.jobcode"), nullable=False,
    )
    deptcode: Mapped[Optional[str]] = mapped_column(
        sa.String(20), sa.ForeignKey("department.deptcode"),
    )
    salary: Mapped[Optional[Decimal]] = mapped_column(sa.Numeric(12, 2))

    # ── Relationships ───────────────────────────────────────────────
    employee: Mapped[Employee] = relationship(back_populates="job_history")
    department: Mapped[Optional[Department]] = relationship(back_populates="job_history")
    job: Mapped[Job] = relationship()

    def __repr__(self) -> str:
        return f"<JobHistory {self.empno} @ {self.effdate} {self.jobcode}/{self.deptcode}>"
