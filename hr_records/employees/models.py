"""Employee ORM model.

Column names follow the hosted database (``employee.empno``,
``firstname`` …); the other naming convention lives only in
``hr_records.adapters``.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_records.database import Base

if TYPE_CHECKING:
    from hr_records.job_history.models import JobHistory


class Employee(Base):
    """Employee record — referenced by job history via ``empno``."""

    __tablename__ = "employee"

    empno: Mapped[str] = mapped_column(sa.String(20), primary_key=True)

    # ── Name ────────────────────────────────────────────────────────
    firstname: Mapped[Optional[str]] = mapped_column(sa.String(50))
    lastname: Mapped[Optional[str]] = mapped_column(sa.String(50))

    # ── Demographics / contact ──────────────────────────────────────
    gender: Mapped[Optional[str]] = mapped_column(sa.String(1))
    birthdate: Mapped[Optional[date]] = mapped_column(sa.Date)
    email: Mapped[Optional[str]] = mapped_column(sa.String(255))

    # ── Employment lifecycle ────────────────────────────────────────
    hiredate: Mapped[Optional[date]] = mapped_column(sa.Date)
    sepdate: Mapped[Optional[date]] = mapped_column(sa.Date)

    # ── Relationships ───────────────────────────────────────────────
    job_history: Mapped[list["JobHistory"]] = relationship(
        back_populates="employee",
        order_by="JobHistory.effdate",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        """Display name, "First Last"."""
        return " ".join(p for p in (self.firstname, self.lastname) if p)

    @property
    def sort_name(self) -> str:
        """Name as shown in pickers, "Last, First"."""
        return ", ".join(p for p in (self.lastname, self.firstname) if p)

    def __repr__(self) -> str:
        return f"<Employee {self.empno} {self.firstname} {self.lastname}>"
