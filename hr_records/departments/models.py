"""Department ORM model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_records.database import Base

if TYPE_CHECKING:
    from hr_records.job_history.models import JobHistory


class Department(Base):
    """Organisational department."""

    __tablename__ = "department"

    deptcode: Mapped[str] = mapped_column(sa.String(20), primary_key=True)
    deptname: Mapped[Optional[str]] = mapped_column(sa.String(50))

    job_history: Mapped[list["JobHistory"]] = relationship(
        back_populates="department",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Department {self.deptcode} {self.deptname!r}>"
