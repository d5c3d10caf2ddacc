"""Enums and constants for HR Records."""

from __future__ import annotations

import enum


# ── Employee ────────────────────────────────────────────────────────

class GenderType(str, enum.Enum):
    male = "M"
    female = "F"
    other = "O"


# ── Notifications ───────────────────────────────────────────────────

class Severity(str, enum.Enum):
    """Toast variants understood by the UI."""

    default = "default"
    destructive = "destructive"


# ── Record-keeping policies ─────────────────────────────────────────

class JobHistoryEditPolicy(str, enum.Enum):
    overwrite = "overwrite"
    append = "append"


class DeleteCascadePolicy(str, enum.Enum):
    job_history = "job_history"
    none = "none"


# ── Query cache key families ────────────────────────────────────────

EMPLOYEES = "employees"
EMPLOYEE_OPTIONS = "employee_options"
EMPLOYEE_COUNT = "employee_count"
DEPARTMENTS_WITH_COUNT = "departments_with_count"
DEPARTMENT_OPTIONS = "department_options"
DEPARTMENT_COUNT = "department_count"
JOBS = "jobs"
JOB_HISTORY = "job_history"
RECENT_JOB_HISTORY = "recent_job_history"
AVERAGE_SALARY = "average_salary"


# ── Misc ────────────────────────────────────────────────────────────

RECENT_JOB_HISTORY_LIMIT = 5
CODE_MAX_LENGTH = 20
