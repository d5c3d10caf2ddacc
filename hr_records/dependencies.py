"""Shared FastAPI dependencies — hooks wired to the app's store, cache and notifier."""

from fastapi import Depends

from hr_records.common.cache import QueryCache, get_cache
from hr_records.dashboard.hooks import DashboardHooks
from hr_records.database import RecordStore, get_store
from hr_records.departments.hooks import DepartmentHooks
from hr_records.employees.hooks import EmployeeHooks
from hr_records.job_history.hooks import JobHistoryHooks
from hr_records.notifications.service import Notifier, get_notifier


def get_employee_hooks(
    store: RecordStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    notifier: Notifier = Depends(get_notifier),
) -> EmployeeHooks:
    return EmployeeHooks(store, cache, notifier)


def get_department_hooks(
    store: RecordStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    notifier: Notifier = Depends(get_notifier),
) -> DepartmentHooks:
    return DepartmentHooks(store, cache, notifier)


def get_job_history_hooks(
    store: RecordStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    notifier: Notifier = Depends(get_notifier),
) -> JobHistoryHooks:
    return JobHistoryHooks(store, cache, notifier)


def get_dashboard_hooks(
    store: RecordStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
    notifier: Notifier = Depends(get_notifier),
) -> DashboardHooks:
    return DashboardHooks(store, cache, notifier)
