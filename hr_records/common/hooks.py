"""Base class for the per-entity data-access hooks.

A hook object wraps one entity's list queries and mutations:

* reads go through the shared ``QueryCache`` (one backend call per key
  in flight, cached until invalidated);
* writes run in exactly one unit of work on the ``RecordStore``; on
  success the affected key families are invalidated and a success toast
  is fired, on failure an error toast carrying the backend message is
  fired and the error is re-raised for the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, ClassVar, Optional, Sequence, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_records.common.cache import QueryCache, QueryKey
from hr_records.common.exceptions import AppException, translate_db_error
from hr_records.config import Settings, settings as default_settings
from hr_records.database import RecordStore
from hr_records.notifications.service import Notifier

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PAST_TENSE = {
    "add": "added",
    "update": "updated",
    "delete": "deleted",
    "record": "recorded",
}


class RecordHooks:
    """Shared query/mutation plumbing for one entity type."""

    entity: ClassVar[str] = "Record"
    plural: ClassVar[str] = "records"
    invalidates: ClassVar[Sequence[str]] = ()

    def __init__(
        self,
        store: RecordStore,
        cache: QueryCache,
        notifier: Notifier,
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        self.store = store
        self.cache = cache
        self.notifier = notifier
        self.settings = settings or default_settings

    # ── Reads ───────────────────────────────────────────────────────

    async def _read(self, operation: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """Run *operation* in its own session, uncached."""
        try:
            async with self.store.session() as db:
                return await operation(db)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc, entity_type=self.entity) from exc

    async def _cached(
        self,
        key: QueryKey,
        loader: Callable[[], Awaitable[T]],
        *,
        label: Optional[str] = None,
    ) -> T:
        try:
            return await self.cache.fetch(key, loader)
        except AppException as exc:
            self.notifier.error(f"Failed to load {label or self.plural}: {exc.detail}")
            raise

    async def _query(
        self,
        key: QueryKey,
        operation: Callable[[AsyncSession], Awaitable[T]],
        *,
        label: Optional[str] = None,
    ) -> T:
        return await self._cached(key, lambda: self._read(operation), label=label)

    # ── Writes ──────────────────────────────────────────────────────

    async def _mutate(
        self,
        verb: str,
        operation: Callable[[AsyncSession], Awaitable[T]],
        *,
        entity_id: Any = None,
        invalidates: Optional[Sequence[str]] = None,
        success_message: Optional[str] = None,
    ) -> T:
        try:
            async with self.store.session() as db:
                result = await operation(db)
        except SQLAlchemyError as exc:
            error = translate_db_error(exc, entity_type=self.entity, entity_id=entity_id)
            self._report_failure(verb, error)
            raise error from exc
        except AppException as exc:
            self._report_failure(verb, exc)
            raise

        self.cache.invalidate(*(invalidates if invalidates is not None else self.invalidates))
        self.notifier.success(
            success_message or f"{self.entity} has been {_PAST_TENSE.get(verb, verb)}",
        )
        logger.info("%s %s %s", self.entity, _PAST_TENSE.get(verb, verb), entity_id or "")
        return result

    def _report_failure(self, verb: str, exc: AppException) -> None:
        self.notifier.error(f"Failed to {verb} {self.entity.lower()}: {exc.detail}")
