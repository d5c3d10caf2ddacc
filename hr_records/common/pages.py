"""Page controllers: one record list plus its create/edit/delete dialog.

A page owns a ``Dialog`` and a hooks object.  User events move the dialog
through its states; submits are validated locally first and only valid
forms reach the hooks (and therefore the backend).
"""

from __future__ import annotations

from typing import Any, ClassVar, Generic, Optional, TypeVar

from pydantic import BaseModel

from hr_records.common.dialogs import Dialog, DialogSnapshot, DialogState
from hr_records.common.exceptions import AppException, ValidationException
from hr_records.common.forms import validate_form

RowT = TypeVar("RowT", bound=BaseModel)


class RecordPage(Generic[RowT]):
    """Generic list + dialog controller; subclasses bind an entity."""

    create_form: ClassVar[type[BaseModel]]
    update_form: ClassVar[type[BaseModel]]

    def __init__(self, hooks: Any) -> None:
        self.hooks = hooks
        self.dialog = Dialog()
        self.rows: list[RowT] = []
        self.load_error: Optional[str] = None

    # ── Subclass contract ───────────────────────────────────────────

    def record_id(self, record: RowT) -> str:
        raise NotImplementedError

    def values_for(self, record: RowT) -> dict[str, Any]:
        return record.model_dump(mode="json")

    def default_values(self) -> dict[str, Any]:
        return {}

    async def delete_warning(self, record: RowT) -> Optional[str]:
        return None

    async def _fetch_rows(self) -> list[RowT]:
        raise NotImplementedError

    # ── Table ───────────────────────────────────────────────────────

    async def load(self) -> list[RowT]:
        """(Re)load the table; a failure leaves an inline error instead of rows."""
        try:
            self.rows = await self._fetch_rows()
            self.load_error = None
        except AppException as exc:
            self.rows = []
            self.load_error = exc.detail
        return self.rows

    # ── Dialog events ───────────────────────────────────────────────

    def open_create(self) -> DialogSnapshot:
        return self.dialog.open_create(self.default_values())

    def open_edit(self, record: RowT) -> DialogSnapshot:
        return self.dialog.open_edit(record, self.values_for(record))

    async def request_delete(self, record: RowT) -> DialogSnapshot:
        return self.dialog.request_delete(record, await self.delete_warning(record))

    def cancel(self) -> DialogSnapshot:
        return self.dialog.cancel()

    async def submit(self, values: dict[str, Any]) -> DialogSnapshot:
        record = self.dialog.snapshot.record
        if self.dialog.state is not DialogState.editing:
            return self.dialog.submit(values)  # raises InvalidTransition

        schema = self.create_form if record is None else self.update_form
        try:
            form = validate_form(schema, values)
        except ValidationException as exc:
            return self.dialog.reject(values, exc.errors or {})

        self.dialog.submit(values)
        try:
            if record is None:
                await self.hooks.create(form)
            else:
                await self.hooks.update(self.record_id(record), form)
        except AppException as exc:
            return self.dialog.fail(exc.detail, exc.errors)
        await self.load()
        return self.dialog.succeed()

    async def confirm_delete(self) -> DialogSnapshot:
        record = self.dialog.snapshot.record
        self.dialog.submit()
        try:
            await self.hooks.delete(self.record_id(record))
        except AppException as exc:
            return self.dialog.fail(exc.detail)
        await self.load()
        return self.dialog.succeed()
