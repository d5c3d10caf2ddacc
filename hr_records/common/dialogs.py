"""Dialog flow for record pages as an explicit state machine.

States:  idle → editing(record | None) → submitting → idle
         idle → confirming_delete(record) → submitting → idle

A failed submit returns to the state it came from with the user's input,
the selected record and the error kept, so the dialog stays open.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Optional


class DialogState(str, enum.Enum):
    idle = "idle"
    editing = "editing"
    confirming_delete = "confirming_delete"
    submitting = "submitting"


class InvalidTransition(Exception):
    """Raised when an event is not allowed in the current state."""

    def __init__(self, state: DialogState, event: str) -> None:
        self.state = state
        self.event = event
        super().__init__(f"Cannot {event} while dialog is {state.value}.")


@dataclass(frozen=True)
class DialogSnapshot:
    state: DialogState = DialogState.idle
    record: Optional[Any] = None
    values: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict)
    message: Optional[str] = None
    warning: Optional[str] = None
    # The state a submit started from; failures return there.
    origin: Optional[DialogState] = None

    @property
    def is_open(self) -> bool:
        return self.state is not DialogState.idle

    @property
    def is_create(self) -> bool:
        return self.state is DialogState.editing and self.record is None


class Dialog:
    """Mutable holder driving ``DialogSnapshot`` transitions."""

    def __init__(self) -> None:
        self.snapshot = DialogSnapshot()

    @property
    def state(self) -> DialogState:
        return self.snapshot.state

    def _require(self, event: str, *allowed: DialogState) -> None:
        if self.snapshot.state not in allowed:
            raise InvalidTransition(self.snapshot.state, event)

    # ── User events ─────────────────────────────────────────────────

    def open_create(self, defaults: Optional[dict[str, Any]] = None) -> DialogSnapshot:
        self._require("open create dialog", DialogState.idle)
        self.snapshot = DialogSnapshot(DialogState.editing, values=dict(defaults or {}))
        return self.snapshot

    def open_edit(self, record: Any, values: dict[str, Any]) -> DialogSnapshot:
        self._require("open edit dialog", DialogState.idle)
        self.snapshot = DialogSnapshot(DialogState.editing, record=record, values=dict(values))
        return self.snapshot

    def request_delete(self, record: Any, warning: Optional[str] = None) -> DialogSnapshot:
        self._require("request delete", DialogState.idle)
        self.snapshot = DialogSnapshot(
            DialogState.confirming_delete, record=record, warning=warning,
        )
        return self.snapshot

    def reject(self, values: dict[str, Any], errors: dict[str, list[str]]) -> DialogSnapshot:
        """Local validation failed: stay in editing with field errors."""
        self._require("show field errors", DialogState.editing)
        self.snapshot = replace(self.snapshot, values=dict(values), errors=errors, message=None)
        return self.snapshot

    def submit(self, values: Optional[dict[str, Any]] = None) -> DialogSnapshot:
        self._require("submit", DialogState.editing, DialogState.confirming_delete)
        self.snapshot = replace(
            self.snapshot,
            state=DialogState.submitting,
            values=dict(values) if values is not None else self.snapshot.values,
            errors={},
            message=None,
            origin=self.snapshot.state,
        )
        return self.snapshot

    def cancel(self) -> DialogSnapshot:
        self._require("cancel", DialogState.editing, DialogState.confirming_delete)
        self.snapshot = DialogSnapshot()
        return self.snapshot

    # ── Request outcomes ────────────────────────────────────────────

    def succeed(self) -> DialogSnapshot:
        self._require("complete", DialogState.submitting)
        self.snapshot = DialogSnapshot()
        return self.snapshot

    def fail(
        self,
        message: str,
        errors: Optional[dict[str, list[str]]] = None,
    ) -> DialogSnapshot:
        self._require("fail", DialogState.submitting)
        self.snapshot = replace(
            self.snapshot,
            state=self.snapshot.origin or DialogState.editing,
            errors=errors or {},
            message=message,
            origin=None,
        )
        return self.snapshot
