"""Schemas shared across entity modules."""

from typing import Optional

from pydantic import BaseModel


class DeletePreview(BaseModel):
    """What the confirm-delete dialog shows before a delete.

    The warning is advisory: a delete is never blocked by dependents.
    """

    record_id: str
    label: str
    dependents: int = 0
    warning: Optional[str] = None


class OptionItem(BaseModel):
    """One entry of a filter picker / dropdown."""

    value: str
    label: str
