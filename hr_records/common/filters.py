"""Generic filtering, sorting, and text search utilities."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from sqlalchemy import Select, String, and_, cast, or_
from sqlalchemy.orm import ColumnProperty, InstrumentedAttribute


# ── Sorting ─────────────────────────────────────────────────────────

def apply_sorting(
    query: Select,
    model: Any,
    sort: Optional[str],
    *,
    default: Sequence[str] = (),
) -> Select:
    """
    Parse a sort string like ``"-effdate"`` and apply ORDER BY.

    * Leading ``-`` → DESC; otherwise ASC.
    * Names that are not columns (unknown, relationships) fall back to
      *default*.
    """
    keys = [sort] if sort and _get_column(model, sort.lstrip("-")) is not None else list(default)

    for key in keys:
        descending = key.startswith("-")
        col = _get_column(model, key.lstrip("-"))
        if col is not None:
            query = query.order_by(col.desc() if descending else col.asc())
    return query


# ── Equality filtering ──────────────────────────────────────────────

def apply_filters(
    query: Select,
    model: Any,
    filters: dict[str, Any],
) -> Select:
    """Narrow *query* to rows whose columns equal every given value.

    ``None`` values are skipped and unknown names ignored; the remaining
    conditions combine with AND.
    """
    conditions = []
    for name, value in filters.items():
        col = _get_column(model, name)
        if col is not None and value is not None:
            conditions.append(col == value)

    if conditions:
        query = query.where(and_(*conditions))
    return query


# ── Text search ─────────────────────────────────────────────────────

def apply_search(
    query: Select,
    model: Any,
    search: Optional[str],
    columns: Sequence[str],
) -> Select:
    """Match *search* case-insensitively against any of *columns*."""
    if not search or not search.strip():
        return query

    search = search.strip()
    like_conds = [
        cast(col, String).ilike(f"%{search}%")
        for col in (_get_column(model, name) for name in columns)
        if col is not None
    ]
    if not like_conds:
        return query
    return query.where(or_(*like_conds))


# ── Internal helper ─────────────────────────────────────────────────

def _get_column(model: Any, name: str) -> Optional[InstrumentedAttribute]:
    """Mapped column attribute called *name*.

    Relationships and plain properties are not columns and give ``None``.
    """
    attr = getattr(model, name, None)
    if isinstance(attr, InstrumentedAttribute) and isinstance(attr.property, ColumnProperty):
        return attr
    return None
