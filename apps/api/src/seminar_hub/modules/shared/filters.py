"""
List Filters

Filter shape shared by every tenant-scoped listing: free-text search,
exact-match fields and a created_at date range.

The store has no native substring search, so ``search`` is matched in
memory over the configured fields after the page has been fetched.
Exact and date filters are pushed down into the query.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import Select

from seminar_hub.core.errors import ValidationFailedError


@dataclass
class ListFilters:
    search: str | None = None
    exact: dict[str, Any] = field(default_factory=dict)
    created_from: datetime | None = None
    created_to: datetime | None = None

    def active_exact(self) -> dict[str, Any]:
        """Exact filters with empty values dropped (an empty filter means "any")."""
        return {key: value for key, value in self.exact.items() if value not in (None, "")}


def matches_search(entity: Any, fields: Iterable[str], term: str | None) -> bool:
    """Case-insensitive substring match over any of ``fields``."""
    if not term:
        return True

    needle = term.lower()
    for name in fields:
        value = getattr(entity, name, None)
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        if needle in str(value).lower():
            return True
    return False


def apply_filters(
    query: Select,
    model: type,
    filters: ListFilters,
    allowed_fields: Sequence[str],
) -> Select:
    """
    Push exact-match and date-range filters into a select.

    Raises:
        ValidationFailedError: If an exact filter names a field that is not filterable
    """
    for name, value in filters.active_exact().items():
        if name not in allowed_fields:
            raise ValidationFailedError(
                f"Cannot filter by '{name}'. Allowed: {', '.join(allowed_fields) or 'none'}",
                error_code="INVALID_FILTER",
            )
        query = query.where(getattr(model, name) == value)

    if filters.created_from is not None:
        query = query.where(model.created_at >= filters.created_from)
    if filters.created_to is not None:
        query = query.where(model.created_at <= filters.created_to)

    return query


__all__ = ["ListFilters", "matches_search", "apply_filters"]
