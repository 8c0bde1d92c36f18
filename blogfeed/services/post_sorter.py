"""Ordering of merged post lists.

Sorting is stable in both directions: ``sorted(..., reverse=True)`` keeps
equal elements in their input order, so ties never depend on which tag
finished first once the merge order is fixed.
"""

from __future__ import annotations

from collections.abc import Iterable

from blogfeed.models.post import BlogPost, SortDirection, SortField
from blogfeed.utils.errors import InvalidSortError


def _coerce_field(sort_by: SortField | str) -> SortField:
    try:
        return SortField(sort_by)
    except ValueError as exc:
        allowed = ", ".join(f.value for f in SortField)
        raise InvalidSortError(
            message=f"Unknown sort field {sort_by!r}; expected one of: {allowed}"
        ) from exc


def _coerce_direction(direction: SortDirection | str) -> SortDirection:
    try:
        return SortDirection(direction)
    except ValueError as exc:
        allowed = ", ".join(d.value for d in SortDirection)
        raise InvalidSortError(
            message=f"Unknown sort direction {direction!r}; expected one of: {allowed}"
        ) from exc


def validate_sort(
    sort_by: SortField | str,
    direction: SortDirection | str,
) -> tuple[SortField, SortDirection]:
    """Coerce *sort_by* and *direction* to their enums or raise InvalidSortError."""
    return _coerce_field(sort_by), _coerce_direction(direction)


def sort_posts(
    posts: Iterable[BlogPost],
    sort_by: SortField | str = SortField.ID,
    direction: SortDirection | str = SortDirection.ASC,
) -> list[BlogPost]:
    """Return a new list of *posts* ordered by *sort_by* in *direction*.

    Raises
    ------
    InvalidSortError
        *sort_by* or *direction* is not one of the recognised values.
    """
    field, order = validate_sort(sort_by, direction)
    return sorted(
        posts,
        key=lambda post: post.sort_value(field),
        reverse=order is SortDirection.DESC,
    )
