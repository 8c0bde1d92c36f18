"""Blog post entity and the sort vocabulary used across blogfeed.

``BlogPost`` mirrors one element of the provider's ``posts`` array.  It is
frozen so that a cached payload can be handed to any number of concurrent
requests without copying: nobody can mutate a post after decoding.

The provider speaks camelCase (``authorId``); the model accepts either the
wire name or the Python name and serializes back to the wire name when
dumped with ``by_alias=True``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SortField(str, Enum):  # noqa: UP042
    """Fields a merged post list can be ordered by."""

    ID = "id"
    READS = "reads"
    LIKES = "likes"
    POPULARITY = "popularity"


class SortDirection(str, Enum):  # noqa: UP042
    """Sort direction for a merged post list."""

    ASC = "asc"
    DESC = "desc"


class BlogPost(BaseModel):
    """A single blog post as returned by the upstream provider.

    ``id`` is unique within one tag's result set but the same post may
    appear under several tags; the aggregator never deduplicates.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: int
    author: str
    author_id: int = Field(alias="authorId")
    likes: int = Field(ge=0)
    popularity: float
    reads: int = Field(ge=0)
    tags: list[str] = Field(default_factory=list)

    def sort_value(self, field: SortField) -> int | float:
        """Return the value of *field* used for ordering."""
        return getattr(self, field.value)

    def to_wire(self) -> dict:
        """Dump using the provider's field names (``authorId``)."""
        return self.model_dump(by_alias=True)
