"""blogfeed domain models — re-exports all public model classes.

The models are organized across three submodules:
    - post.py         — BlogPost plus the sort field/direction enums
    - cache.py        — CacheEntry and CacheLookup for the per-tag cache
    - aggregation.py  — AggregationRequest, AggregationResult, TagFailure
"""

from __future__ import annotations

from blogfeed.models.aggregation import (
    AggregationRequest,
    AggregationResult,
    FailureKind,
    TagFailure,
)
from blogfeed.models.cache import CacheEntry, CacheLookup
from blogfeed.models.post import BlogPost, SortDirection, SortField

__all__ = [
    "AggregationRequest",
    "AggregationResult",
    "BlogPost",
    "CacheEntry",
    "CacheLookup",
    "FailureKind",
    "SortDirection",
    "SortField",
    "TagFailure",
]
