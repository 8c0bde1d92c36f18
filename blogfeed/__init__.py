"""blogfeed — tag-based blog post aggregation service."""

__version__ = "0.1.0"
