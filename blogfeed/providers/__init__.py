"""Adapters for blogfeed's external collaborators (cache, upstream posts API)."""
