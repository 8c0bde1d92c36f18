"""Upstream blog-post providers."""

from blogfeed.providers.posts.hatchways_provider import (
    HatchwaysPostProvider,
    decode_posts,
    strip_envelope,
)

__all__ = ["HatchwaysPostProvider", "decode_posts", "strip_envelope"]
