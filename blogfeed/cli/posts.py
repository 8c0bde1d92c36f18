"""Standalone CLI for one multi-tag aggregation without the web server.

Usage::

    python -m blogfeed.cli.posts --tags tech,health
    python -m blogfeed.cli.posts --tags tech --sort-by likes --direction desc
    python -m blogfeed.cli.posts --tags tech,science --json

Posts go to stdout (a text table, or a JSON array with ``--json``); failed
tags are reported on stderr.  Exit status is 0 on success, 1 when every tag
failed, and 2 for invalid arguments.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

import httpx

from blogfeed.config.settings import Settings
from blogfeed.models.aggregation import AggregationResult
from blogfeed.models.post import SortDirection, SortField
from blogfeed.providers.cache.memory_cache import MemoryPostCache
from blogfeed.providers.posts.hatchways_provider import HatchwaysPostProvider
from blogfeed.services.aggregation_service import PostAggregationService
from blogfeed.utils.logging import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blogfeed-posts",
        description="Fetch, merge and sort blog posts for one or more tags.",
    )
    parser.add_argument(
        "--tags",
        required=True,
        help="Comma-separated tags, e.g. tech,health",
    )
    parser.add_argument(
        "--sort-by",
        default=SortField.ID.value,
        choices=[f.value for f in SortField],
        help="Field to sort by (default: id)",
    )
    parser.add_argument(
        "--direction",
        default=SortDirection.ASC.value,
        choices=[d.value for d in SortDirection],
        help="Sort direction (default: asc)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the posts as a JSON array",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Override the provider base URL",
    )
    return parser


def _format_table(result: AggregationResult) -> str:
    lines = [f"{'id':>6}  {'likes':>6}  {'reads':>8}  {'popularity':>10}  author"]
    lines.append("-" * 60)
    for post in result.posts:
        lines.append(
            f"{post.id:>6}  {post.likes:>6}  {post.reads:>8}  "
            f"{post.popularity:>10.2f}  {post.author}"
        )
    lines.append("")
    lines.append(f"{len(result.posts)} post(s)")
    return "\n".join(lines)


async def _run(args: argparse.Namespace, settings: Settings) -> AggregationResult:
    tags = [t.strip() for t in args.tags.split(",") if t.strip()]
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as http_client:
        cache = MemoryPostCache(ttl=settings.cache_ttl_seconds)
        provider = HatchwaysPostProvider(http_client=http_client, cache=cache, settings=settings)
        service = PostAggregationService.from_settings(cache, provider, settings)
        return await service.aggregate(tags, args.sort_by, args.direction)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not [t for t in args.tags.split(",") if t.strip()]:
        parser.print_usage(sys.stderr)
        print("error: --tags must name at least one tag", file=sys.stderr)
        return 2

    settings = Settings()
    if args.base_url:
        settings = settings.model_copy(update={"posts_api_base_url": args.base_url})

    # Logs go to stderr so stdout stays clean for the posts.
    configure_logging(log_level="WARNING", stream=sys.stderr)

    result = asyncio.run(_run(args, settings))

    if args.json:
        print(json.dumps([post.to_wire() for post in result.posts], indent=2))
    else:
        print(_format_table(result))

    for failure in result.failures:
        print(f"warning: tag '{failure.tag}' failed ({failure.kind.value}): {failure.reason}",
              file=sys.stderr)

    return 0 if result.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
