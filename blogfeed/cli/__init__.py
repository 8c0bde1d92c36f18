"""Command-line tools for blogfeed.

- ``python -m blogfeed.cli.posts`` — run one aggregation and print the
  merged, sorted posts.
"""
