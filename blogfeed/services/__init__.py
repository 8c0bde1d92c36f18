"""Aggregation and ordering services."""
