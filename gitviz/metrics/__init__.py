"""Aggregation functions over parsed commit records."""
