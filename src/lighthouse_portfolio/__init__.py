"""Lighthouse portfolio summaries: aggregation engine, API client, and query tools."""

__version__ = "0.1.0"
