"""Milk bank pipeline tracker: records, store adapter and configuration."""

__version__ = "0.1.0"
