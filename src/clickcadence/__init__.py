"""Timed synthetic click generator with regular and jitter cadences."""

__version__ = "0.1.0"
