"""Linkboard: forum backend core with sessions and vote-ranked listings."""

__version__ = "0.1.0"
