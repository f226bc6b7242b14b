"""Fraud-risk verification engine."""

__version__ = "1.0.0"
