"""Touchline: AI response cache for the academy coaching assistant."""

__version__ = "0.1.0"
