"""Kudos Board client core: data model, API gateway and offline fallback logic."""

__version__ = "1.0.0"
