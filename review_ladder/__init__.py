"""Spaced-repetition scheduling core: interval ladder, local-day clock and daily cycle."""

__version__ = "0.1.0"
