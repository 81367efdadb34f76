"""Logging setup for the territory geometry engine."""

from .logging import configure_logging

__all__ = ["configure_logging"]
