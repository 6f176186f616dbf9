"""Logging for the bare-metal client."""

from .logger import BoundLogger, logger

__all__ = ["BoundLogger", "logger"]
