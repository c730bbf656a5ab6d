"""Common utilities for the back office."""

from .logger import setup_logger

__all__ = ["setup_logger"]
