"""Common utilities for docapproval."""

from .logger import setup_logger, setup_from_settings

__all__ = ["setup_from_settings", "setup_logger"]
