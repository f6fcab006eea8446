"""
Glossa Core Package.

This package contains the translation synchronization engine, its
configuration schemas and the service layer for translatable models.
"""

__version__ = "0.1.0"

from .logging_config import get_logger, init_logging

__all__ = ["init_logging", "get_logger"]
