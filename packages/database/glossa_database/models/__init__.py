"""
Database models package.

This module exports the declarative base and the mixins shared by
primary entities and their per-language shadow rows.
"""

from .base import Base, generate_uuid
from .shadow_row import ShadowRowMixin

__all__ = [
    "Base",
    "generate_uuid",
    # Translation models
    "ShadowRowMixin",
]
