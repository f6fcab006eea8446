"""
Glossa database package.

Declarative base and shared mixins for translatable models.
"""

from .models import Base, ShadowRowMixin, generate_uuid

__all__ = ["Base", "ShadowRowMixin", "generate_uuid"]
