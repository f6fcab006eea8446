"""
Service layer.

Session-bound services that drive translatable models through their
lifecycle hooks.
"""

from .translatable_service import TranslatableService

__all__ = ["TranslatableService"]
