"""
Pydantic schemas for multilingual configuration.
"""

from .multilingual import LanguageContext, MultilingualConfig, ResolvedMultilingualConfig

__all__ = [
    "MultilingualConfig",
    "ResolvedMultilingualConfig",
    "LanguageContext",
]
