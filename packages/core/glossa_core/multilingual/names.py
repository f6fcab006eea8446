"""
Attribute naming scheme.

Maps a translatable field to its shadow column (``<prefix><field>``) and to
its per-language virtual attribute (``<field>_<language>``). Field names and
language codes are assumed not to create ambiguous ``_`` splits.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(name: str) -> str:
    """Convert ``BlogPost`` to ``blog_post``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


@dataclass(frozen=True)
class NameScheme:
    """Name mapping for one multilingual configuration."""

    prefix: str = "localized_"

    def shadow_column(self, field: str) -> str:
        return f"{self.prefix}{field}"

    def virtual_attr(self, field: str, language: str) -> str:
        return f"{field}_{language}"

    def virtual_attrs(self, fields: Iterable[str], languages: Iterable[str]) -> list[str]:
        """All virtual attribute names, grouped by language."""
        fields = list(fields)
        return [self.virtual_attr(f, lang) for lang in languages for f in fields]

    def split_virtual(
        self, name: str, fields: Iterable[str], languages: Iterable[str]
    ) -> tuple[str, str] | None:
        """
        Recover ``(field, language)`` from a virtual attribute name.

        Returns:
            The pair, or None if ``name`` is not a configured virtual attribute.
        """
        languages = list(languages)
        for field in fields:
            for language in languages:
                if name == self.virtual_attr(field, language):
                    return field, language
        return None
