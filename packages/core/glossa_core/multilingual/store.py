"""
In-memory store of virtual attribute values for one entity instance.
"""

from collections.abc import Iterator
from typing import Any


class AttributeStore:
    """Key/value holder for ``<field>_<language>`` values."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def has_lang_attribute(self, name: str) -> bool:
        return name in self._values

    def get_lang_attribute(self, name: str) -> Any:
        """Value of ``name``, or None when it was never set."""
        return self._values.get(name)

    def set_lang_attribute(self, name: str, value: Any) -> None:
        self._values[name] = value

    def clear(self) -> None:
        self._values.clear()

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"AttributeStore({self._values!r})"
