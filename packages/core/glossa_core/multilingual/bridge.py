"""
Attribute access bridge.

Exposes native entity attributes and per-language virtual attributes
behind one explicit accessor. Native attributes are resolved first; the
virtual attribute store is consulted only for names the entity does not
define.
"""

from typing import Any

from .names import NameScheme
from .store import AttributeStore


class PropertyBridge:
    """Read/write access to ``<field>_<language>`` values of one entity."""

    def __init__(
        self,
        entity: Any,
        store: AttributeStore,
        names: NameScheme,
        fields: tuple[str, ...],
        languages: tuple[str, ...],
    ) -> None:
        self._entity = entity
        self._store = store
        self._names = names
        self._fields = fields
        self._languages = languages

    def _has_native(self, name: str) -> bool:
        return not name.startswith("_") and (
            hasattr(type(self._entity), name) or name in vars(self._entity)
        )

    def _is_virtual(self, name: str) -> bool:
        return name in self._store or (
            self._names.split_virtual(name, self._fields, self._languages) is not None
        )

    def _missing(self, name: str) -> AttributeError:
        return AttributeError(f"{type(self._entity).__name__!r} object has no attribute {name!r}")

    def try_get(self, name: str, default: Any = None) -> Any:
        """Value of ``name``, or ``default`` if neither side knows it."""
        if self._has_native(name):
            return getattr(self._entity, name)
        if name in self._store:
            return self._store.get_lang_attribute(name)
        return default

    def get(self, name: str) -> Any:
        """
        Value of a native or virtual attribute.

        Raises:
            AttributeError: If ``name`` is neither.
        """
        if self._has_native(name):
            return getattr(self._entity, name)
        if name in self._store:
            return self._store.get_lang_attribute(name)
        raise self._missing(name)

    def set(self, name: str, value: Any) -> None:
        """
        Assign a native attribute, or a configured virtual attribute.

        Raises:
            AttributeError: If ``name`` is neither.
        """
        if self._has_native(name):
            setattr(self._entity, name, value)
        elif self._is_virtual(name):
            self._store.set_lang_attribute(name, value)
        else:
            raise self._missing(name)

    def has(self, name: str) -> bool:
        return self._has_native(name) or name in self._store

    def can_read(self, name: str) -> bool:
        return self.has(name)

    def can_write(self, name: str) -> bool:
        return self._has_native(name) or self._is_virtual(name)

    def as_dict(self) -> dict[str, dict[str, Any]]:
        """Translations grouped as ``{field: {language: value}}``."""
        return {
            field: {
                language: self._store.get_lang_attribute(self._names.virtual_attr(field, language))
                for language in self._languages
            }
            for field in self._fields
        }

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)


class TranslatableMixin:
    """
    Gives a multilingual model a ``translations`` accessor.

    The model class must have been attached with ``Multilingual.attach``.
    """

    __multilingual__: Any

    @property
    def translations(self) -> PropertyBridge:
        return type(self).__multilingual__.bridge(self)
