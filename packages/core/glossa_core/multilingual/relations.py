"""
Relationship registration.

Adds two views of the shadow rows to the primary entity mapper:

- the *localized* relationship, restricted to one language per query;
- the *internationalized* relationship, holding every language.

Both are keyed by the language column and joined on the owner primary key
without relying on a database constraint. They are read-only views; shadow
rows are written by ``TranslationSync`` directly. The registrar keeps no
language state: the language of a localized fetch is passed to
``localized_option`` on every call.
"""

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import attribute_keyed_dict, foreign, relationship, selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from glossa_core import get_logger
from glossa_core.errors import ConfigurationError
from glossa_core.schemas import ResolvedMultilingualConfig

logger = get_logger(__name__)


class RelationRegistrar:
    """Localized and internationalized relationships of one owner model."""

    def __init__(
        self,
        owner: type[Any],
        shadow: type[Any],
        config: ResolvedMultilingualConfig,
    ) -> None:
        self.owner = owner
        self.shadow = shadow
        self.config = config

    def _join(self) -> Any:
        owner_pk = inspect(self.owner).primary_key[0]
        shadow_fk = inspect(self.shadow).columns[self.config.localized_foreign_key]
        return owner_pk == foreign(shadow_fk)

    def _ensure_relationship(self, name: str) -> None:
        mapper = inspect(self.owner)
        if mapper.has_property(name):
            existing = mapper.get_property(name)
            if getattr(existing, "mapper", None) is None or existing.mapper.class_ is not self.shadow:
                raise ConfigurationError(
                    f"{self.owner.__name__}.{name} already exists and is not a translation relationship"
                )
            return

        mapper.add_property(
            name,
            relationship(
                self.shadow,
                primaryjoin=self._join(),
                collection_class=attribute_keyed_dict(self.config.language_field),
                viewonly=True,
                lazy="raise",
            ),
        )
        logger.debug(
            "Registered translation relationship",
            extra={"owner": self.owner.__name__, "relationship": name},
        )

    def register_internationalized(self) -> None:
        """Define the all-languages relationship. Idempotent."""
        self._ensure_relationship(self.config.internationalized_relation_name)

    def register_localized(self) -> None:
        """Define the single-language relationship. Idempotent."""
        self._ensure_relationship(self.config.localized_relation_name)

    def localized_option(self, language: str) -> LoaderOption:
        """Eager loader for the localized relationship restricted to ``language``."""
        rel = getattr(self.owner, self.config.localized_relation_name)
        language_col = getattr(self.shadow, self.config.language_field)
        return selectinload(rel.and_(language_col == language))

    def internationalized_option(self) -> LoaderOption:
        """Eager loader for the internationalized relationship."""
        return selectinload(getattr(self.owner, self.config.internationalized_relation_name))

    @staticmethod
    def is_loaded(instance: Any, name: str) -> bool:
        """Whether relationship ``name`` was fetched for ``instance``."""
        return name not in inspect(instance).unloaded
