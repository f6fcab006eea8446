"""
Translation synchronization.

Keeps a primary entity and its shadow rows consistent over the entity
lifecycle:

- construction (create scenarios): seed blank translations;
- load: copy fetched shadow rows into virtual attributes, or overlay the
  localized row onto the primary fields;
- save: fan primary fields and virtual attributes out to one shadow row per
  language, updating rows in place;
- delete: optionally remove every shadow row of the entity.

Missing rows and values resolve to None; they never raise.
"""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from glossa_core import get_logger
from glossa_core.errors import ShadowDeleteError, ShadowSaveError
from glossa_core.schemas import ResolvedMultilingualConfig
from glossa_database.models import ShadowRowMixin

from .names import NameScheme
from .relations import RelationRegistrar
from .store import AttributeStore

logger = get_logger(__name__)

_STORE_ATTR = "_glossa_translations"


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


class TranslationSync:
    """Load/save/delete hooks for one multilingual owner model."""

    def __init__(
        self,
        config: ResolvedMultilingualConfig,
        names: NameScheme,
        shadow: type[ShadowRowMixin],
        relations: RelationRegistrar,
    ) -> None:
        self.config = config
        self.names = names
        self.shadow = shadow
        self.relations = relations

    @staticmethod
    def store_for(instance: Any) -> AttributeStore:
        """Virtual attribute store of ``instance``, created on first use."""
        store = instance.__dict__.get(_STORE_ATTR)
        if store is None:
            store = AttributeStore()
            instance.__dict__[_STORE_ATTR] = store
        return store

    def _shadow_attr(self, name: str) -> Any:
        return getattr(self.shadow, name)

    def after_construct(self, instance: Any, scenario: str) -> None:
        """Seed every virtual attribute from a blank shadow row."""
        if scenario not in self.config.create_scenarios:
            return

        blank = self.shadow.blank()
        store = self.store_for(instance)
        for language in self.config.languages:
            for field in self.config.localized_attributes:
                store.set_lang_attribute(
                    self.names.virtual_attr(field, language),
                    getattr(blank, self.names.shadow_column(field)),
                )

    def after_load(self, instance: Any) -> None:
        """
        Apply fetched translations to a loaded instance.

        The internationalized relationship wins over the localized one; when
        neither was fetched the primary fields keep their stored values. An
        internationalized fetch replaces the whole virtual attribute store.

        Args:
            instance: Loaded primary entity.
        """
        intl_name = self.config.internationalized_relation_name
        local_name = self.config.localized_relation_name

        if self.relations.is_loaded(instance, intl_name):
            related = getattr(instance, intl_name)
            store = self.store_for(instance)
            store.clear()
            for language in self.config.languages:
                row = related.get(language)
                for field in self.config.localized_attributes:
                    value = None
                    if row is not None:
                        value = getattr(row, self.names.shadow_column(field))
                    store.set_lang_attribute(self.names.virtual_attr(field, language), value)

        elif self.relations.is_loaded(instance, local_name):
            related = getattr(instance, local_name)
            row = next(iter(related.values()), None)
            if row is not None:
                for field in self.config.localized_attributes:
                    value = getattr(row, self.names.shadow_column(field))
                    if not _is_empty(value) or self.config.force_overwrite:
                        # Committed, so the overlay never flushes into the primary row.
                        set_committed_value(instance, field, value)

    async def after_save(self, session: AsyncSession, instance: Any, is_new: bool) -> None:
        """
        Write one shadow row per configured language.

        The default language takes the primary field values; other languages
        take the matching virtual attributes. None values leave the column
        untouched. Rows are flushed, not committed.

        Args:
            session: Session the owner was saved with.
            instance: Saved primary entity (already flushed).
            is_new: Whether the owner was inserted by this save.

        Raises:
            ShadowSaveError: If a shadow row fails to flush.
        """
        pk = getattr(instance, self.config.primary_key)
        fk_col = self._shadow_attr(self.config.localized_foreign_key)
        language_field = self.config.language_field

        existing: dict[str, Any] = {}
        if not is_new:
            result = await session.execute(select(self.shadow).where(fk_col == pk))
            existing = {getattr(row, language_field): row for row in result.scalars()}

        store = self.store_for(instance)
        saved: list[str] = []
        for language in self.config.languages:
            row = existing.get(language)
            if row is None:
                row = self.shadow(
                    **{language_field: language, self.config.localized_foreign_key: pk}
                )
                session.add(row)

            is_default = language == self.config.default_language
            for field in self.config.localized_attributes:
                if is_default:
                    value = getattr(instance, field)
                else:
                    value = store.get_lang_attribute(self.names.virtual_attr(field, language))
                if value is not None:
                    setattr(row, self.names.shadow_column(field), value)

            try:
                await session.flush()
            except SQLAlchemyError as exc:
                logger.exception(
                    "Failed to save translation row",
                    extra={"owner": self.config.owner_name, "id": pk, "language": language},
                )
                raise ShadowSaveError(language, saved) from exc
            saved.append(language)

        logger.info(
            "Saved translations",
            extra={"owner": self.config.owner_name, "id": pk, "languages": saved},
        )

    async def before_delete(self, session: AsyncSession, instance: Any) -> None:
        """
        Delete all shadow rows of ``instance`` when ``force_delete`` is on.

        Runs before the owner row is removed so a failure aborts the delete.

        Raises:
            ShadowDeleteError: If the bulk delete fails.
        """
        if not self.config.force_delete:
            return

        pk = getattr(instance, self.config.primary_key)
        fk_col = self._shadow_attr(self.config.localized_foreign_key)
        try:
            result = await session.execute(delete(self.shadow).where(fk_col == pk))
        except SQLAlchemyError as exc:
            logger.exception(
                "Failed to delete translation rows",
                extra={"owner": self.config.owner_name, "id": pk},
            )
            raise ShadowDeleteError(
                f"Could not delete translations of {self.config.owner_name} {pk!r}"
            ) from exc

        logger.info(
            "Deleted translations",
            extra={"owner": self.config.owner_name, "id": pk, "rows": result.rowcount},
        )
