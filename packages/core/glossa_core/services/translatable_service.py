"""
Translatable model service.

Loads, saves and deletes primary entities together with their shadow rows.
The service flushes but never commits; the caller owns the transaction.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import LoaderOption
from sqlalchemy.sql.elements import ColumnElement

from glossa_core import get_logger
from glossa_core.multilingual import Multilingual
from glossa_core.schemas import LanguageContext

logger = get_logger(__name__)


class TranslatableService:
    """Lifecycle operations for one multilingual model."""

    def __init__(
        self,
        session: AsyncSession,
        behavior: Multilingual,
        context: LanguageContext | None = None,
    ):
        """
        Initialize translatable service.

        Args:
            session: Database session.
            behavior: Multilingual behavior of the model to manage.
            context: Active language. Defaults to the configured default language.
        """
        self.session = session
        self.behavior = behavior
        self.context = context or LanguageContext(language=behavior.config.default_language)

    @property
    def model(self) -> type[Any]:
        return self.behavior.owner

    def new(self, scenario: str = "insert", **values: Any) -> Any:
        """
        Build an unsaved instance.

        Args:
            scenario: Construction scenario; create scenarios seed blank translations.
            **values: Column values.

        Returns:
            Transient model instance.
        """
        return self.behavior.new(scenario, **values)

    def _load_options(self, language: str | None, multilang: bool) -> list[LoaderOption]:
        if multilang:
            return [self.behavior.multilang()]
        return [self.behavior.localized(self.context, language)]

    async def get(
        self, entity_id: Any, *, language: str | None = None, multilang: bool = False
    ) -> Any | None:
        """
        Get an entity by primary key.

        Args:
            entity_id: Primary key value.
            language: Load this language's translation instead of the context one.
            multilang: Load every translation into virtual attributes instead.

        Returns:
            Entity or None if not found.
        """
        pk = getattr(self.model, self.behavior.config.primary_key)
        entities = await self.find_all(pk == entity_id, language=language, multilang=multilang)
        return entities[0] if entities else None

    async def find_all(
        self,
        *criteria: ColumnElement[bool],
        language: str | None = None,
        multilang: bool = False,
    ) -> Sequence[Any]:
        """
        Find entities matching ``criteria``.

        Args:
            *criteria: WHERE clauses.
            language: Load this language's translation instead of the context one.
            multilang: Load every translation into virtual attributes instead.

        Returns:
            Loaded entities with translations applied.
        """
        stmt = (
            select(self.model)
            .where(*criteria)
            .options(*self._load_options(language, multilang))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        entities = result.scalars().all()

        for entity in entities:
            self.behavior.sync.after_load(entity)
        return entities

    async def search(
        self,
        field: str,
        value: Any,
        *,
        language: str | None = None,
        multilang: bool = False,
    ) -> Sequence[Any]:
        """
        Find entities whose translation of ``field`` equals ``value``.

        Args:
            field: Translatable field name.
            value: Value to match.
            language: Match and load this language; any language if None.
            multilang: Load every translation into virtual attributes.

        Returns:
            Matching entities.
        """
        condition = self.behavior.translated_condition(field, value, language=language)
        return await self.find_all(condition, language=language, multilang=multilang)

    async def save(self, entity: Any, *, validate: bool = True) -> Any:
        """
        Save an entity and fan its translations out to shadow rows.

        Args:
            entity: Entity to insert or update.
            validate: Run owner and projected translation rules first.

        Returns:
            The saved entity.

        Raises:
            pydantic.ValidationError: If validation fails.
            ShadowSaveError: If a shadow row cannot be written.
        """
        if validate:
            self.behavior.validate(entity)

        is_new = inspect(entity).key is None
        self.session.add(entity)
        await self.session.flush()
        await self.behavior.sync.after_save(self.session, entity, is_new)
        return entity

    async def delete(self, entity: Any) -> None:
        """
        Delete an entity, removing its shadow rows first when configured.

        Raises:
            ShadowDeleteError: If shadow rows cannot be deleted; the entity is kept.
        """
        pk = getattr(entity, self.behavior.config.primary_key)
        await self.behavior.sync.before_delete(self.session, entity)
        await self.session.delete(entity)
        await self.session.flush()
        logger.info(
            "Deleted translatable entity",
            extra={"owner": self.behavior.config.owner_name, "id": pk},
        )
