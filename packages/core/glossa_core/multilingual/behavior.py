"""
Multilingual behavior.

Composes the naming scheme, shadow model, relationships, projected rules
and lifecycle hooks for one primary entity model. Services call the hooks
explicitly; nothing is intercepted behind the model's back.
"""

import operator as _operator
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel
from sqlalchemy import and_
from sqlalchemy.orm.interfaces import LoaderOption
from sqlalchemy.sql.elements import ColumnElement

from glossa_core import get_logger
from glossa_core.schemas import LanguageContext, MultilingualConfig
from glossa_database.models import ShadowRowMixin

from .bridge import PropertyBridge
from .names import NameScheme
from .relations import RelationRegistrar
from .resolve import resolve_config
from .rules import Rule, RuleProjector, collect_rules
from .shadow import ensure_shadow_model
from .sync import TranslationSync

logger = get_logger(__name__)


class Multilingual:
    """
    Translation support for one primary entity model.

    Attributes:
        owner: Primary entity class.
        config: Resolved configuration.
        names: Column and virtual attribute naming.
        shadow: Shadow row model.
        relations: Localized/internationalized relationship registrar.
        rules: Rules projected onto virtual attributes.
        validator: Pydantic model validating owner fields and translations,
            or None when no rules schema is configured.
        sync: Lifecycle hooks.
    """

    def __init__(self, owner: type[Any], config: MultilingualConfig) -> None:
        self.owner = owner
        self.config = resolve_config(owner, config)
        self.names = NameScheme(self.config.localized_prefix)
        self.shadow: type[ShadowRowMixin] = ensure_shadow_model(owner, self.config)

        self.relations = RelationRegistrar(owner, self.shadow, self.config)
        self.relations.register_localized()
        self.relations.register_internationalized()

        self.rules: list[Rule] = []
        self.validator: type[BaseModel] | None = None
        if self.config.rules_schema is not None:
            projector = RuleProjector(self.names)
            self.rules = projector.project(
                collect_rules(self.config.rules_schema),
                self.config.languages,
                self.config.localized_attributes,
                self.config.force_overwrite,
            )
            self.validator = projector.build_validator(self.config.rules_schema, self.rules)
            logger.debug(
                "Projected translation rules",
                extra={"owner": owner.__name__, "rules": len(self.rules)},
            )

        self.sync = TranslationSync(self.config, self.names, self.shadow, self.relations)

    @classmethod
    def attach(cls, owner: type[Any], config: MultilingualConfig) -> "Multilingual":
        """Create the behavior and expose it as ``owner.__multilingual__``."""
        behavior = cls(owner, config)
        owner.__multilingual__ = behavior
        return behavior

    @property
    def languages(self) -> tuple[str, ...]:
        return self.config.languages

    def new(self, scenario: str = "insert", **values: Any) -> Any:
        """
        Construct an owner instance and run the construction hook.

        Args:
            scenario: Construction scenario; create scenarios seed blank translations.
            **values: Owner column values.
        """
        instance = self.owner(**values)
        self.sync.after_construct(instance, scenario)
        return instance

    def bridge(self, instance: Any) -> PropertyBridge:
        """Attribute accessor covering native and virtual attributes of ``instance``."""
        return PropertyBridge(
            instance,
            self.sync.store_for(instance),
            self.names,
            self.config.localized_attributes,
            self.config.languages,
        )

    def fetch_language(self, context: LanguageContext, language: str | None = None) -> str:
        """
        Language of a localized fetch.

        A configured ``language`` wins for this one call; unknown languages
        are ignored and the context language is used.
        """
        if language is not None and language in self.config.languages:
            return language
        return context.language

    def localized(self, context: LanguageContext, language: str | None = None) -> LoaderOption:
        """
        Loader option fetching the translation of one language.

        Args:
            context: Active language of the caller.
            language: Optional one-off language, used only if configured.
        """
        return self.relations.localized_option(self.fetch_language(context, language))

    def multilang(self) -> LoaderOption:
        """Loader option fetching every translation."""
        return self.relations.internationalized_option()

    def translated_condition(
        self,
        field: str,
        value: Any,
        *,
        language: str | None = None,
        operator: Callable[[Any, Any], ColumnElement[bool]] = _operator.eq,
    ) -> ColumnElement[bool]:
        """
        Filter owners by a translated value.

        Args:
            field: Translatable field name.
            value: Right-hand operand.
            language: Restrict the match to one language; any language if None.
            operator: Binary comparison, e.g. ``operator.eq`` or
                ``lambda col, v: col.ilike(v)``.

        Returns:
            EXISTS clause over the shadow table.

        Raises:
            ValueError: If ``field`` is not translatable.
        """
        if field not in self.config.localized_attributes:
            raise ValueError(f"{field!r} is not a translatable field of {self.owner.__name__}")

        column = getattr(self.shadow, self.names.shadow_column(field))
        criteria = operator(column, value)
        if language is not None:
            criteria = and_(criteria, getattr(self.shadow, self.config.language_field) == language)
        return getattr(self.owner, self.config.internationalized_relation_name).any(criteria)

    def validate(self, instance: Any) -> BaseModel | None:
        """
        Validate owner fields and translations against the projected rules.

        Returns:
            Validated model, or None when no rules schema is configured.

        Raises:
            pydantic.ValidationError: On rule violations.
        """
        if self.validator is None or self.config.rules_schema is None:
            return None

        data: dict[str, Any] = {
            name: getattr(instance, name)
            for name in self.config.rules_schema.model_fields
            if hasattr(type(instance), name)
        }
        store = self.sync.store_for(instance)
        for name in self.names.virtual_attrs(
            self.config.localized_attributes, self.config.languages
        ):
            value = store.get_lang_attribute(name)
            # A blank translation counts as a missing one.
            data[name] = None if value == "" else value
        return self.validator.model_validate(data)
