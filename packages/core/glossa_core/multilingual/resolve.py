"""
Configuration resolution.

Fills every unset option of a ``MultilingualConfig`` from the process
settings and from names derived from the owner model, and rejects
configurations the engine cannot work with.
"""

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.exc import NoInspectionAvailable

from glossa_core.config import settings
from glossa_core.errors import ConfigurationError
from glossa_core.schemas import MultilingualConfig, ResolvedMultilingualConfig

from .names import snake_case


def _simple_table_name(owner: type[Any]) -> str:
    # "schema.posts" -> "posts"
    return owner.__table__.name.split(".")[-1]


def resolve_config(owner: type[Any], config: MultilingualConfig) -> ResolvedMultilingualConfig:
    """
    Resolve ``config`` against the ``owner`` model.

    Args:
        owner: Mapped primary entity class.
        config: Integrator supplied options.

    Returns:
        Fully populated configuration.

    Raises:
        ConfigurationError: If the configuration is unusable for ``owner``.
    """
    try:
        mapper = inspect(owner)
    except NoInspectionAvailable as exc:
        raise ConfigurationError(f"{owner!r} is not a mapped class") from exc

    if not config.localized_attributes:
        raise ConfigurationError(f"{owner.__name__}: localized_attributes must not be empty")

    columns = {attr.key for attr in mapper.column_attrs}
    missing = [name for name in config.localized_attributes if name not in columns]
    if missing:
        raise ConfigurationError(
            f"{owner.__name__}: localized attributes are not mapped columns: {', '.join(missing)}"
        )

    if len(mapper.primary_key) != 1:
        raise ConfigurationError(f"{owner.__name__}: a single-column primary key is required")
    primary_key = mapper.get_property_by_column(mapper.primary_key[0]).key

    languages = config.languages if config.languages is not None else settings.languages
    languages = list(dict.fromkeys(languages))
    if not languages:
        raise ConfigurationError(f"{owner.__name__}: no languages configured")

    default_language = config.default_language or settings.default_language
    if default_language not in languages:
        raise ConfigurationError(
            f"{owner.__name__}: default language {default_language!r} "
            f"is not one of {', '.join(languages)}"
        )

    table = _simple_table_name(owner)
    owner_snake = snake_case(owner.__name__)

    return ResolvedMultilingualConfig(
        owner_name=owner.__name__,
        owner_table=owner.__table__.fullname,
        primary_key=primary_key,
        localized_attributes=tuple(config.localized_attributes),
        languages=tuple(languages),
        default_language=default_language,
        localized_model_name=config.localized_model_name or f"{owner.__name__}Localized",
        localized_table_name=config.localized_table_name or f"{table}_localized",
        localized_foreign_key=config.localized_foreign_key or f"{table}_id",
        language_field=config.language_field,
        localized_prefix=config.localized_prefix,
        create_scenarios=frozenset(
            config.create_scenarios
            if config.create_scenarios is not None
            else settings.create_scenarios
        ),
        localized_relation_name=config.localized_relation_name or f"localized_{owner_snake}",
        internationalized_relation_name=(
            config.internationalized_relation_name or f"internationalized_{owner_snake}"
        ),
        owner_relation_name=owner_snake,
        force_overwrite=(
            config.force_overwrite
            if config.force_overwrite is not None
            else settings.force_overwrite
        ),
        force_delete=(
            config.force_delete if config.force_delete is not None else settings.force_delete
        ),
        dynamic_localized_model=config.dynamic_localized_model,
        rules_schema=config.rules_schema,
    )
