"""
Shadow model provider.

Produces the per-language shadow model of a primary entity, or locates a
declared one. Definitions are kept in a process-wide registry keyed by the
configuration that produced them, so asking twice returns the same class.
"""

import threading
from typing import Any

from sqlalchemy import ForeignKey, String, UniqueConstraint, inspect
from sqlalchemy.orm import Mapper, foreign, mapped_column, relationship

from glossa_core import get_logger
from glossa_core.errors import ConfigurationError
from glossa_core.schemas import ResolvedMultilingualConfig
from glossa_database.models import ShadowRowMixin, generate_uuid

from .names import NameScheme

logger = get_logger(__name__)

ShadowKey = tuple[int, str, str, str, str, str, tuple[str, ...], bool]

_registry: dict[ShadowKey, type[ShadowRowMixin]] = {}
_defined: set[type[ShadowRowMixin]] = set()
_registry_lock = threading.Lock()


def _shadow_key(owner_mapper: Mapper[Any], config: ResolvedMultilingualConfig) -> ShadowKey:
    return (
        id(owner_mapper.registry),
        config.localized_model_name,
        config.localized_table_name,
        config.localized_foreign_key,
        config.language_field,
        config.localized_prefix,
        config.localized_attributes,
        config.force_delete,
    )


def _find_declared(owner_mapper: Mapper[Any], name: str) -> type[Any] | None:
    for mapper in owner_mapper.registry.mappers:
        if mapper.class_.__name__ == name:
            return mapper.class_
    return None


def _check_declared(shadow: type[Any], config: ResolvedMultilingualConfig) -> None:
    if not issubclass(shadow, ShadowRowMixin):
        raise ConfigurationError(f"{shadow.__name__} must derive from ShadowRowMixin")
    names = NameScheme(config.localized_prefix)
    attrs = {attr.key for attr in inspect(shadow).column_attrs}
    required = {
        config.localized_foreign_key,
        config.language_field,
        *(names.shadow_column(f) for f in config.localized_attributes),
    }
    missing = sorted(required - attrs)
    if missing:
        raise ConfigurationError(
            f"{shadow.__name__} is missing columns: {', '.join(missing)}"
        )


def _define(owner: type[Any], config: ResolvedMultilingualConfig) -> type[ShadowRowMixin]:
    owner_mapper = inspect(owner)
    metadata = owner.__table__.metadata
    if config.localized_table_name in metadata.tables:
        raise ConfigurationError(
            f"Table {config.localized_table_name!r} is already defined "
            "with a different multilingual configuration"
        )

    names = NameScheme(config.localized_prefix)
    pk_column = owner_mapper.primary_key[0]
    # With force_delete the storage layer cascades too; without it the
    # column is a plain reference and owner deletes leave the rows alone.
    fk_args = [ForeignKey(pk_column, ondelete="CASCADE")] if config.force_delete else []
    fk_column = mapped_column(pk_column.type, *fk_args, nullable=False, index=True)

    attrs: dict[str, Any] = {
        "__module__": owner.__module__,
        "__tablename__": config.localized_table_name,
        "__table_args__": (
            UniqueConstraint(
                config.localized_foreign_key,
                config.language_field,
                name=f"uq_{config.localized_table_name}_{config.language_field}",
            ),
        ),
        "id": mapped_column(String(36), primary_key=True, default=generate_uuid),
        config.localized_foreign_key: fk_column,
        config.language_field: mapped_column(String(10), nullable=False),
        config.owner_relation_name: relationship(
            owner, primaryjoin=lambda: pk_column == foreign(fk_column.column)
        ),
    }
    for field in config.localized_attributes:
        column_type = owner_mapper.columns[field].type
        # Text columns start out empty rather than NULL.
        default = "" if isinstance(column_type, String) else None
        attrs[names.shadow_column(field)] = mapped_column(
            column_type, nullable=True, default=default
        )

    shadow = owner_mapper.registry.mapped(
        type(config.localized_model_name, (ShadowRowMixin,), attrs)
    )
    logger.debug(
        "Defined shadow model",
        extra={"model": config.localized_model_name, "table": config.localized_table_name},
    )
    return shadow


def ensure_shadow_model(
    owner: type[Any], config: ResolvedMultilingualConfig
) -> type[ShadowRowMixin]:
    """
    Return the shadow model for ``owner``, defining it at most once.

    Args:
        owner: Mapped primary entity class.
        config: Resolved multilingual configuration.

    Returns:
        Mapped shadow row class.

    Raises:
        ConfigurationError: If no usable shadow model exists and
            ``dynamic_localized_model`` is off, or a declared one is malformed.
    """
    owner_mapper = inspect(owner)
    key = _shadow_key(owner_mapper, config)

    shadow = _registry.get(key)
    if shadow is not None:
        return shadow

    with _registry_lock:
        shadow = _registry.get(key)
        if shadow is not None:
            return shadow

        declared = _find_declared(owner_mapper, config.localized_model_name)
        if declared is not None and declared in _defined:
            raise ConfigurationError(
                f"Shadow model {config.localized_model_name!r} is already defined "
                "with a different multilingual configuration"
            )
        if declared is not None:
            _check_declared(declared, config)
            shadow = declared
        elif config.dynamic_localized_model:
            shadow = _define(owner, config)
            _defined.add(shadow)
        else:
            raise ConfigurationError(
                f"Shadow model {config.localized_model_name!r} is not declared "
                "and dynamic_localized_model is disabled"
            )

        _registry[key] = shadow
        return shadow
