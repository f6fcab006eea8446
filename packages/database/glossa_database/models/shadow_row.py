"""
Shadow row mixin.

Common behavior of the per-language rows that hold the translated values
of a primary entity. Concrete shadow row types are produced on demand by
``glossa_core.multilingual.shadow`` or declared by hand with this mixin.
"""

from typing import Any, Self

from sqlalchemy import inspect
from sqlalchemy.sql.schema import ColumnDefault


class ShadowRowMixin:
    """
    Translation row for one (primary entity, language) pair.

    The table carries a surrogate primary key, a foreign key to the primary
    entity, a language code column and one ``<prefix><field>`` column per
    translatable field.
    """

    def __init__(self, **kwargs: Any) -> None:
        cls = type(self)
        for key, value in kwargs.items():
            if not hasattr(cls, key):
                raise TypeError(f"{key!r} is an invalid keyword argument for {cls.__name__}")
            setattr(self, key, value)

    @classmethod
    def blank(cls, **values: Any) -> Self:
        """
        Build a transient row with scalar column defaults applied.

        SQLAlchemy only applies column defaults at INSERT time; a blank row
        exposes them immediately so new entities can be seeded with the
        same empty values the database would store.

        Args:
            **values: Attribute values that take precedence over defaults.

        Returns:
            Unsaved row instance.
        """
        row = cls(**values)
        for attr in inspect(cls).column_attrs:
            if attr.key in values:
                continue
            default = attr.columns[0].default
            if isinstance(default, ColumnDefault) and default.is_scalar:
                setattr(row, attr.key, default.arg)
        return row

    def __repr__(self) -> str:
        state = inspect(self)
        pk = state.identity[0] if state.identity else None
        return f"<{type(self).__name__} id={pk!r}>"
