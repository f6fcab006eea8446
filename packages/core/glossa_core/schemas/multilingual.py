"""
Multilingual configuration schemas.

``MultilingualConfig`` is what integrators write; unset values fall back to
the process settings and to names derived from the owner model.
``ResolvedMultilingualConfig`` is the fully populated form the engine uses.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from glossa_core.config import settings


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


class MultilingualConfig(BaseModel):
    """
    Per-model translation options.

    Attributes:
        localized_attributes: Primary model fields whose value is language-dependent.
        languages: Language codes, or a mapping whose keys are the codes.
        default_language: Language stored in the primary model columns.
        localized_model_name: Shadow model class name (default ``<Owner>Localized``).
        localized_table_name: Shadow table name (default ``<table>_localized``).
        localized_foreign_key: Shadow column referencing the owner (default ``<table>_id``).
        language_field: Shadow column holding the language code.
        localized_prefix: Prefix of translated columns in the shadow table.
        create_scenarios: Scenarios that seed blank translations on construction.
        localized_relation_name: Single-language relationship name.
        internationalized_relation_name: All-languages relationship name.
        force_overwrite: Overwrite primary values with empty translations and
            keep ``required`` rules on every language.
        force_delete: Delete shadow rows explicitly when the owner is deleted.
        dynamic_localized_model: Define the shadow model on demand instead of
            expecting a declared one.
        rules_schema: Pydantic model holding the owner's field rules.
    """

    model_config = ConfigDict(frozen=True)

    localized_attributes: list[str] = Field(default_factory=list)
    languages: list[str] | None = None
    default_language: str | None = None
    localized_model_name: str | None = None
    localized_table_name: str | None = None
    localized_foreign_key: str | None = None
    language_field: str = "language"
    localized_prefix: str = "localized_"
    create_scenarios: list[str] | None = None
    localized_relation_name: str | None = None
    internationalized_relation_name: str | None = None
    force_overwrite: bool | None = None
    force_delete: bool | None = None
    dynamic_localized_model: bool = True
    rules_schema: type[BaseModel] | None = None

    @field_validator("languages", mode="before")
    @classmethod
    def _language_keys(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return list(value)
        return value

    @field_validator("languages", "localized_attributes")
    @classmethod
    def _unique(cls, value: list[str] | None) -> list[str] | None:
        return _dedupe(value) if value is not None else None


class ResolvedMultilingualConfig(BaseModel):
    """Multilingual options with every default filled in."""

    model_config = ConfigDict(frozen=True)

    owner_name: str
    owner_table: str
    primary_key: str
    localized_attributes: tuple[str, ...]
    languages: tuple[str, ...]
    default_language: str
    localized_model_name: str
    localized_table_name: str
    localized_foreign_key: str
    language_field: str
    localized_prefix: str
    create_scenarios: frozenset[str]
    localized_relation_name: str
    internationalized_relation_name: str
    owner_relation_name: str
    force_overwrite: bool
    force_delete: bool
    dynamic_localized_model: bool
    rules_schema: type[BaseModel] | None = None


class LanguageContext(BaseModel):
    """
    Active language of the surrounding request.

    Passed explicitly to every load, save and localized call.
    """

    model_config = ConfigDict(frozen=True)

    language: str

    @classmethod
    def from_settings(cls) -> "LanguageContext":
        """Context bound to the configured default language."""
        return cls(language=settings.default_language)
