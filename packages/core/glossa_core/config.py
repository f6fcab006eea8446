"""
Multilingual settings.

Process-wide defaults loaded from environment variables. Per-model options
live in ``glossa_core.schemas.MultilingualConfig`` and fall back to these.
"""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find .env file in project root
_env_file = Path(__file__).parent.parent.parent.parent / ".env"


class MultilingualSettings(BaseSettings):
    """
    Multilingual defaults from environment variables.

    All settings are prefixed with MULTILINGUAL_ in environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="MULTILINGUAL_",
        env_file=str(_env_file) if _env_file.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    languages: list[str] = ["en"]  # JSON list in env, e.g. '["en", "fr"]'
    default_language: str = "en"
    create_scenarios: list[str] = ["insert"]
    force_overwrite: bool = False
    force_delete: bool = True
    log_level: str = "INFO"

    @field_validator("languages", mode="before")
    @classmethod
    def _language_keys(cls, value: object) -> object:
        # A mapping of code -> label is accepted; only the codes are kept.
        if isinstance(value, dict):
            return list(value)
        return value


# Global instance
settings = MultilingualSettings()
