"""
Multilingual error types.

Missing translations are not errors: absent rows and values resolve to
``None``. Unknown attribute lookups raise the builtin ``AttributeError``.
"""


class MultilingualError(Exception):
    """Base class for translation engine errors."""


class ConfigurationError(MultilingualError):
    """Invalid multilingual configuration, raised when a behavior is attached."""


class ShadowSaveError(MultilingualError):
    """
    A shadow row could not be flushed during the save fan-out.

    Rows flushed before the failure are not committed by the engine; the
    caller's transaction rollback discards them.

    Attributes:
        language: Language of the row that failed.
        saved_languages: Languages flushed before the failure.
    """

    def __init__(self, language: str, saved_languages: list[str]) -> None:
        self.language = language
        self.saved_languages = saved_languages
        super().__init__(
            f"Failed to save translation row for language {language!r} "
            f"(already flushed: {', '.join(saved_languages) or 'none'})"
        )


class ShadowDeleteError(MultilingualError):
    """Bulk deletion of shadow rows failed; the owning delete is aborted."""
