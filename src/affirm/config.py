"""Library-wide settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AffirmSettings(BaseSettings):
    """Settings for assertion execution and value formatting.

    Loads from environment variables automatically:
        AFFIRM_MAX_RECURSION_DEPTH, AFFIRM_USE_LINE_BREAKS,
        AFFIRM_MAX_FORMATTED_DEPTH, AFFIRM_TIMEZONE_OFFSET_MINUTES
    """

    max_recursion_depth: int = Field(
        default=10, ge=1, description="Deepest nesting level compared unless infinite recursion is allowed"
    )
    use_line_breaks: bool = Field(
        default=False, description="Render formatted complex values over multiple lines"
    )
    max_formatted_depth: int = Field(
        default=5, ge=1, description="Nesting depth rendered by the default value formatter"
    )
    timezone_offset_minutes: int | None = Field(
        default=None,
        ge=-24 * 60,
        le=24 * 60,
        description="UTC offset considered local by the date/time formatter; None uses the machine offset",
    )

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="AFFIRM_",
    )


@lru_cache(maxsize=1)
def get_settings() -> AffirmSettings:
    """Return the process-wide settings, reading the environment once."""
    return AffirmSettings()


def reset_settings() -> None:
    """Forget cached settings so the next access re-reads the environment."""
    get_settings.cache_clear()
