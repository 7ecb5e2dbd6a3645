from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings

from src.pipeline_config import PipelineConfig, UnknownPolicy


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from ``MINUTES_``-prefixed environment variables and/or
    a .env file.
    """

    # Routing and report defaults
    unknown_policy: UnknownPolicy = UnknownPolicy.MARKER
    include_non_commands: bool = False
    sort_attendees: bool = True

    # Date-time part of the meeting-start stamp; the timezone abbreviation
    # that follows it is handled separately.
    start_time_format: str = "%Y-%m-%dT%H:%M"

    log_level: str = "INFO"

    model_config = {"env_prefix": "MINUTES_", "env_file": ".env", "env_file_encoding": "utf-8"}

    def pipeline_config(self) -> PipelineConfig:
        """Return the per-run defaults as a :class:`PipelineConfig`."""
        return PipelineConfig(
            unknown_policy=self.unknown_policy,
            include_non_commands=self.include_non_commands,
            sort_attendees=self.sort_attendees,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
