from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the self-reliance tracker.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,   # env var names are case-sensitive
        extra="ignore",
        populate_by_name=True,
    )

    # these will read from ENV, DEBUG and LOG_LEVEL in env/system
    env: str = Field(default="local", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # usage policy: strict cooldown after every accepted invocation
    daily_limit: int = Field(default=3, ge=1, alias="DAILY_LIMIT")
    cooldown_seconds: float = Field(default=30.0, ge=0, alias="COOLDOWN_SECONDS")

    reflection_threshold: int = Field(
        default=50,
        ge=0,
        description="Inputs longer than this many characters trigger a reflection prompt",
        alias="REFLECTION_THRESHOLD",
    )
    abandon_resets_usage: bool = Field(
        default=False,
        description="Zero today's usage count when the user chooses to self-solve",
        alias="ABANDON_RESETS_USAGE",
    )

    store_path: str = Field(
        default=".self_reliance/profile.json",
        alias="STORE_PATH",
    )
    reply_delay_seconds: float = Field(default=1.5, ge=0, alias="REPLY_DELAY_SECONDS")
    max_history: int = Field(default=200, ge=0, alias="MAX_HISTORY")


@lru_cache
def get_settings() -> Settings:
    return Settings()
