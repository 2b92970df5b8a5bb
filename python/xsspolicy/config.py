"""Library settings loaded from environment variables.

Environment Configuration:
    XSSPOLICY_PROFILE: Built-in default policy (html5 | basic), default html5
    XSSPOLICY_BASE_URL: Absolute URL relative attribute values resolve against,
        default https://localhost/
    XSSPOLICY_EXTRA_PROTOCOLS: Comma-separated schemes permitted in addition to
        the profile's (e.g. "mailto,tel")
    XSSPOLICY_LOG_JSON: Render logs as JSON (true) or console text (false)
"""

from functools import lru_cache
from urllib.parse import urlsplit

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from xsspolicy.profiles import DEFAULT_PROFILE_NAME, PROFILES
from xsspolicy.urls import DEFAULT_BASE_URL


class Settings(BaseSettings):
    """Policy engine configuration.

    Validation rules:
    - XSSPOLICY_PROFILE must name a built-in profile
    - XSSPOLICY_BASE_URL must be absolute with a host
    """

    profile: str = Field(default=DEFAULT_PROFILE_NAME, alias="XSSPOLICY_PROFILE")
    base_url: str = Field(default=DEFAULT_BASE_URL, alias="XSSPOLICY_BASE_URL")
    extra_protocols: str = Field(default="", alias="XSSPOLICY_EXTRA_PROTOCOLS")
    log_json: bool = Field(default=True, alias="XSSPOLICY_LOG_JSON")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Ensure the profile exists and the base URL is usable."""
        if self.profile not in PROFILES:
            raise ValueError(
                f"XSSPOLICY_PROFILE must be one of {', '.join(sorted(PROFILES))}, "
                f"got '{self.profile}'"
            )

        parsed = urlsplit(self.base_url)
        if not parsed.scheme or not parsed.hostname:
            raise ValueError(
                f"XSSPOLICY_BASE_URL must be an absolute URL with a host, got '{self.base_url}'"
            )

        return self

    @property
    def protocol_list(self) -> list[str]:
        """Parse comma-separated extra protocols into a list."""
        return [p.strip() for p in self.extra_protocols.split(",") if p.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
