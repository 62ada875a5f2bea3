"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments
  2. Environment variables  (COSMOFY__FETCHER__TIMEOUT_SECONDS=5)
  3. cosmofy.yaml           (searched in cwd, then platform config dir)
  4. Hardcoded defaults

The NASA key is additionally read from the conventional ``NASA_API_KEY``
variable. The config file is optional: all other fields have sensible
defaults, and a missing NASA key only disables the APOD endpoints.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import AliasChoices, BaseModel, Field, SecretStr
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


def _find_config_file() -> str | None:
    """Return the path of the first cosmofy.yaml found, or None."""
    candidates = [
        Path("cosmofy.yaml"),
        Path(platformdirs.user_config_dir("cosmofy")) / "cosmofy.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class FetcherSettings(BaseModel):
    timeout_seconds: float = 10.0
    max_retries: int = 3
    retry_backoff_seconds: float = 2.0
    user_agent: str = "Cosmofy-Space-App/1.0"


class NasaSettings(BaseModel):
    base_url: str = "https://api.nasa.gov"
    cache_ttl_seconds: int = 5 * 60
    gallery_days: int = 30
    neo_cache_ttl_seconds: int = 60 * 60
    # NeoWs rejects feed windows longer than seven days.
    asteroid_window_days: int = 7


class NewsSettings(BaseModel):
    base_url: str = "https://api.spaceflightnewsapi.net/v4"
    cache_ttl_seconds: int = 15 * 60


class IssSettings(BaseModel):
    # An empty position_url means "no live upstream configured".
    position_url: str = "http://api.open-notify.org/iss-now.json"
    passes_url: str = "http://api.open-notify.org/iss-pass.json"
    crew_url: str = "http://api.open-notify.org/astros.json"
    position_ttl_seconds: int = 60
    # crew roster and pass predictions
    reference_ttl_seconds: int = 60 * 60
    fallback_enabled: bool = True


class GeocodingSettings(BaseModel):
    enabled: bool = True
    base_url: str = "https://nominatim.openstreetmap.org"
    cache_ttl_seconds: int = 24 * 60 * 60
    # Used by /api/location when the caller sends no coordinates (Mumbai).
    default_latitude: float = 19.076
    default_longitude: float = 72.8777


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: COSMOFY__SERVER__PORT=9090
        env_prefix="COSMOFY__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    nasa_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("nasa_api_key", "NASA_API_KEY", "COSMOFY__NASA_API_KEY"),
    )

    server: ServerSettings = ServerSettings()
    fetcher: FetcherSettings = FetcherSettings()
    nasa: NasaSettings = NasaSettings()
    news: NewsSettings = NewsSettings()
    iss: IssSettings = IssSettings()
    geocoding: GeocodingSettings = GeocodingSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def nasa_key(self) -> str | None:
        """The NASA key as plain text, or None when absent or blank."""
        if self.nasa_api_key is None:
            return None
        return self.nasa_api_key.get_secret_value().strip() or None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
