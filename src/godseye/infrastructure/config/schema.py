"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from godseye.domain.entities.media import PROVIDER_PAGE_CEILING, Catalog
from godseye.domain.exceptions import ConfigError

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _normalize_path(value: Any) -> Path:
    """Coerce str/Path to an expanded Path. Never touches the filesystem."""
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class SearchConfig(BaseModel):
    """Query coordination tuning (YAML section: search.*)."""

    debounce_ms: int = Field(
        default=300,
        description="Quiet window before typed text is committed (ms).",
    )
    suggestion_limit: int = Field(
        default=8,
        description="Max suggestions shown under the search box.",
    )
    suggestion_min_length: int = Field(
        default=2,
        description="Minimum trimmed query length before suggesting.",
    )
    page_ceiling: int = Field(
        default=PROVIDER_PAGE_CEILING,
        description="Highest page the provider serves; total_pages is clamped to it.",
    )
    default_catalog: Catalog = Field(
        default=Catalog.ALL,
        description="Catalog used when a command does not choose one.",
    )

    @field_validator("debounce_ms")
    @classmethod
    def _validate_debounce(cls, v: int) -> int:
        if v < 0:
            raise ValueError("debounce_ms must be >= 0")
        return v

    @field_validator("suggestion_limit", "page_ceiling")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0


class AppConfig(BaseModel):
    """
    Final, validated settings for one process.

    Flat field names (``tmdb_api_key``) and YAML section paths
    (``tmdb.api_key``) are both accepted via validation aliases; load.py
    decides which layer wins.
    """

    # General
    app_name: str = Field(default="godseye", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # TMDB (YAML section: tmdb.*)
    tmdb_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "tmdb_api_key",
            AliasPath("tmdb", "api_key"),
        ),
        description="TMDB API key (kept server-side, never sent to browsers).",
    )
    tmdb_base_url: str = Field(
        default="https://api.themoviedb.org/3",
        validation_alias=AliasChoices(
            "tmdb_base_url",
            AliasPath("tmdb", "base_url"),
        ),
        description="TMDB API base URL.",
    )
    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p",
        validation_alias=AliasChoices(
            "tmdb_image_base_url",
            AliasPath("tmdb", "image_base_url"),
        ),
        description="Base URL for poster/backdrop images.",
    )
    tmdb_embed_base_url: str = Field(
        default="https://vidsrc.to/embed",
        validation_alias=AliasChoices(
            "tmdb_embed_base_url",
            AliasPath("tmdb", "embed_base_url"),
        ),
        description="Base URL of the external video player embed.",
    )
    tmdb_language: str = Field(
        default="en-US",
        validation_alias=AliasChoices(
            "tmdb_language",
            AliasPath("tmdb", "language"),
        ),
        description="Locale sent with every TMDB request.",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds for provider calls.",
    )
    http_user_agent: str = Field(
        default="godseye/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )
    http_max_retries: int = Field(
        default=3,
        validation_alias=AliasChoices(
            "http_max_retries",
            AliasPath("http", "max_retries"),
        ),
        description="Retries on 429/503 before giving up.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Preferences (YAML section: preferences.dir)
    preferences_dir: Path = Field(
        default=Path("./.godseye"),
        validation_alias=AliasChoices(
            "preferences_dir",
            AliasPath("preferences", "dir"),
        ),
        description="Directory of the persisted theme preference.",
    )

    # Search tuning (YAML section: search.*)
    search: SearchConfig = Field(default_factory=SearchConfig)

    @field_validator("preferences_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("http_max_retries")
    @classmethod
    def _validate_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("http_max_retries must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def require_tmdb_api_key(self) -> str:
        """Return the API key, or raise ConfigError for commands that need it."""
        if not self.tmdb_api_key:
            raise ConfigError(
                "TMDB API key missing: set GODSEYE_TMDB_API_KEY or tmdb.api_key"
            )
        return self.tmdb_api_key

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.

        The API key is masked.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "tmdb": {
                "api_key": "***" if self.tmdb_api_key else None,
                "base_url": self.tmdb_base_url,
                "image_base_url": self.tmdb_image_base_url,
                "embed_base_url": self.tmdb_embed_base_url,
                "language": self.tmdb_language,
            },
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
                "max_retries": self.http_max_retries,
            },
            "search": self.search.model_dump(mode="json"),
            "logging": {"level": self.log_level, "format": self.log_format},
            "preferences": {"dir": str(self.preferences_dir)},
        }


class EnvOverrides(BaseSettings):
    """
    ``GODSEYE_*`` environment variables, e.g. GODSEYE_TMDB_API_KEY,
    GODSEYE_SEARCH_DEBOUNCE_MS or GODSEYE_LOG_LEVEL.

    Unset variables stay None and are left out of the merge.
    """

    model_config = SettingsConfigDict(
        env_prefix="GODSEYE_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    tmdb_api_key: Optional[str] = None
    tmdb_base_url: Optional[str] = None
    tmdb_image_base_url: Optional[str] = None
    tmdb_embed_base_url: Optional[str] = None
    tmdb_language: Optional[str] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None
    http_max_retries: Optional[int] = None

    search_debounce_ms: Optional[int] = None
    search_suggestion_limit: Optional[int] = None
    search_suggestion_min_length: Optional[int] = None
    search_page_ceiling: Optional[int] = None
    search_default_catalog: Optional[Catalog] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    preferences_dir: Optional[Path] = None

    @field_validator("preferences_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
