"""Configuration settings for the TPM GitHub client."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from pydantic import AliasChoices, BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

if TYPE_CHECKING:
    from tpm_github.github.retry import RetryOptions

DEFAULT_CONFIG_FILE = "github-client.config.yaml"

# Top-level keys of the flat config file layout, mapped onto GitHubConfig
FLAT_GITHUB_KEYS = {
    "useragent": "user_agent",
    "apiurl": "api_url",
    "maxretries": "max_retries",
    "retrydelay": "retry_delay_ms",
    "ratelimitretries": "rate_limit_retries",
}


class GitHubConfig(BaseModel):
    """Configuration for the GitHub API client.

    Controls the transport identity and the retry/backoff behavior
    of the resilient request executor.
    """

    user_agent: str = Field(
        default="TPMAgent/1.0.0",
        description="User-Agent header sent with every request",
    )
    api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Transport timeout per request",
    )

    # Retry behavior
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries after the first attempt (total attempts = max_retries + 1)",
    )
    retry_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Base delay for exponential backoff in milliseconds",
    )
    max_delay_ms: int = Field(
        default=30000,
        ge=0,
        description="Upper bound for a single backoff delay in milliseconds",
    )
    backoff_factor: float = Field(
        default=2.0,
        gt=1.0,
        description="Multiplier applied to the delay after each attempt",
    )
    rate_limit_retries: int = Field(
        default=3,
        ge=0,
        description="Maximum waits for a declared rate limit reset per request",
    )

    def retry_options(self) -> RetryOptions:
        """Build the client-wide default retry options."""
        from tpm_github.github.retry import RetryOptions

        return RetryOptions(
            max_retries=self.max_retries,
            base_delay=self.retry_delay_ms / 1000,
            max_delay=self.max_delay_ms / 1000,
            backoff_factor=self.backoff_factor,
            rate_limit_retries=self.rate_limit_retries,
        )


class RateLimitConfig(BaseModel):
    """Configuration for rate limit status classification.

    Thresholds are percentages of the window still remaining.
    """

    healthy_threshold_pct: float = Field(
        default=50.0,
        ge=0.0,
        le=100.0,
        description="% remaining above which status is HEALTHY",
    )
    warning_threshold_pct: float = Field(
        default=20.0,
        ge=0.0,
        le=100.0,
        description="% remaining above which status is WARNING (below healthy); CRITICAL under it",
    )


class ValidationConfig(BaseModel):
    """Defaults for repository setup validation."""

    sprint_duration_weeks: int = Field(
        default=2,
        ge=1,
        le=52,
        description="Sprint length used to space auto-created milestone due dates",
    )
    create_missing_milestones: bool = Field(
        default=True,
        description="Create required milestones that do not exist yet",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from the environment and an optional YAML file.

    Precedence (highest first): constructor arguments, environment variables,
    ``.env``, ``github-client.config.yaml``. Nested values use ``__`` in
    environment variable names, e.g. ``GITHUB__MAX_RETRIES=5``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        yaml_file=DEFAULT_CONFIG_FILE,
    )

    # --------------------------------------------------------------------------
    # Credentials
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("github_token", "github_pat"),
        description="GitHub personal access token (GITHUB_TOKEN or GITHUB_PAT)",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Nested sections
    # --------------------------------------------------------------------------
    github: GitHubConfig = Field(
        default_factory=GitHubConfig,
        description="GitHub client and retry configuration",
    )
    rate_limit: RateLimitConfig = Field(
        default_factory=RateLimitConfig,
        description="Rate limit status thresholds",
    )
    validation: ValidationConfig = Field(
        default_factory=ValidationConfig,
        description="Repository setup validation defaults",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )

    @model_validator(mode="before")
    @classmethod
    def _lift_flat_github_keys(cls, data: Any) -> Any:
        """Accept ``maxRetries: 5`` style top-level keys as the ``github`` section.

        Values already given under ``github`` (for example from
        ``GITHUB__MAX_RETRIES``) take precedence.
        """
        if not isinstance(data, dict):
            return data
        flat = {
            key: value
            for key, value in data.items()
            if isinstance(key, str) and key.lower() in FLAT_GITHUB_KEYS
        }
        if not flat:
            return data

        data = {key: value for key, value in data.items() if key not in flat}
        section = dict(data.get("github") or {})
        for key, value in flat.items():
            section.setdefault(FLAT_GITHUB_KEYS[key.lower()], value)
        data["github"] = section
        return data

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the YAML file source below environment variables."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Settings read from ``config_path`` instead of ``github-client.config.yaml``.

    Without a path this is ``get_settings()``. A missing file is not an
    error: defaults apply and a warning is logged.
    """
    if config_path is None:
        return get_settings()

    path = Path(config_path)
    if not path.is_file():
        from tpm_github.logging import get_logger

        get_logger(__name__).warning("Config file {} not found, using defaults", path)

    class FileSettings(Settings):
        model_config = SettingsConfigDict(yaml_file=path)

    return FileSettings()
