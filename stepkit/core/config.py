from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from stepkit.schemas.steps import StepServiceConfig


class Settings(BaseSettings):
    # Environment mode: dev or prod
    ENV: Literal["dev", "prod"] = "dev"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str | None = None  # file sink disabled unless set
    SLACK_WEBHOOK_URL: str | None = None

    # Aggregation engine
    USE_HYBRID_MODE: bool = True
    RECENT_WINDOW_LOOKBACK_DAYS: int = Field(default=7, ge=0)
    FIRST_WEEKDAY: int = Field(default=0, ge=0, le=6)  # 0=Monday .. 6=Sunday
    TIMEZONE: str | None = None  # IANA name; local time when unset

    # Historical provider (CSV of timestamp,steps rows)
    HISTORY_CSV_PATH: str | None = None
    HISTORY_AUTHORIZATION: Literal["authorized", "not_determined", "denied"] = "not_determined"

    # Recent-window provider (in-memory sample buffer)
    RECENT_PROVIDER_ENABLED: bool = True

    # Docs Configuration
    DOCS_ENABLED: bool | None = None  # Override docs setting (None = auto based on ENV)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # ignore unrelated keys in local .env
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "prod"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENV == "dev"

    @property
    def debug_enabled(self) -> bool:
        """Debug mode is only enabled in development."""
        return self.is_development

    @property
    def effective_log_level(self) -> str:
        """Return appropriate log level based on environment."""
        if self.is_production:
            # In production, minimum INFO level (ignore DEBUG)
            return self.LOG_LEVEL if self.LOG_LEVEL.upper() != "DEBUG" else "INFO"
        return self.LOG_LEVEL

    @property
    def docs_enabled(self) -> bool:
        """Swagger/ReDoc docs enabled based on environment or override."""
        if self.DOCS_ENABLED is not None:
            return self.DOCS_ENABLED
        return self.is_development

    def service_config(self) -> StepServiceConfig:
        """Build the immutable engine configuration from environment settings."""
        return StepServiceConfig(
            use_hybrid_mode=self.USE_HYBRID_MODE,
            recent_window_lookback_days=self.RECENT_WINDOW_LOOKBACK_DAYS,
            first_weekday=self.FIRST_WEEKDAY,
            timezone=self.TIMEZONE,
        )


settings = Settings()
