"""Application configuration using pydantic-settings."""

from typing import Any

from pydantic import ValidationInfo, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from services.credential_manager import CREDENTIAL_KEYS, get_credential


class KeychainSettingsSource(PydanticBaseSettingsSource):
    """Load quote provider API keys from the OS keychain via ``keyring``.

    Only fields whose uppercase name appears in
    :data:`~services.credential_manager.CREDENTIAL_KEYS` are looked up.
    All other fields return ``None`` so the next source in the chain
    handles them.
    """

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        env_name = field_name.upper()
        if env_name not in CREDENTIAL_KEYS:
            return None, field_name, False
        value = get_credential(env_name)
        return value, field_name, False

    def __call__(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        for field_name, field_info in self.settings_cls.model_fields.items():
            value, key, is_complex = self.get_field_value(field_info, field_name)
            if value is not None:
                d[key] = value
        return d


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            KeychainSettingsSource(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    # Database
    DATABASE_URL: str = "sqlite:///./finbuddy.db"

    # Primary quote source (Finnhub)
    FINNHUB_API_KEY: str = ""
    FINNHUB_API_ENABLED: bool = False

    # Secondary quote source (Alpha Vantage)
    ALPHAVANTAGE_API_KEY: str = ""

    # Price resolution
    QUOTE_TIMEOUT_SECONDS: float = 5.0
    PRICE_CACHE_TTL_SECONDS: int = 300

    # Background refresh
    REFRESH_SCHEDULER_ENABLED: bool = False
    REFRESH_INTERVAL_MINUTES: int = 15
    REFRESH_STALE_AFTER_MINUTES: int = 15
    REFRESH_REQUEST_DELAY_SECONDS: float = 0.2
    REFRESH_MAX_WORKERS: int = 1

    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize LOG_LEVEL to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}, got {v!r}")
        return v.upper()

    @field_validator(
        "QUOTE_TIMEOUT_SECONDS",
        "PRICE_CACHE_TTL_SECONDS",
        "REFRESH_INTERVAL_MINUTES",
        "REFRESH_STALE_AFTER_MINUTES",
    )
    @classmethod
    def validate_positive(cls, v: float, info: ValidationInfo) -> float:
        """Timeouts, TTLs and intervals must be strictly positive."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive, got {v!r}")
        return v

    @field_validator("REFRESH_REQUEST_DELAY_SECONDS")
    @classmethod
    def validate_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"REFRESH_REQUEST_DELAY_SECONDS must be >= 0, got {v!r}")
        return v

    @field_validator("REFRESH_MAX_WORKERS")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"REFRESH_MAX_WORKERS must be >= 1, got {v!r}")
        return v


settings = Settings()
