"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    log_level: str = "INFO"
    # "console" for development, "json" for log shipping
    log_format: str = "console"
    # Modules imported at startup so their pumps register themselves
    pump_modules: list[str] = []

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="REPORT_ENGINE_",
        # Allow extra fields to be loaded but not validated
        extra="ignore",
    )
