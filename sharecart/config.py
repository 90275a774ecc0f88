"""Service configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from SHARECART_* environment variables, then .env, then
    the defaults below.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHARECART_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "sharecart"
    log_level: str = "INFO"

    # o_o.ini is tiny; the name field alone is capped at 1023 bytes.
    max_upload_bytes: int = Field(
        default=64 * 1024,
        gt=0,
        description="Largest accepted o_o.ini upload, in bytes",
    )


settings = Settings()
