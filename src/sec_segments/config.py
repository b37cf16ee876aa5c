"""Configuration management via environment variables.

Reads from .env file (via pydantic-settings) with sensible defaults.
All values can be overridden via environment variables.

Required:
    EDGAR_IDENTITY  — Your name + email for SEC EDGAR API User-Agent header

Optional:
    REQUEST_TIMEOUT — Seconds to wait on any single SEC request
    PORT            — HTTP server port
    LOG_LEVEL       — Root logging level for the HTTP service
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # SEC EDGAR API identity (name + email, required by SEC)
    edgar_identity: str = "SEC-Segments sec-segments@example.com"

    # Per-request timeout for SEC endpoints (seconds)
    request_timeout: float = 30.0

    # HTTP server port
    port: int = 8877

    log_level: str = "INFO"

    # .env files often carry trailing spaces and stray quotes
    @field_validator("edgar_identity", "log_level", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().strip('"').strip("'").strip()
        return v

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_config: Settings | None = None


def get_config() -> Settings:
    """Get or create the shared Settings singleton."""
    global _config
    if _config is None:
        _config = Settings()
    return _config
