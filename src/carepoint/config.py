"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with CAREPOINT_ prefix.
No config files — just env vars (12-factor app style).
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via CAREPOINT_* env vars."""

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 30

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Appointment reminders
    reminder_interval_seconds: float = 60.0
    reminder_window_minutes: int = 1440  # 24h
    reminder_dedupe: bool = False

    # Notification delivery
    notification_send_timeout_seconds: float = 5.0

    # Health advice
    advisor_backend: str = "rules"  # "rules" or "openai"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    water_daily_target_ml: int = 2500

    model_config = {"env_prefix": "CAREPOINT_"}

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure sensitive defaults are changed in non-development environments."""
        if (
            self.environment != "development"
            and self.jwt_secret == "change-me-in-production"
        ):
            raise ValueError(
                "CAREPOINT_JWT_SECRET must be set to a secure value in "
                "non-development environments. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        if self.advisor_backend not in ("rules", "openai"):
            raise ValueError(
                f"CAREPOINT_ADVISOR_BACKEND must be 'rules' or 'openai', "
                f"got {self.advisor_backend!r}"
            )
        return self


# Singleton — import this everywhere
settings = Settings()
