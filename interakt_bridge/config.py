"""Bridge configuration."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Environment-driven settings, loaded once at startup."""

    # Razorpay (order lookup + webhook signature)
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    razorpay_base_url: str = "https://api.razorpay.com"
    webhook_secret: str = ""

    # Interakt
    interakt_api_key: str = ""
    interakt_workspace_id: str | None = None
    interakt_base_url: str = "https://api.interakt.ai"
    default_country_code: str = "+91"

    # Outbound HTTP
    http_timeout_seconds: float = 10.0

    # Process
    port: int = 3000
    app_env: str = "development"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def binds_socket(self) -> bool:
        """Whether the process should listen itself (False when an ASGI host invokes it)."""
        return self.app_env.lower() != "production"


def get_settings() -> Settings:
    return Settings()
