"""Runtime configuration — env-driven via pydantic-settings.

Reads from a ``.env`` file and ``CHATLINK_*`` environment variables.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ChatlinkConfig(BaseSettings):
    """Runtime configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export CHATLINK_BOT_TOKEN=...
        export CHATLINK_APPLICATION_ID=915192869139148860
        export CHATLINK_DELIVERY_TIMEOUT_SECONDS=5

    Or via .env file::

        CHATLINK_ENVIRONMENT=production
        CHATLINK_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CHATLINK_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Host platform credentials
    bot_token: str = ""
    application_id: str = ""

    # Delivery transport
    api_base_url: str = "https://discord.com/api/v10"
    delivery_timeout_seconds: float = 10.0
    endpoint_name: str = "Chat linker"

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level singleton: import as `from chatlink.config import config`
config = ChatlinkConfig()
