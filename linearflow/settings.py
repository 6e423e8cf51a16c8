"""Settings resolution from the process environment and a local .env file."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class LinearFlowSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Linear
    linear_api_key: SecretStr | None = None
    linear_team_gateway: str | None = None  # the one team this deployment routes to
    linear_webhook_secret: SecretStr | None = None  # unset = inbound webhooks are not verified

    # Discord
    discord_token: SecretStr | None = None
    discord_client_id: str | None = None  # application id
    discord_public_key: str | None = None  # hex Ed25519 key for interaction signatures
    discord_channel_issues: str | None = None

    # HTTP listener
    webhook_port: int = 3000
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> LinearFlowSettings:
    """Return process-wide settings, loaded once."""
    return LinearFlowSettings()
