"""All settings, loaded from the .env file."""
from functools import lru_cache

from pydantic_settings import BaseSettings

APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    # App
    app_url: str = "http://localhost:8000"
    secret_key: str = "change-me"
    database_url: str = "sqlite:///./general.db"
    log_level: str = "INFO"

    # Microsoft Azure (application mail via Graph)
    azure_client_id: str = ""
    azure_client_secret: str = ""
    azure_tenant_id: str = ""
    mail_sender: str = ""
    feedback_recipient: str = ""

    # Payments
    payment_currency: str = "usd"

    # Service-to-service auth
    agent_api_key: str = ""

    # Rate limiting
    rate_limit_enabled: bool = True
    cache_backend: str = "memory"  # memory | redis
    redis_url: str = ""

    @property
    def mail_configured(self) -> bool:
        return all((
            self.azure_client_id, self.azure_client_secret, self.azure_tenant_id,
            self.mail_sender, self.feedback_recipient,
        ))

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
