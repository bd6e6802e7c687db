"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./formflow.db"

    # Internal scheduled endpoints (cron jobs) and admin endpoints
    INTERNAL_SECRET: str = ""

    # Proxy/Load Balancer Settings
    # Set to True when running behind nginx/Cloudflare to trust X-Forwarded-For
    TRUST_PROXY_HEADERS: bool = False

    # Spam
    SPAM_KEYWORDS: str = ""  # One rule per line; {{ }} expressions are expanded per submission
    SAVE_SPAM: bool = True
    SPAM_LIMIT: int = 500  # Newest spam submissions kept when SAVE_SPAM is on
    SPAM_EMAIL_NOTIFICATIONS: bool = False
    SPAM_LOGGING: bool = False

    # Queueing (deferred delivery through the jobs table)
    USE_QUEUE_FOR_NOTIFICATIONS: bool = True
    USE_QUEUE_FOR_INTEGRATIONS: bool = True

    # Retention
    MAX_INCOMPLETE_SUBMISSION_AGE: int = 30  # Days; 0 disables pruning

    # Delivery
    RESEND_API_KEY: str = ""  # Emails are logged, not sent, when empty
    EMAIL_FROM: str = "noreply@example.com"
    EMAIL_FROM_NAME: str = ""
    INTEGRATION_TIMEOUT_SECONDS: float = 30.0

    # Worker
    WORKER_POLL_INTERVAL: int = 10
    WORKER_BATCH_SIZE: int = 10

    @property
    def spam_keyword_list(self) -> list[str]:
        """Parse SPAM_KEYWORDS into trimmed, non-empty rules."""
        return [line.strip() for line in self.SPAM_KEYWORDS.splitlines() if line.strip()]

    @property
    def is_dev(self) -> bool:
        return self.ENV == "dev"


settings = Settings()
