"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from closure_watch.domain.models import ScanPolicy


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./closure_watch.db"

    # Upstream ledger API
    ledger_api_base: str = "https://api.s.unit.sh"
    ledger_api_token: str | None = None

    # Outbound alerts
    slack_webhook_url: str | None = None

    # Service
    service_name: str = "closure-watch"
    log_level: str = "INFO"

    # Scan policy
    threshold_days: int = 50
    page_size: int = 100
    max_pages: int = 50
    transaction_history_limit: int = 50
    fallback_days: int = 7
    max_concurrency: int = 5

    # HTTP Client
    http_timeout_seconds: float = 10.0
    webhook_max_retries: int = 5
    webhook_backoff_base: float = 1.0  # Exponential backoff base in seconds

    def scan_policy(self) -> ScanPolicy:
        """Build the scan policy handed to the orchestrator"""
        return ScanPolicy(
            threshold_days=self.threshold_days,
            page_size=self.page_size,
            max_pages=self.max_pages,
            transaction_history_limit=self.transaction_history_limit,
            fallback_days=self.fallback_days,
            max_concurrency=self.max_concurrency,
        )


settings = Settings()
