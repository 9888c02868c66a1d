"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    
    # Environment
    ENV: str = "dev"
    
    VERSION: str = "0.1.0"
    
    # Set by the test suite; disables rate limits
    TESTING: bool = False
    
    LOG_LEVEL: str = "INFO"
    
    # Database
    DATABASE_URL: str
    
    # Session Token (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 8
    
    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"
    
    # Internal scheduled endpoints (cron jobs)
    INTERNAL_SECRET: str = ""  # Secret for /internal/* endpoints
    
    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""
    
    # Rate Limiting (requests per minute, per client address)
    RATE_LIMIT_API: int = 120
    REDIS_URL: str = ""  # Shared limiter storage; in-memory when unset
    
    # WhatsApp Business API (customer notifications)
    WHATSAPP_PHONE_NUMBER_ID: str = ""
    WHATSAPP_ACCESS_TOKEN: str = ""
    WHATSAPP_API_VERSION: str = "v17.0"
    WHATSAPP_TIMEOUT_SECONDS: float = 10.0
    
    # Contracts expiring within this many days get a renewal reminder
    CONTRACT_RENEWAL_REMINDER_DAYS: int = 30
    
    # Document numbering: insert attempts before giving up on a code collision
    DOCUMENT_CODE_MAX_ATTEMPTS: int = 3
    
    # When True, records in a terminal status cannot move to another status
    STRICT_STATUS_WORKFLOW: bool = False
    
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
    
    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets


settings = Settings()
