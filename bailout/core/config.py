"""
Application configuration loader and it handles:
- Environment variables
- Database configuration
- Transaction retry policy
- Share link base URL

And, the main purpose:
Central place for system configuration.
"""


from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./bailout.db"
    DB_ECHO: bool = False
    SQLITE_BUSY_TIMEOUT: float = 15.0  # seconds a writer waits for the lock

    # Transaction retries (conflicts / transient storage errors)
    TX_MAX_ATTEMPTS: int = 3
    TX_RETRY_BACKOFF: float = 0.05

    # Share links handed out at plan creation
    PUBLIC_BASE_URL: str = "http://localhost:3000"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
