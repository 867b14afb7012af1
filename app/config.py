from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./lingualink.db"

    # JWT Authentication
    SECRET_KEY: str = "dev-only-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Application
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    FRONTEND_URL: str = "http://localhost:3000"

    # Payments
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_PUBLISHABLE_KEY: Optional[str] = None
    PAYMENT_CURRENCY: str = "usd"
    MOCK_PAYMENTS_ENABLED: bool = True

    # Trainer profile defaults
    DEFAULT_HOURLY_RATE: float = 25.0

    # Sessions / video rooms
    SESSION_DEFAULT_DURATION: int = 60
    SESSION_DEFAULT_MAX_STUDENTS: int = 10
    MEETING_BASE_URL: str = "https://meet.jit.si"
    MEETING_ROOM_PREFIX: str = "lingualink"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def allowed_origins(self) -> List[str]:
        """CORS origins from the comma-separated FRONTEND_URL."""
        return [origin.strip() for origin in self.FRONTEND_URL.split(",") if origin.strip()]


settings = Settings()
