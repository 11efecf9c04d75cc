# moneywise/core/config.py

from pathlib import Path
from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "MoneyWise API"
    DEBUG: bool = False
    VERSION: str = "1.0.0"

    # Database Configuration
    DATABASE_URL: str

    # JWT / Security Configuration
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:5173"

    # SendGrid Configuration (report emails, password resets)
    SENDGRID_API_KEY: str = ""
    EMAIL_FROM: EmailStr = "noreply@moneywise.app"
    EMAIL_FROM_NAME: str = "MoneyWise Team"

    # Backend Configuration
    BACKEND_BASE_URL: str = "http://localhost:8000"

    # AI Insights Configuration
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_MODEL: str = "deepseek/deepseek-chat-v3-0324:free"

    # Optional: Environment
    ENVIRONMENT: str = "development"

    @property
    def is_sqlite(self) -> bool:
        """SQLite URLs (local development, tests) get no connection pool tuning"""
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def jwt_lifetime_seconds(self) -> int:
        return self.ACCESS_TOKEN_EXPIRE_MINUTES * 60

# Create a global settings instance
settings = Settings()
