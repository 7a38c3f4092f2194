from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str

    # JWT settings
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    # API settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Feedback Forms API"
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: list = ["*"]

    # Rate limiting, only active when REDIS_URL is set
    REDIS_URL: Optional[str] = None
    RATE_LIMIT_PER_MINUTE: int = 100

    # Logging settings
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

@lru_cache()
def get_settings() -> Settings:
    """
    Get settings instance with caching.

    DATABASE_URL and SECRET_KEY have no defaults, so a missing value
    fails here the first time settings are read.

    Returns:
        Settings instance
    """
    return Settings()
