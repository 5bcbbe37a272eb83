from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "ecommerce"
    PRODUCTS_COLLECTION: str = "products"
    MONGO_TIMEOUT_MS: int = Field(default=5000, ge=100)

    # Signs the session cookie set by the login flow
    SESSION_SECRET: SecretStr = SecretStr("dev-session-secret")

    API_PREFIX: str = "/api"
    DEFAULT_PAGE_LIMIT: int = Field(default=10, ge=1)
    MAX_PAGE_LIMIT: int = Field(default=100, ge=1)

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
