from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, validator


class Settings(BaseSettings):
    """Application settings with automatic loading from .env file"""

    # Database configuration
    mongo_uri: str = Field(default="mongodb://localhost:27017", alias="MONGODB_URI")
    mongo_db_name: str = Field(default="walletauth", alias="MONGO_DB_NAME")
    auth_collection_name: str = Field(default="auth", alias="AUTH_COLLECTION")
    database_backend: str = Field(default="mongo", alias="DATABASE_BACKEND")
    mongo_timeout_ms: int = Field(default=5000, alias="MONGO_TIMEOUT_MS")

    # Application settings
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    @validator("database_backend")
    def validate_database_backend(cls, v):
        """Only the MongoDB and in-memory backends are supported"""
        backend = v.strip().lower()
        if backend not in ("mongo", "memory"):
            raise ValueError("DATABASE_BACKEND must be either 'mongo' or 'memory'")
        return backend

    @validator("log_level")
    def validate_log_level(cls, v):
        return v.strip().upper()

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        if isinstance(self.cors_origins, str):
            if "," in self.cors_origins:
                return [origin.strip() for origin in self.cors_origins.split(",")]
            return [self.cors_origins.strip()]
        return self.cors_origins

    class Config:
        env_file = [".env"]
        env_file_encoding = 'utf-8'
        case_sensitive = False
        populate_by_name = True


# Create a singleton instance
settings = Settings()
