# 📄 File: flor/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# and hands them to the rest of the Flor app, from database address to AI feature flags.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for all application configuration parameters.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - python-dotenv (via pydantic-settings) for .env file loading
#
# 🔄 Connected Modules / Calls From:
# - flor.main (application startup)
# - Database connection and Supabase modules
# - Usage limit service, AI clients, photo storage

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="Flor Plant Care API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="Houseplant watering tracker with AI-assisted plant identification",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=True, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="text", description="Log output format (text/json)")

    # =========================================================================
    # SERVER CONFIGURATION
    # =========================================================================

    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    RELOAD: bool = Field(default=True, description="Auto-reload on changes")
    WORKERS: int = Field(default=1, description="Number of worker processes")

    # =========================================================================
    # DATABASE CONFIGURATION
    # =========================================================================

    DATABASE_URL: Optional[str] = Field(None, description="Async SQLAlchemy connection URL")
    DB_HOST: str = Field(default="localhost", description="Database host")
    DB_PORT: int = Field(default=5432, description="Database port")
    DB_NAME: str = Field(default="postgres", description="Database name")
    DB_USER: str = Field(default="postgres", description="Database user")
    DB_PASSWORD: str = Field(default="", description="Database password")

    DB_POOL_SIZE: int = Field(default=10, description="Database pool size")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Database pool overflow")
    DB_POOL_TIMEOUT: int = Field(default=30, description="Database pool timeout")
    DB_POOL_RECYCLE: int = Field(default=3600, description="Database pool recycle time")

    # =========================================================================
    # SUPABASE SERVICES
    # =========================================================================

    SUPABASE_URL: str = Field(default="http://localhost:54321", description="Supabase project URL")
    SUPABASE_ANON_KEY: str = Field(default="", description="Supabase anonymous key")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(default="", description="Supabase service role key")
    SUPABASE_JWT_SECRET: str = Field(default="", description="Secret used to sign Supabase access tokens")
    SUPABASE_JWT_AUDIENCE: str = Field(default="authenticated", description="Expected JWT audience")
    SUPABASE_STORAGE_BUCKET: str = Field(default="plant-photos", description="Plant photo bucket")

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="CORS allowed origins"
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True, description="CORS allow credentials")

    # =========================================================================
    # USAGE LIMITS
    # =========================================================================

    AI_GENERATIONS_PER_MONTH: int = Field(default=20, description="Monthly AI plant creations per user")
    MAX_PLANTS_PER_USER: int = Field(default=100, description="Total plants per user")
    USAGE_LIMITS_FAIL_OPEN: bool = Field(
        default=True,
        description="Allow the operation when the usage store cannot be read"
    )

    # =========================================================================
    # AI SERVICES
    # =========================================================================

    USE_REAL_PLANTNET_API: bool = Field(default=False, description="Call PlantNet instead of the mock")
    PLANTNET_API_KEY: Optional[str] = Field(None, description="PlantNet API key")
    PLANTNET_API_URL: str = Field(
        default="https://my-api.plantnet.org/v2/identify/all",
        description="PlantNet API URL"
    )

    USE_REAL_OPENAI_API: bool = Field(default=False, description="Call OpenAI instead of the mock")
    OPENAI_API_KEY: Optional[str] = Field(None, description="OpenAI API key")
    OPENAI_API_URL: str = Field(
        default="https://api.openai.com/v1/chat/completions",
        description="OpenAI chat completions URL"
    )
    OPENAI_MODEL: str = Field(default="gpt-4o-mini", description="OpenAI model")
    OPENAI_MAX_TOKENS: int = Field(default=500, description="OpenAI max tokens")

    AI_REQUEST_TIMEOUT_SECONDS: float = Field(default=60.0, description="Hard timeout per AI call")
    AI_MOCK_DELAY_SECONDS: float = Field(default=2.0, description="Simulated latency of mocked AI calls")
    AI_MAX_RETRIES: int = Field(default=3, description="Retries for retryable AI failures")
    AI_IDENTIFY_RATE_LIMIT: str = Field(default="10/minute", description="Identification rate limit")

    # =========================================================================
    # FILE STORAGE
    # =========================================================================

    MAX_IMAGE_INPUT_BYTES: int = Field(default=10 * 1024 * 1024, description="Max upload size (10MB)")
    MAX_IMAGE_OUTPUT_BYTES: int = Field(default=1024 * 1024, description="Max processed size (1MB)")
    IMAGE_MAX_WIDTH: int = Field(default=1920, description="Max processed image width")
    IMAGE_QUALITY: int = Field(default=75, description="JPEG quality for stored photos")

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed_environments = ["development", "staging", "production", "test"]
        if v.lower() not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v.lower()

    @field_validator("CORS_ORIGINS")
    @classmethod
    def validate_cors_origins(cls, v: str) -> str:
        """Validate CORS origins format."""
        origins = [origin.strip() for origin in v.split(",")]
        for origin in origins:
            if not origin.startswith(("http://", "https://", "*")):
                raise ValueError(f"Invalid CORS origin format: {origin}")
        return v

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def database_url(self) -> str:
        """Get the database URL, preferring explicit DATABASE_URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return (
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT == "test"


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
