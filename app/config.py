"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class AIProvider(str, Enum):
    """Chat-completions providers the classifier can talk to"""

    OPENAI = "openai"
    GOOGLE = "google"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="DietAudit", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Upstream nutrition platform
    api_base_url: str = Field(
        default="https://bn-new-api.balancenutritiononline.com/api/v1",
        description="Base URL of the nutrition platform API",
    )
    api_token: str = Field(default="", description="Bearer token for upstream calls")
    client_api_url: Optional[str] = Field(
        default=None, description="Client profile endpoint (defaults from base URL)"
    )
    client_header_source: str = Field(
        default="cs_db", description="Source header sent with client lookups"
    )
    template_api_url: Optional[str] = Field(
        default=None, description="Diet template listing endpoint"
    )
    template_header_source: str = Field(
        default="mentor_db", description="Source header sent with template lookups"
    )
    recipe_api_url: Optional[str] = Field(
        default=None, description="Recipe batch-search endpoint"
    )
    upstream_timeout_sec: float = Field(
        default=15.0, gt=0, description="Timeout for profile/template requests"
    )
    enrichment_timeout_sec: float = Field(
        default=5.0, gt=0, description="Timeout for the ingredient batch lookup"
    )

    # Classifier
    ai_provider: AIProvider = Field(
        default=AIProvider.OPENAI, description="Chat-completions provider"
    )
    ai_model: str = Field(default="gpt-4o-mini", description="Model name")
    ai_base_url: Optional[str] = Field(
        default=None, description="Override for the provider base URL"
    )
    ai_temperature: float = Field(
        default=0.1, ge=0, le=2, description="Sampling temperature for audits"
    )
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    gemini_api_key: Optional[str] = Field(default=None, description="Gemini API key")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="DietAudit API", description="API documentation title"
    )
    api_description: str = Field(
        default="Audits meal plans against client dietary restrictions",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("ai_provider", mode="before")
    @classmethod
    def validate_ai_provider(cls, v):
        if isinstance(v, str):
            return AIProvider(v.strip().lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING

    @property
    def client_url(self) -> str:
        return self.client_api_url or (
            f"{self.api_base_url}/client-details/get-single-client-by-user_id"
        )

    @property
    def template_url(self) -> str:
        return self.template_api_url or f"{self.api_base_url}/special-diet-plan/all"

    @property
    def recipe_batch_url(self) -> str:
        """Batch-search endpoint, derived from a configured listing URL if needed"""
        url = self.recipe_api_url or f"{self.api_base_url}/recipe/batch-search"
        if url.endswith("/all"):
            return url[: -len("/all")] + "/batch-search"
        if "batch-search" not in url:
            return url.rsplit("/", 1)[0] + "/batch-search"
        return url

    def classifier_credentials(self) -> tuple[Optional[str], Optional[str]]:
        """Return (api_key, base_url) for the configured provider"""
        if self.ai_provider == AIProvider.GOOGLE:
            return self.gemini_api_key, self.ai_base_url or GEMINI_OPENAI_BASE_URL
        return self.openai_api_key, self.ai_base_url


# Global settings instance
settings = Settings()
