"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class EmbeddingSettings(BaseSettings):
    """Embedding provider configuration.

    Talks to any OpenAI-compatible ``/embeddings`` endpoint. The presence of
    ``api_key`` is the switch between real and mock embeddings.
    """

    model_config = SettingsConfigDict(env_prefix="EMBEDDING_", populate_by_name=True)

    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Embedding API base URL",
    )
    model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model name",
    )
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("EMBEDDING_API_KEY", "OPENAI_API_KEY"),
        description="Provider API key; mock embeddings are used when unset",
    )
    dimensions: int = Field(
        default=1536,
        gt=0,
        description="Vector dimensions shared by every collection",
    )
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
    )
    batch_size: int = Field(
        default=32,
        description="Batch size for embedding requests",
    )

    @property
    def is_configured(self) -> bool:
        """Whether a provider credential is available."""
        return self.api_key is not None and bool(self.api_key.get_secret_value())


class QdrantSettings(BaseSettings):
    """Qdrant vector database configuration."""

    model_config = SettingsConfigDict(env_prefix="QDRANT_")

    url: str = Field(
        default="http://localhost:6333",
        description="Qdrant server URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Qdrant API key (optional for local)",
    )
    collection_prefix: str = Field(
        default="",
        description="Prefix applied to every collection name",
    )
    timeout: int = Field(
        default=10,
        description="Request timeout in seconds",
    )


class DatabaseSettings(BaseSettings):
    """Relational store configuration."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    url: str = Field(
        default="sqlite+aiosqlite:///./forum.db",
        description="SQLAlchemy async database URL",
    )
    echo: bool = Field(
        default=False,
        description="Log emitted SQL",
    )


class SearchSettings(BaseSettings):
    """Search endpoint configuration."""

    model_config = SettingsConfigDict(env_prefix="SEARCH_")

    default_limit: int = Field(
        default=10,
        description="Results returned when no limit is given",
    )
    max_limit: int = Field(
        default=100,
        description="Upper bound accepted for the limit parameter",
    )
    timeout: float = Field(
        default=15.0,
        description="Upper bound in seconds for the vector search path",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # API settings
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        description="API server port",
    )

    # Nested settings
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    qdrant: QdrantSettings = Field(default_factory=QdrantSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
