"""FastAPI application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from inksink.agents.model_registry import CLASSIFIER_MODEL, DEFAULT_MODEL, TITLE_MODEL, ModelName


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Resource prefix for Azure resources
    resource_prefix: str = "inksink-dev"

    # Chat storage mode: "postgres", "redis", "local_psql" or "local_redis"
    # local_* modes skip SSO headers and use the test user below
    chat_history_mode: str = "redis"

    # PostgreSQL configuration
    postgres_port: int = 5432
    postgres_admin_login: str = "pgadmin"
    postgres_database: str = "inksink"
    postgres_sslmode: str = "require"

    # Redis configuration
    redis_port: int = 6380
    redis_ssl: bool = True
    redis_ttl_seconds: int = 1800

    # Models
    default_model: ModelName = DEFAULT_MODEL
    classifier_model: ModelName = CLASSIFIER_MODEL
    title_model: ModelName = TITLE_MODEL

    # Credits spent per completed chat turn
    credits_per_message: int = 1

    # Local testing credentials (for local_psql/local_redis modes)
    local_test_client_id: str = "00000000-0000-0000-0000-000000000001"
    local_test_username: str = "local_user"

    @property
    def key_vault_name(self) -> str:
        """Get Key Vault name derived from resource prefix."""
        return f"{self.resource_prefix.replace('-', '')}kv"

    @property
    def postgres_host(self) -> str:
        """Get PostgreSQL host derived from resource prefix."""
        return f"{self.resource_prefix}-postgres.postgres.database.azure.com"

    @property
    def redis_host(self) -> str:
        """Get Redis host derived from resource prefix."""
        return f"{self.resource_prefix}-redis.redis.cache.windows.net"

    @property
    def is_local_mode(self) -> bool:
        return self.chat_history_mode in ("local_psql", "local_redis")

    @property
    def use_redis(self) -> bool:
        return self.chat_history_mode in ("redis", "local_redis")

    def get_postgres_connection_string(self, password: str) -> str:
        """Build PostgreSQL connection string.

        Args:
            password: PostgreSQL admin password from Key Vault

        Returns:
            PostgreSQL connection string
        """
        return (
            f"postgresql://{self.postgres_admin_login}:{password}"
            f"@{self.postgres_host}:{self.postgres_port}"
            f"/{self.postgres_database}?sslmode={self.postgres_sslmode}"
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
