"""
Configuration management for graphloader
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Keyed cache
    cache_ttl_seconds: float = 600.0  # 10 minutes after write
    cache_max_size: int = 1024

    # Record store
    store_latency_seconds: float = 0.0  # Simulated backend latency

    # Loaders
    max_batch_size: int | None = None

    # Query execution
    query_timeout_seconds: float | None = 30.0

    # Logging
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "GRAPHLOADER_"
        case_sensitive = False


# Global settings instance
settings = Settings()
