import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_max_capacity: int = int(os.getenv("CACHE_MAX_CAPACITY", "100"))
    cache_similarity_threshold: float = float(os.getenv("CACHE_SIMILARITY_THRESHOLD", "0.92"))
    # Caller preconditions, enforced by the message handler
    cache_min_answer_length: int = int(os.getenv("CACHE_MIN_ANSWER_LENGTH", "10"))
    cache_min_query_length: int = int(os.getenv("CACHE_MIN_QUERY_LENGTH", "25"))

    # Persistence: "file", "redis" or "memory"
    cache_storage: str = os.getenv("CACHE_STORAGE", "file")
    cache_path: str = os.getenv("CACHE_PATH", "prompt_cache.json")
    cache_redis_key: str = os.getenv("CACHE_REDIS_KEY", "prompt_cache:snapshot")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Embedding: "local" (sentence-transformers) or "ollama"
    embedding_provider: str = os.getenv("EMBEDDING_PROVIDER", "local")
    embedding_model: str = os.getenv("EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2")
    embedding_dimension: int = int(os.getenv("EMBEDDING_DIMENSION", "384"))
    embedding_timeout: float = float(os.getenv("EMBEDDING_TIMEOUT", "30"))

    # Ollama
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_max_capacity < 1:
            raise ValueError("CACHE_MAX_CAPACITY must be at least 1")

        if not -1 <= self.cache_similarity_threshold <= 1:
            raise ValueError("CACHE_SIMILARITY_THRESHOLD must be between -1 and 1 for cosine similarity")

        if self.embedding_dimension < 1:
            raise ValueError("EMBEDDING_DIMENSION must be positive")

        if self.embedding_timeout <= 0:
            raise ValueError("EMBEDDING_TIMEOUT must be positive")

        if self.cache_storage not in ("file", "redis", "memory"):
            raise ValueError(
                f"CACHE_STORAGE must be one of ['file', 'redis', 'memory'], got {self.cache_storage!r}"
            )

        if self.embedding_provider not in ("local", "ollama"):
            raise ValueError(
                f"EMBEDDING_PROVIDER must be one of ['local', 'ollama'], got {self.embedding_provider!r}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service.

    Args:
        level: Log level name. Defaults to settings.log_level.
    """
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
