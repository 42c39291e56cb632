"""
Configuration management for MixFlow
"""

import os
from functools import lru_cache
from pathlib import Path
from pydantic_settings import BaseSettings


def get_default_storage_path() -> str:
    """Get default storage path based on environment."""
    # In Docker, storage is at /app/storage
    if os.path.exists("/app/storage"):
        return "/app/storage"
    # Local development: relative to project root
    project_root = Path(__file__).parent.parent
    return str(project_root / "storage")


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str = ""

    # Worker
    worker_count: int = 1
    log_level: str = "INFO"

    # Storage - where uploaded tracks live (auto-detected or from env)
    storage_base_path: str = get_default_storage_path()

    # Track library persistence (empty = in-memory only)
    library_path: str = ""

    # Audio analysis
    analysis_sample_rate: int = 22050
    min_bpm: float = 70.0
    max_bpm: float = 180.0
    analysis_timeout_seconds: float = 300.0

    # Ordering - threads used to evaluate seed paths (1 = sequential)
    order_seed_workers: int = 1

    # Queue names
    queue_analyze: str = "audio-analyze"
    queue_order: str = "track-order"
    queue_results: str = "results"

    def get_absolute_path(self, relative_path: str) -> str:
        """Convert a relative storage path to absolute path."""
        # Strip leading "storage/" since base path already points to storage
        if relative_path.startswith("storage/"):
            relative_path = relative_path[len("storage/"):]
        return str(Path(self.storage_base_path) / relative_path)

    class Config:
        env_file = ".env"
        extra = "ignore"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
