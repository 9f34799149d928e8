"""
ChromaLab Configuration
Manages environment variables and defaults for the color engine service.
"""
import os
from typing import Set


class Config:
    """Configuration class for ChromaLab services."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("CHROMALAB_MAX_FILE_MB", "10"))
    MAX_EDGE: int = int(os.environ.get("CHROMALAB_MAX_EDGE", "1024"))

    # Logging
    LOG_LEVEL: str = os.environ.get("CHROMALAB_LOG_LEVEL", "INFO")

    # Extraction defaults
    DEFAULT_K: int = int(os.environ.get("CHROMALAB_DEFAULT_K", "5"))
    MAX_K: int = int(os.environ.get("CHROMALAB_MAX_K", "12"))
    MAX_ITER: int = int(os.environ.get("CHROMALAB_MAX_ITER", "20"))
    DEFAULT_STRIDE: int = int(os.environ.get("CHROMALAB_DEFAULT_STRIDE", "1"))
    RANDOM_SEED: int = int(os.environ.get("CHROMALAB_RANDOM_SEED", "42"))
    TIMEOUT_EXTRACTION_MS: int = int(os.environ.get("CHROMALAB_TIMEOUT_EXTRACTION_MS", "10000"))

    # Chunked image processing
    CHUNK_ROWS: int = int(os.environ.get("CHROMALAB_CHUNK_ROWS", "256"))

    # Heatmap limits
    MAX_GRID_SIZE: int = int(os.environ.get("CHROMALAB_MAX_GRID_SIZE", "256"))

    # Extraction cache
    CACHE_ENABLED: bool = bool(int(os.environ.get("CHROMALAB_CACHE_ENABLED", "1")))
    CACHE_MAX_SIZE: int = int(os.environ.get("CHROMALAB_CACHE_MAX_SIZE", "256"))
    CACHE_TTL: int = int(os.environ.get("CHROMALAB_CACHE_TTL", "3600"))  # 1 hour

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("CHROMALAB_ALLOWED_ORIGINS", "")

    # Observability
    METRICS_ENABLED: bool = bool(int(os.environ.get("CHROMALAB_METRICS_ENABLED", "1")))

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png"]
    SUPPORTED_EXTENSIONS: Set[str] = {".jpg", ".jpeg", ".png"}

    @classmethod
    def validate_k(cls, k: int) -> bool:
        """Validate cluster count."""
        return 1 <= k <= cls.MAX_K

    @classmethod
    def validate_stride(cls, stride: int) -> bool:
        """Validate sampling stride."""
        return 1 <= stride <= 64

    @classmethod
    def validate_max_edge(cls, max_edge: int) -> bool:
        """Validate max_edge parameter."""
        return 64 <= max_edge <= 4096

    @classmethod
    def validate_grid_size(cls, grid_size: int) -> bool:
        """Validate heatmap grid size."""
        return 1 <= grid_size <= cls.MAX_GRID_SIZE

    @classmethod
    def validate_intensity(cls, intensity: float) -> bool:
        """Validate gradient map intensity."""
        return 0.0 <= intensity <= 1.0

    @classmethod
    def allowed_origins(cls) -> list:
        """Comma separated CORS origins as a list."""
        return [o.strip() for o in cls.ALLOWED_ORIGINS.split(",") if o.strip()]


# Global config instance
config = Config()
