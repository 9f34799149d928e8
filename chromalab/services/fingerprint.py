"""
ChromaLab Fingerprinting Utilities
Content hashing and cache key generation for uploaded images.
"""
import hashlib
from typing import Any, Dict, Optional


def compute_sha256(image_bytes: bytes) -> str:
    """
    Compute SHA-256 hash of raw image bytes.

    Args:
        image_bytes: Raw image bytes

    Returns:
        SHA-256 hash as hex string
    """
    return hashlib.sha256(image_bytes).hexdigest()


def generate_cache_key_digest(params: Dict[str, Any]) -> str:
    """
    Generate deterministic digest for parameter combinations.

    Args:
        params: Dictionary of parameters

    Returns:
        MD5 digest of sorted parameters
    """
    param_string = str(sorted(params.items()))
    return hashlib.md5(param_string.encode()).hexdigest()


def extraction_cache_key(sha256: str, k: int, stride: int, seed: Optional[int],
                         max_edge: int) -> str:
    """
    Cache key for one extraction run.

    Two uploads with identical bytes and parameters map to the same key;
    any parameter change (including the seed) yields a different one.
    """
    digest = generate_cache_key_digest({
        "k": k,
        "stride": stride,
        "seed": seed,
        "max_edge": max_edge,
    })
    return f"ext:{sha256}:{digest[:12]}"
