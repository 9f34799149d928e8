"""
Test configuration and fixtures for ChromaLab tests.
"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from main import app
from chromalab.services.cache import get_extraction_cache
from chromalab.utils.metrics import reset_metrics as reset_global_metrics


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics and the extraction cache before each test."""
    reset_global_metrics()
    get_extraction_cache().clear()


def encode_png(pixels: np.ndarray) -> bytes:
    """Encode an RGB or RGBA uint8 array as PNG bytes."""
    mode = "RGBA" if pixels.shape[2] == 4 else "RGB"
    buffer = io.BytesIO()
    Image.fromarray(pixels.astype(np.uint8), mode=mode).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def two_color_image():
    """64x64 RGB image: left three quarters red, right quarter blue."""
    img = np.zeros((64, 64, 3), dtype=np.uint8)
    img[:, :48] = (255, 0, 0)
    img[:, 48:] = (0, 0, 255)
    return img


@pytest.fixture
def noise_image():
    """Deterministic random RGB image."""
    rng = np.random.RandomState(7)
    return rng.randint(0, 256, size=(40, 40, 3)).astype(np.uint8)


@pytest.fixture
def gray_ramp():
    """1x256 RGB image with every gray level once."""
    values = np.arange(256, dtype=np.uint8)
    return np.repeat(values[None, :, None], 3, axis=2)
