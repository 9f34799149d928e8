"""
ChromaLab Color Vision Deficiency Simulation

Approximates how colors appear under common color vision deficiencies by
applying a 3x3 matrix to sRGB channel values.
"""

from typing import Dict

import numpy as np

from .conversion import Color, ColorLike, as_color
from .types import RGB, as_pixel_buffer

CVD_MATRICES: Dict[str, np.ndarray] = {
    "normal": np.eye(3),
    "protanopia": np.array([[0.567, 0.433, 0.0], [0.558, 0.442, 0.0], [0.0, 0.242, 0.758]]),
    "protanomaly": np.array([[0.817, 0.183, 0.0], [0.333, 0.667, 0.0], [0.0, 0.125, 0.875]]),
    "deuteranopia": np.array([[0.625, 0.375, 0.0], [0.7, 0.3, 0.0], [0.0, 0.3, 0.7]]),
    "deuteranomaly": np.array([[0.8, 0.2, 0.0], [0.258, 0.742, 0.0], [0.0, 0.142, 0.858]]),
    "tritanopia": np.array([[0.95, 0.05, 0.0], [0.0, 0.433, 0.567], [0.0, 0.475, 0.525]]),
    "tritanomaly": np.array([[0.967, 0.033, 0.0], [0.0, 0.733, 0.267], [0.0, 0.183, 0.817]]),
    "achromatopsia": np.array([[0.299, 0.587, 0.114], [0.299, 0.587, 0.114], [0.299, 0.587, 0.114]]),
    "achromatomaly": np.array([[0.618, 0.32, 0.062], [0.163, 0.775, 0.062], [0.163, 0.32, 0.516]]),
}


def _matrix_for(kind: str) -> np.ndarray:
    try:
        return CVD_MATRICES[kind.lower()]
    except KeyError:
        raise ValueError(f"Unknown vision deficiency {kind!r}. Supported: {', '.join(CVD_MATRICES)}")


def simulate_color_blindness_array(pixels, kind: str) -> np.ndarray:
    """
    Simulate a deficiency over an image.

    Args:
        pixels: H x W x 3/4 image array
        kind: One of CVD_MATRICES

    Returns:
        New H x W x 4 uint8 array; alpha is copied unchanged
    """
    matrix = _matrix_for(kind)
    buffer = as_pixel_buffer(pixels)
    rgb = buffer[..., :3].astype(np.float64) @ matrix.T
    out = np.empty_like(buffer)
    out[..., :3] = np.clip(np.floor(rgb + 0.5), 0, 255).astype(np.uint8)
    out[..., 3] = buffer[..., 3]
    return out


def simulate_color_blindness(color: ColorLike, kind: str) -> Color:
    """Simulate how a single color appears under `kind`."""
    c = as_color(color)
    r, g, b = np.asarray(c.rgb, dtype=np.float64) @ _matrix_for(kind).T
    return Color(RGB(r, g, b), c.alpha)


def simulate_all(color: ColorLike) -> Dict[str, str]:
    """Hex of `color` under every supported deficiency."""
    return {kind: simulate_color_blindness(color, kind).hex for kind in CVD_MATRICES}
