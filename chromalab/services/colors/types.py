"""
ChromaLab Color Value Types

Immutable value objects shared by every color engine module: component
triples, gradient stops, cluster assignments, contrast results and the
read-only pixel buffer wrapper.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional, Tuple

import numpy as np


class RGB(NamedTuple):
    """sRGB channels, integers in [0, 255]."""
    r: int
    g: int
    b: int


class HSL(NamedTuple):
    """Hue in degrees [0, 360), saturation and lightness in percent [0, 100]."""
    h: float
    s: float
    l: float


class LAB(NamedTuple):
    """CIE L*a*b* under D65."""
    l: float
    a: float
    b: float


class LCH(NamedTuple):
    """Polar form of LAB: lightness, chroma, hue angle in degrees."""
    l: float
    c: float
    h: float


class ClusterRole(str, Enum):
    """Brand palette tier."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    ACCENT = "accent"
    NEUTRAL = "neutral"


class ContrastLevel(str, Enum):
    """Heatmap cell readability bucket."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class GradientStop:
    """A (position, color) anchor of a gradient ramp."""
    position: float
    color: "Color"


@dataclass(frozen=True)
class ClusterAssignment:
    """One color of an extracted or bucketized palette."""
    color: "Color"
    percentage: float
    cluster: Optional[ClusterRole] = None

    def to_dict(self) -> dict:
        return {
            "hex": self.color.hex,
            "rgb": list(self.color.rgb),
            "percentage": round(self.percentage, 4),
            "cluster": self.cluster.value if self.cluster else None,
        }


@dataclass(frozen=True)
class ContrastResult:
    """WCAG classification of a contrast ratio."""
    ratio: float
    aa_normal: bool
    aa_large: bool
    aaa: bool
    aaa_large: bool

    def to_dict(self) -> dict:
        return {
            "ratio": round(self.ratio, 2),
            "aa_normal": self.aa_normal,
            "aa_large": self.aa_large,
            "aaa": self.aaa,
            "aaa_large": self.aaa_large,
        }


@dataclass(frozen=True)
class HeatmapCell:
    """Contrast of a text color against one grid cell of an image."""
    row: int
    col: int
    level: ContrastLevel
    ratio: float
    rgb: RGB

    def to_dict(self) -> dict:
        return {
            "row": self.row,
            "col": self.col,
            "level": self.level.value,
            "ratio": round(self.ratio, 2),
            "rgb": list(self.rgb),
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Best-effort output of one k-means run."""
    assignments: Tuple[ClusterAssignment, ...]
    iterations: int
    converged: bool
    sample_count: int
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "colors": [a.to_dict() for a in self.assignments],
            "iterations": self.iterations,
            "converged": self.converged,
            "sample_count": self.sample_count,
            "warnings": list(self.warnings),
        }


def as_pixel_buffer(pixels) -> np.ndarray:
    """
    Validate pixels as an H x W x 4 uint8 RGBA buffer and return a read-only view.

    Grayscale (H x W) and RGB (H x W x 3) arrays are promoted to RGBA with
    an opaque alpha channel. Float input is clipped to [0, 255].

    Args:
        pixels: Array-like image data

    Returns:
        Non-writeable uint8 array of shape (H, W, 4)

    Raises:
        ValueError: If the array cannot be interpreted as an image
    """
    arr = np.asarray(pixels)
    if arr.ndim == 2:
        arr = np.repeat(arr[:, :, None], 3, axis=2)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"Expected an H x W x 3 or H x W x 4 pixel array, got shape {arr.shape}")

    if arr.dtype != np.uint8:
        arr = np.clip(np.nan_to_num(arr.astype(np.float64)), 0, 255).astype(np.uint8)

    if arr.shape[2] == 3:
        alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
        arr = np.concatenate([arr, alpha], axis=2)

    view = arr.view()
    view.flags.writeable = False
    return view


def opaque_rgb_samples(buffer: np.ndarray, stride: int = 1) -> np.ndarray:
    """Return the RGB channels of every `stride`-th non-transparent pixel as (N, 3)."""
    flat = buffer.reshape(-1, 4)[::max(1, int(stride))]
    return flat[flat[:, 3] > 0][:, :3]
