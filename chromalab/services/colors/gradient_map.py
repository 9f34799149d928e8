"""
ChromaLab Gradient Map

Luminance-driven recoloring: every pixel's luminance selects a color from
a gradient ramp, which is then composited over the original pixel with a
W3C blend mode and an intensity weight. Work is done in row chunks so
callers can interleave other work between them.
"""

from enum import Enum
from typing import Iterator, List, Sequence, Tuple, Union

import numpy as np
from loguru import logger

from .conversion import (
    Color, ColorLike, as_color, clamp, hsl_lightness_array, hsl_to_rgb_array,
    lab_to_rgb_array, rgb_to_lab, rgb_to_lab_array,
)
from .presets import GRADIENT_PRESETS
from .types import GradientStop, RGB, as_pixel_buffer

DEFAULT_CHUNK_ROWS = 256

StopLike = Union[GradientStop, Tuple[float, ColorLike]]


class BlendMode(str, Enum):
    NORMAL = "normal"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"
    SOFT_LIGHT = "soft-light"
    COLOR = "color"
    LUMINOSITY = "luminosity"


def make_stops(stops: Sequence[StopLike]) -> List[GradientStop]:
    """
    Normalize stops: coerce colors, clamp positions into [0, 1], stable-sort.

    Raises:
        ValueError: If no stops are given
    """
    normalized = []
    for stop in stops:
        if isinstance(stop, GradientStop):
            position, color = stop.position, stop.color
        else:
            position, color = stop
        normalized.append(GradientStop(clamp(position, 0.0, 1.0), as_color(color)))
    if not normalized:
        raise ValueError("A gradient needs at least one stop")
    return sorted(normalized, key=lambda s: s.position)


def preset_stops(name: str) -> List[GradientStop]:
    try:
        _, stops = GRADIENT_PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown gradient preset {name!r}")
    return make_stops(stops)


def compute_luminance(color: ColorLike, use_lab: bool = True) -> float:
    """
    Normalized luminance of a color.

    Args:
        color: Any accepted color form
        use_lab: Use LAB L/100 (perceptual); otherwise HSL lightness

    Returns:
        Luminance in [0, 1]
    """
    rgb = as_color(color).rgb
    if use_lab:
        return clamp(rgb_to_lab(rgb).l / 100.0, 0.0, 1.0)
    return float(hsl_lightness_array(np.asarray(rgb)))


def compute_luminance_array(rgb: np.ndarray, use_lab: bool = True) -> np.ndarray:
    if use_lab:
        return np.clip(rgb_to_lab_array(rgb)[..., 0] / 100.0, 0.0, 1.0)
    return hsl_lightness_array(rgb)


def _interpolate_hsl(first: Color, second: Color, t: np.ndarray) -> np.ndarray:
    h1, s1, l1 = first.precise_hsl
    h2, s2, l2 = second.precise_hsl
    delta = h2 - h1
    if delta > 180:
        delta -= 360
    elif delta < -180:
        delta += 360
    hsl = np.stack([
        np.mod(h1 + delta * t, 360.0),
        s1 + (s2 - s1) * t,
        l1 + (l2 - l1) * t,
    ], axis=-1)
    return hsl_to_rgb_array(hsl)


def _interpolate_lab(first: Color, second: Color, t: np.ndarray) -> np.ndarray:
    lab1 = np.asarray(first.lab)
    lab2 = np.asarray(second.lab)
    return lab_to_rgb_array(lab1 + (lab2 - lab1) * t[..., None])


def map_luminance_array(stops: Sequence[GradientStop], luminance: np.ndarray,
                        use_lab: bool = True) -> np.ndarray:
    """
    Resolve gradient colors for an array of luminance values.

    Values at or beyond the end stops, and values landing exactly on a
    stop, return that stop's color unchanged.

    Returns:
        uint8 array of shape luminance.shape + (3,)
    """
    lum = np.clip(np.nan_to_num(np.asarray(luminance, dtype=np.float64)), 0.0, 1.0)
    out = np.empty(lum.shape + (3,), dtype=np.uint8)

    first, last = stops[0], stops[-1]
    out[lum <= first.position] = first.color.rgb
    out[lum >= last.position] = last.color.rgb

    for left, right in zip(stops, stops[1:]):
        inside = (lum > left.position) & (lum < right.position)
        if not np.any(inside):
            continue
        span = right.position - left.position
        if span <= 0:
            out[inside] = left.color.rgb
            continue
        t = (lum[inside] - left.position) / span
        if use_lab:
            out[inside] = _interpolate_lab(left.color, right.color, t)
        else:
            out[inside] = _interpolate_hsl(left.color, right.color, t)

    # A value sitting exactly on an interior stop takes that stop's color
    for stop in stops[1:-1]:
        out[lum == stop.position] = stop.color.rgb
    return out


def get_color_for_luminance(stops: Sequence[StopLike], luminance: float, use_lab: bool = True) -> Color:
    """
    Color of a gradient at a given luminance.

    Stops are clamped and stable-sorted first. Luminance below the first stop
    or above the last returns that stop's color exactly; otherwise the two
    bounding stops are interpolated in LAB (linear) or HSL (shorter hue arc).
    """
    ordered = make_stops(stops)
    lum = clamp(luminance, 0.0, 1.0)
    if lum <= ordered[0].position:
        return ordered[0].color
    if lum >= ordered[-1].position:
        return ordered[-1].color
    r, g, b = map_luminance_array(ordered, np.array([lum]), use_lab)[0]
    return Color(RGB(int(r), int(g), int(b)))


# ============================================================================
# Blend modes (W3C Compositing and Blending Level 1), channels in [0, 1]
# ============================================================================

def _lum(c: np.ndarray) -> np.ndarray:
    return 0.3 * c[..., 0] + 0.59 * c[..., 1] + 0.11 * c[..., 2]


def _clip_color(c: np.ndarray) -> np.ndarray:
    l = _lum(c)[..., None]
    n = c.min(axis=-1, keepdims=True)
    x = c.max(axis=-1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        low = np.where(n < 0.0, l + (c - l) * l / (l - n), c)
        high = np.where(x > 1.0, l + (low - l) * (1.0 - l) / (x - l), low)
    return np.clip(np.nan_to_num(high), 0.0, 1.0)


def _set_lum(c: np.ndarray, l: np.ndarray) -> np.ndarray:
    d = l - _lum(c)
    return _clip_color(c + d[..., None])


def _soft_light(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    d = np.where(cb <= 0.25, ((16.0 * cb - 12.0) * cb + 4.0) * cb, np.sqrt(cb))
    return np.where(
        cs <= 0.5,
        cb - (1.0 - 2.0 * cs) * cb * (1.0 - cb),
        cb + (2.0 * cs - 1.0) * (d - cb),
    )


def blend(base: np.ndarray, source: np.ndarray, mode: Union[BlendMode, str]) -> np.ndarray:
    """
    Composite `source` (gradient color) over `base` (original pixel).

    Args:
        base: Backdrop channels in [0, 1], shape (..., 3)
        source: Source channels in [0, 1], shape (..., 3)
        mode: Blend mode name

    Raises:
        ValueError: For an unknown blend mode
    """
    mode = BlendMode(mode)
    if mode is BlendMode.NORMAL:
        return source
    if mode is BlendMode.MULTIPLY:
        return base * source
    if mode is BlendMode.SCREEN:
        return base + source - base * source
    if mode is BlendMode.OVERLAY:
        doubled = 2.0 * base
        return np.where(base <= 0.5, source * doubled, source + (doubled - 1.0) - source * (doubled - 1.0))
    if mode is BlendMode.SOFT_LIGHT:
        return _soft_light(base, source)
    if mode is BlendMode.COLOR:
        return _set_lum(source, _lum(base))
    return _set_lum(base, _lum(source))


def iter_gradient_map(pixels, stops: Sequence[StopLike], intensity: float = 1.0,
                      blend_mode: Union[BlendMode, str] = BlendMode.NORMAL,
                      use_lab: bool = True,
                      chunk_rows: int = DEFAULT_CHUNK_ROWS) -> Iterator[Tuple[int, np.ndarray]]:
    """
    Apply a gradient map chunk by chunk.

    Yields:
        (start_row, rgba_chunk) pairs covering the image top to bottom
    """
    mode = BlendMode(blend_mode)
    ordered = make_stops(stops)
    weight = clamp(intensity, 0.0, 1.0)
    buffer = as_pixel_buffer(pixels)
    height = buffer.shape[0]
    step = max(1, int(chunk_rows))
    logger.debug(f"Gradient map {buffer.shape[1]}x{height}: {len(ordered)} stops, mode={mode.value}, "
                 f"intensity={weight}, lab={use_lab}")

    for start in range(0, height, step):
        chunk = buffer[start:start + step]
        rgb = chunk[..., :3]
        mapped = map_luminance_array(ordered, compute_luminance_array(rgb, use_lab), use_lab)

        base = rgb.astype(np.float64) / 255.0
        blended = blend(base, mapped.astype(np.float64) / 255.0, mode)
        mixed = base * (1.0 - weight) + blended * weight

        out = np.empty_like(chunk)
        out[..., :3] = np.clip(np.floor(mixed * 255.0 + 0.5), 0, 255).astype(np.uint8)
        out[..., 3] = chunk[..., 3]
        yield start, out


def apply_gradient_map(pixels, stops: Sequence[StopLike], intensity: float = 1.0,
                       blend_mode: Union[BlendMode, str] = BlendMode.NORMAL,
                       use_lab: bool = True,
                       chunk_rows: int = DEFAULT_CHUNK_ROWS) -> np.ndarray:
    """
    Recolor an image through a gradient ramp.

    Args:
        pixels: H x W x 3/4 image array
        stops: Gradient stops as GradientStop or (position, color) pairs
        intensity: Blend weight in [0, 1] (clamped)
        blend_mode: One of BlendMode
        use_lab: Compute luminance and interpolate in LAB (default) or HSL
        chunk_rows: Rows processed per chunk

    Returns:
        New H x W x 4 uint8 array; alpha copied from the input
    """
    buffer = as_pixel_buffer(pixels)
    result = np.empty_like(buffer)
    for start, chunk in iter_gradient_map(buffer, stops, intensity, blend_mode, use_lab, chunk_rows):
        result[start:start + chunk.shape[0]] = chunk
    return result
