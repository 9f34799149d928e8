"""
ChromaLab Contrast & Accessibility

WCAG 2.x relative luminance, contrast ratio and pass/fail classification,
text-color recommendations, and a regional contrast heatmap that shows
where text of a given color stays readable on top of an image.
"""

import math
from typing import Dict, Iterator, List, Optional

import numpy as np
from loguru import logger

from .conversion import Color, ColorLike, as_color, round_half_up
from .errors import RangeError
from .types import RGB, ContrastLevel, ContrastResult, HeatmapCell, as_pixel_buffer

WCAG_GAMMA_THRESHOLD = 0.03928
LUMINANCE_WEIGHTS = (0.2126, 0.7152, 0.0722)

AA_NORMAL = 4.5
AA_LARGE = 3.0
AAA_NORMAL = 7.0
AAA_LARGE = 4.5

WHITE = Color(RGB(255, 255, 255))
BLACK = Color(RGB(0, 0, 0))

# Cells are sampled on every 2nd row and column
HEATMAP_SAMPLE_STEP = 2


def _channel_luminance(channel: float) -> float:
    c = channel / 255.0
    if c <= WCAG_GAMMA_THRESHOLD:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color: ColorLike) -> float:
    """
    WCAG relative luminance.

    Args:
        color: Any accepted color form

    Returns:
        Luminance in [0, 1]
    """
    r, g, b = as_color(color).rgb
    wr, wg, wb = LUMINANCE_WEIGHTS
    return wr * _channel_luminance(r) + wg * _channel_luminance(g) + wb * _channel_luminance(b)


def _ratio_from_luminance(first: float, second: float) -> float:
    lighter = max(first, second)
    darker = min(first, second)
    ratio = round((lighter + 0.05) / (darker + 0.05), 8)
    return min(21.0, max(1.0, ratio))


def contrast_ratio(foreground: ColorLike, background: ColorLike) -> float:
    """
    WCAG contrast ratio between two colors, order-independent.

    Returns:
        Ratio in [1, 21]; black on white is exactly 21
    """
    return _ratio_from_luminance(relative_luminance(foreground), relative_luminance(background))


def classify(ratio: float) -> ContrastResult:
    """Classify a contrast ratio against the WCAG AA/AAA thresholds."""
    return ContrastResult(
        ratio=ratio,
        aa_normal=ratio >= AA_NORMAL,
        aa_large=ratio >= AA_LARGE,
        aaa=ratio >= AAA_NORMAL,
        aaa_large=ratio >= AAA_LARGE,
    )


def check_contrast(foreground: ColorLike, background: ColorLike) -> ContrastResult:
    return classify(contrast_ratio(foreground, background))


def recommendation(ratio: float, large_text: bool = False) -> str:
    """Human-readable advice for a contrast ratio."""
    threshold = AA_LARGE if large_text else AA_NORMAL
    if ratio >= AAA_NORMAL:
        return "Excellent contrast. Meets WCAG AAA standards."
    if ratio >= threshold:
        return "Good contrast. Meets WCAG AA standards."
    increase = math.ceil((threshold / ratio - 1.0) * 100.0)
    return f"Increase contrast by approximately {increase}% to meet WCAG AA standards."


def contrast_pair(color: ColorLike, min_ratio: float = AA_NORMAL) -> Color:
    """
    Pick a readable text color for a background.

    White is preferred, then black; if neither reaches `min_ratio` the one
    with the higher ratio is returned.
    """
    background = as_color(color)
    white_ratio = contrast_ratio(WHITE, background)
    if white_ratio >= min_ratio:
        return WHITE
    black_ratio = contrast_ratio(BLACK, background)
    if black_ratio >= min_ratio:
        return BLACK
    return WHITE if white_ratio >= black_ratio else BLACK


def analyze_contrast(color: ColorLike, large_text: bool = False) -> Dict[str, object]:
    """Contrast of a color against white and black, with a recommended text color."""
    background = as_color(color)
    on_white = check_contrast(background, WHITE)
    on_black = check_contrast(background, BLACK)
    best = contrast_pair(background)
    best_ratio = on_white.ratio if best == WHITE else on_black.ratio
    return {
        "hex": background.hex,
        "white": on_white.to_dict(),
        "black": on_black.to_dict(),
        "best_text_color": best.hex,
        "recommendation": recommendation(best_ratio, large_text=large_text),
    }


def _level_for(ratio: float) -> ContrastLevel:
    if ratio >= AA_NORMAL:
        return ContrastLevel.HIGH
    if ratio >= AA_LARGE:
        return ContrastLevel.MEDIUM
    return ContrastLevel.LOW


def iter_heatmap_rows(pixels, text_color: ColorLike, grid_size: int) -> Iterator[List[HeatmapCell]]:
    """
    Yield the contrast heatmap one grid row at a time.

    Each cell covers `grid_size` x `grid_size` pixels (edge cells may be
    smaller); its mean color is taken over every 2nd pixel in both
    directions and compared against `text_color`.

    Args:
        pixels: H x W x 3/4 image array
        text_color: Color of the text that would sit on the image
        grid_size: Cell edge in pixels

    Yields:
        Lists of HeatmapCell, one list per grid row

    Raises:
        RangeError: If grid_size is not a positive integer
    """
    if grid_size is None or int(grid_size) <= 0:
        raise RangeError(f"grid_size must be a positive integer, got {grid_size}")
    grid_size = int(grid_size)

    buffer = as_pixel_buffer(pixels)
    height, width = buffer.shape[:2]
    text_luminance = relative_luminance(text_color)
    rows = math.ceil(height / grid_size)
    cols = math.ceil(width / grid_size)
    logger.debug(f"Heatmap {width}x{height} -> {cols}x{rows} cells (grid={grid_size})")

    for row in range(rows):
        y0 = row * grid_size
        band = buffer[y0:min(y0 + grid_size, height):HEATMAP_SAMPLE_STEP, :, :3]
        cells = []
        for col in range(cols):
            x0 = col * grid_size
            sample = band[:, x0:min(x0 + grid_size, width):HEATMAP_SAMPLE_STEP]
            if sample.size == 0:
                cells.append(HeatmapCell(row, col, ContrastLevel.LOW, 1.0, RGB(0, 0, 0)))
                continue
            mean = sample.reshape(-1, 3).mean(axis=0)
            cell_rgb = RGB(*(round_half_up(v) for v in mean))
            ratio = _ratio_from_luminance(text_luminance, relative_luminance(cell_rgb))
            cells.append(HeatmapCell(row, col, _level_for(ratio), ratio, cell_rgb))
        yield cells


def contrast_heatmap(pixels, text_color: ColorLike, grid_size: int) -> List[List[HeatmapCell]]:
    """Build the full contrast heatmap grid; see `iter_heatmap_rows`."""
    return list(iter_heatmap_rows(pixels, text_color, grid_size))


def heatmap_summary(grid: List[List[HeatmapCell]]) -> Dict[str, object]:
    """Share of cells per level and the worst ratio in the grid."""
    cells = [cell for row in grid for cell in row]
    counts = {level.value: 0 for level in ContrastLevel}
    for cell in cells:
        counts[cell.level.value] += 1
    total = len(cells)
    worst: Optional[float] = min((cell.ratio for cell in cells), default=None)
    return {
        "cells": total,
        "levels": {k: (v / total * 100.0 if total else 0.0) for k, v in counts.items()},
        "min_ratio": worst,
    }
