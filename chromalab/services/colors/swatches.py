"""
Swatch Rendering Module

Renders palettes as PNG swatch strips for previews in API responses.
"""

import base64
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from .contrast import contrast_pair
from .conversion import ColorLike, as_color
from .types import ClusterAssignment


def color_to_bgr(color: ColorLike) -> Tuple[int, int, int]:
    """Convert any accepted color form to a BGR tuple for OpenCV."""
    r, g, b = as_color(color).rgb
    return (b, g, r)


def _encode_png(img: np.ndarray) -> str:
    success, buffer = cv2.imencode(".png", img)
    if not success:
        raise RuntimeError("Failed to encode swatch image as PNG")
    return base64.b64encode(buffer.tobytes()).decode("ascii")


def render_swatch_strip(colors: Sequence[ColorLike],
                        chip_size: int = 40,
                        highlight_index: Optional[int] = None,
                        border_width: int = 2) -> str:
    """
    Render a horizontal strip of color swatches.

    Args:
        colors: Colors in any accepted form
        chip_size: Size of each color chip in pixels
        highlight_index: Index of a chip to outline
        border_width: Width of the outline in pixels

    Returns:
        Base64-encoded PNG image string

    Raises:
        ValueError: If no colors are given
    """
    if not colors:
        raise ValueError("Empty color list provided")

    k = len(colors)
    img = np.zeros((chip_size, chip_size * k, 3), dtype=np.uint8)
    for i, color in enumerate(colors):
        img[:, i * chip_size:(i + 1) * chip_size, :] = color_to_bgr(color)

    if highlight_index is not None and 0 <= highlight_index < k:
        x_start = highlight_index * chip_size
        outline = color_to_bgr(contrast_pair(colors[highlight_index]))
        cv2.rectangle(img, (x_start, 0), (x_start + chip_size - 1, chip_size - 1), outline, border_width)

    b64_string = _encode_png(img)
    logger.debug(f"Encoded swatch strip: {k} chips of {chip_size}px -> {len(b64_string)} chars")
    return b64_string


def render_palette_strip(assignments: Sequence[ClusterAssignment],
                         width: int = 400,
                         height: int = 60,
                         show_percentages: bool = True,
                         font_scale: float = 0.4) -> str:
    """
    Render extracted colors as a strip whose segment widths follow their share.

    Args:
        assignments: Extraction output, in display order
        width: Total strip width in pixels
        height: Strip height in pixels
        show_percentages: Overlay each share on its segment
        font_scale: OpenCV font scale for the labels

    Returns:
        Base64-encoded PNG image string
    """
    if not assignments:
        raise ValueError("Empty palette provided")

    img = np.zeros((height, width, 3), dtype=np.uint8)
    total = sum(a.percentage for a in assignments) or 1.0
    x = 0
    for index, assignment in enumerate(assignments):
        if index == len(assignments) - 1:
            x_end = width
        else:
            x_end = min(width, x + int(round(width * assignment.percentage / total)))
        img[:, x:x_end, :] = color_to_bgr(assignment.color)

        if show_percentages and x_end - x > 30:
            label = f"{assignment.percentage:.0f}%"
            text_size = cv2.getTextSize(label, cv2.FONT_HERSHEY_SIMPLEX, font_scale, 1)[0]
            text_x = x + (x_end - x - text_size[0]) // 2
            text_y = (height + text_size[1]) // 2
            text_color = color_to_bgr(contrast_pair(assignment.color))
            cv2.putText(img, label, (text_x, text_y), cv2.FONT_HERSHEY_SIMPLEX, font_scale, text_color, 1)
        x = x_end

    return _encode_png(img)
