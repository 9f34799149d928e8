"""
ChromaLab Perceptual Color Distance

CIEDE2000 color difference (Sharma, Wu & Dalal, 2005) with unit weighting
factors kL = kC = kH = 1 by default. Every "similar color" and "closest
name" feature in the engine is ranked with this function.
"""

import math
from typing import Sequence

from .conversion import ColorLike, as_color

_POW25_7 = 25.0 ** 7


def _hue_angle(b: float, a_prime: float) -> float:
    if b == 0.0 and a_prime == 0.0:
        return 0.0
    angle = math.degrees(math.atan2(b, a_prime))
    return angle + 360.0 if angle < 0.0 else angle


def delta_e_2000(lab1: Sequence[float], lab2: Sequence[float],
                 k_l: float = 1.0, k_c: float = 1.0, k_h: float = 1.0) -> float:
    """
    Compute the CIEDE2000 difference between two LAB colors.

    Args:
        lab1: First color as (L, a, b)
        lab2: Second color as (L, a, b)
        k_l: Lightness weighting factor
        k_c: Chroma weighting factor
        k_h: Hue weighting factor

    Returns:
        Non-negative color difference; 0 for identical inputs
    """
    l1, a1, b1 = (float(v) for v in lab1)
    l2, a2, b2 = (float(v) for v in lab2)

    # a* adjustment by mean chroma
    c1 = math.hypot(a1, b1)
    c2 = math.hypot(a2, b2)
    c_bar7 = ((c1 + c2) / 2.0) ** 7
    g = 0.5 * (1.0 - math.sqrt(c_bar7 / (c_bar7 + _POW25_7)))
    a1p = (1.0 + g) * a1
    a2p = (1.0 + g) * a2

    c1p = math.hypot(a1p, b1)
    c2p = math.hypot(a2p, b2)
    h1p = _hue_angle(b1, a1p)
    h2p = _hue_angle(b2, a2p)

    delta_lp = l2 - l1
    delta_cp = c2p - c1p

    chroma_product = c1p * c2p
    if chroma_product == 0.0:
        delta_hp_deg = 0.0
    else:
        delta_hp_deg = h2p - h1p
        if delta_hp_deg > 180.0:
            delta_hp_deg -= 360.0
        elif delta_hp_deg < -180.0:
            delta_hp_deg += 360.0
    delta_hp = 2.0 * math.sqrt(chroma_product) * math.sin(math.radians(delta_hp_deg) / 2.0)

    l_bar_p = (l1 + l2) / 2.0
    c_bar_p = (c1p + c2p) / 2.0

    if chroma_product == 0.0:
        h_bar_p = h1p + h2p
    elif abs(h1p - h2p) <= 180.0:
        h_bar_p = (h1p + h2p) / 2.0
    elif h1p + h2p < 360.0:
        h_bar_p = (h1p + h2p + 360.0) / 2.0
    else:
        h_bar_p = (h1p + h2p - 360.0) / 2.0

    t = (1.0
         - 0.17 * math.cos(math.radians(h_bar_p - 30.0))
         + 0.24 * math.cos(math.radians(2.0 * h_bar_p))
         + 0.32 * math.cos(math.radians(3.0 * h_bar_p + 6.0))
         - 0.20 * math.cos(math.radians(4.0 * h_bar_p - 63.0)))

    delta_theta = 30.0 * math.exp(-(((h_bar_p - 275.0) / 25.0) ** 2))
    c_bar_p7 = c_bar_p ** 7
    r_c = 2.0 * math.sqrt(c_bar_p7 / (c_bar_p7 + _POW25_7))

    l_offset = (l_bar_p - 50.0) ** 2
    s_l = 1.0 + (0.015 * l_offset) / math.sqrt(20.0 + l_offset)
    s_c = 1.0 + 0.045 * c_bar_p
    s_h = 1.0 + 0.015 * c_bar_p * t
    r_t = -math.sin(math.radians(2.0 * delta_theta)) * r_c

    dl = delta_lp / (k_l * s_l)
    dc = delta_cp / (k_c * s_c)
    dh = delta_hp / (k_h * s_h)

    return math.sqrt(max(0.0, dl * dl + dc * dc + dh * dh + r_t * dc * dh))


def color_distance(first: ColorLike, second: ColorLike) -> float:
    """CIEDE2000 distance between two colors given in any accepted form."""
    return delta_e_2000(as_color(first).lab, as_color(second).lab)
