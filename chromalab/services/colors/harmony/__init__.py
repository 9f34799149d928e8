"""
ChromaLab Color Harmony Engine

Generates harmony palettes (complementary, analogous, triadic, ...) from a
base color by rotating hue and stepping saturation/lightness in HSL.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from ..conversion import Color, ColorLike, as_color, clamp

# Used when no base color is supplied
DEFAULT_BASE = Color.from_hsl(204, 70, 53)


class HarmonyMode(str, Enum):
    ANALOGOUS = "analogous"
    MONOCHROMATIC = "monochromatic"
    COMPLEMENTARY = "complementary"
    SPLIT_COMPLEMENTARY = "split-complementary"
    TRIADIC = "triadic"
    TETRADIC = "tetradic"
    SQUARE = "square"
    NEUTRAL = "neutral"
    SHADES = "shades"
    TINTS = "tints"
    TONES = "tones"


@dataclass(frozen=True)
class HarmonyCandidate:
    """A harmony color with its generation metadata."""
    color: Color
    category: str
    generation_rule: str  # Human-readable generation rule for rationale

    def to_dict(self) -> dict:
        return {"hex": self.color.hex, "category": self.category, "rule": self.generation_rule}


# Pure hue rotations, in degrees from the base
HUE_OFFSETS: Dict[HarmonyMode, Tuple[int, ...]] = {
    HarmonyMode.ANALOGOUS: (-30, 0, 30),
    HarmonyMode.COMPLEMENTARY: (0, 180),
    HarmonyMode.SPLIT_COMPLEMENTARY: (0, 150, 210),
    HarmonyMode.TRIADIC: (0, 120, 240),
    HarmonyMode.TETRADIC: (0, 60, 180, 240),
    HarmonyMode.SQUARE: (0, 90, 180, 270),
}


def rotate_hue(h: float, degrees: float) -> float:
    """
    Rotate hue by specified degrees.

    Args:
        h: Original hue in degrees
        degrees: Rotation in degrees (can be negative)

    Returns:
        Rotated hue in [0, 360) with proper wraparound
    """
    rotated = (h + degrees) % 360.0
    return 0.0 if rotated >= 360.0 else rotated


def get_hue_separation(h1: float, h2: float) -> float:
    """
    Calculate the minimum angular separation between two hues.

    Args:
        h1: First hue in degrees
        h2: Second hue in degrees

    Returns:
        Minimum separation in degrees [0, 180]
    """
    diff = abs(h1 - h2) % 360.0
    return min(diff, 360.0 - diff)


def _candidate(h: float, s: float, l: float, category: str, rule: str) -> HarmonyCandidate:
    color = Color.from_hsl(h, clamp(s, 0, 100), clamp(l, 0, 100))
    return HarmonyCandidate(color, category, rule)


def _monochromatic(h: float, s: float, l: float) -> List[HarmonyCandidate]:
    steps = [
        (s, l + 30, "L+30"),
        (s + 20, l, "S+20"),
        (s, l, "base"),
        (s - 20, l, "S-20"),
        (s, l - 30, "L-30"),
    ]
    return [_candidate(h, ss, ll, "monochromatic", rule) for ss, ll, rule in steps]


def _neutral(h: float) -> List[HarmonyCandidate]:
    steps = [(5, 30), (10, 50), (15, 70), (20, 90)]
    return [_candidate(h, s, l, "neutral", f"S={s}; L={l}") for s, l in steps]


def _shades(h: float, s: float, l: float, count: int = 5) -> List[HarmonyCandidate]:
    return [
        _candidate(h, s, l * (1 - i / count), "shades", f"L×{1 - i / count:.2f}")
        for i in range(count)
    ]


def _tints(h: float, s: float, l: float, count: int = 5) -> List[HarmonyCandidate]:
    return [
        _candidate(h, s, l + (100 - l) * i / count, "tints", f"L→white {i}/{count}")
        for i in range(count)
    ]


def _tones(h: float, s: float, l: float, count: int = 5) -> List[HarmonyCandidate]:
    return [
        _candidate(h, s * (1 - i / count), l, "tones", f"S×{1 - i / count:.2f}")
        for i in range(count)
    ]


def generate_harmony(base: ColorLike, mode: Union[HarmonyMode, str]) -> List[HarmonyCandidate]:
    """
    Generate a harmony palette for a base color.

    The base color itself is returned unchanged wherever the mode includes
    it (offset 0 or the unmodified monochromatic step).

    Args:
        base: Base color in any accepted form
        mode: Harmony mode name

    Returns:
        Harmony candidates in palette order

    Raises:
        ValueError: For an unknown mode
    """
    mode = HarmonyMode(mode)
    base_color = as_color(base)
    h, s, l = base_color.precise_hsl

    if mode in HUE_OFFSETS:
        candidates = []
        for offset in HUE_OFFSETS[mode]:
            if offset == 0:
                candidates.append(HarmonyCandidate(base_color, mode.value, "base"))
            else:
                candidates.append(_candidate(rotate_hue(h, offset), s, l, mode.value, f"h_rot:{offset:+d}°"))
        return candidates

    if mode is HarmonyMode.MONOCHROMATIC:
        candidates = _monochromatic(h, s, l)
        candidates[2] = HarmonyCandidate(base_color, mode.value, "base")
        return candidates
    if mode is HarmonyMode.NEUTRAL:
        return _neutral(h)
    if mode is HarmonyMode.SHADES:
        return _shades(h, s, l)
    if mode is HarmonyMode.TINTS:
        return _tints(h, s, l)
    return _tones(h, s, l)


def harmony_colors(base: ColorLike, mode: Union[HarmonyMode, str]) -> List[Color]:
    return [c.color for c in generate_harmony(base, mode)]


def generate_all_harmonies(base: Optional[ColorLike] = None) -> Dict[str, List[HarmonyCandidate]]:
    """Every harmony mode for a base color (defaults to DEFAULT_BASE)."""
    base_color = DEFAULT_BASE if base is None else as_color(base)
    return {mode.value: generate_harmony(base_color, mode) for mode in HarmonyMode}
