"""
ChromaLab Brand Palette Analysis

Rule-based bucketization of a small, explicit brand palette into
primary / secondary / accent / neutral tiers, plus palette characteristics,
harmony detection and generated descriptions.

This is deliberately separate from the k-means image extraction path: it
ranks a handful of given colors, it never clusters pixels.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from loguru import logger

from .conversion import Color, ColorLike, as_color
from .distance import delta_e_2000
from .harmony import get_hue_separation
from .presets import BRAND_PALETTES
from .types import ClusterAssignment, ClusterRole

# Colors below this saturation, or outside this lightness window, are neutral
NEUTRAL_MAX_SATURATION = 20
NEUTRAL_MIN_LIGHTNESS = 10
NEUTRAL_MAX_LIGHTNESS = 90

TIER_SHARE = 0.3
TIER_MAX = 2

HUE_TOLERANCE = 30


@dataclass(frozen=True)
class PaletteCharacteristics:
    temperature: str = "neutral"
    brightness: str = "medium"
    saturation: str = "moderate"
    style: str = "corporate"
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "temperature": self.temperature,
            "brightness": self.brightness,
            "saturation": self.saturation,
            "style": self.style,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class HarmonyAnalysis:
    type: str = "none"
    has_conflict: bool = False
    contrast_level: str = "low"

    def to_dict(self) -> Dict[str, object]:
        return {
            "type": self.type,
            "has_conflict": self.has_conflict,
            "contrast_level": self.contrast_level,
        }


def is_neutral(color: Color) -> bool:
    _, s, l = color.hsl
    return s < NEUTRAL_MAX_SATURATION or l < NEUTRAL_MIN_LIGHTNESS or l > NEUTRAL_MAX_LIGHTNESS


def brand_score(color: Color) -> float:
    """Saturation weighted by closeness of lightness to 50%."""
    _, s, l = color.hsl
    return s * (1.0 - abs(l - 50.0) / 50.0)


def bucketize_brand_palette(colors: Sequence[ColorLike]) -> List[ClusterAssignment]:
    """
    Assign each brand color to a tier.

    Neutral colors (low saturation, near-black or near-white) are tagged
    neutral regardless of score. The rest are ranked by `brand_score`: the top
    min(2, ceil(0.3 n)) become primary, the next as many secondary, the
    remainder accent. Every color carries an equal share of 100%.

    Args:
        colors: Palette colors in any accepted form

    Returns:
        Assignments ordered primary, secondary, accent, neutral
    """
    parsed = [as_color(c) for c in colors]
    if not parsed:
        return []

    share = 100.0 / len(parsed)
    neutrals = [c for c in parsed if is_neutral(c)]
    scored = sorted((c for c in parsed if not is_neutral(c)), key=brand_score, reverse=True)

    tier_size = min(TIER_MAX, math.ceil(TIER_SHARE * len(scored)))
    tiers = []
    for index, color in enumerate(scored):
        if index < tier_size:
            role = ClusterRole.PRIMARY
        elif index < 2 * tier_size:
            role = ClusterRole.SECONDARY
        else:
            role = ClusterRole.ACCENT
        tiers.append(ClusterAssignment(color, share, role))

    tiers.extend(ClusterAssignment(c, share, ClusterRole.NEUTRAL) for c in neutrals)
    logger.debug(f"Bucketized {len(parsed)} brand colors: {len(scored)} scored, {len(neutrals)} neutral")
    return tiers


def analyze_palette(assignments: Sequence[ClusterAssignment]) -> PaletteCharacteristics:
    """Temperature, brightness, saturation, style and tags from average HSL."""
    if not assignments:
        return PaletteCharacteristics()

    hsls = [a.color.hsl for a in assignments]
    count = len(hsls)
    avg_hue = sum(h for h, _, _ in hsls) / count
    avg_sat = sum(s for _, s, _ in hsls) / count
    avg_light = sum(l for _, _, l in hsls) / count

    temperature = "warm" if avg_hue <= 180 else "cold"

    brightness = "medium"
    if avg_light >= 60:
        brightness = "bright"
    elif avg_light <= 40:
        brightness = "dark"

    saturation = "moderate"
    if avg_sat >= 70:
        saturation = "vibrant"
    elif avg_sat <= 30:
        saturation = "muted"

    style = "corporate"
    if avg_sat >= 70 and avg_light >= 50:
        style = "energetic"
    elif avg_sat <= 30:
        style = "muted"
    elif count <= 2 and avg_sat <= 50:
        style = "minimalistic"
    elif avg_sat >= 60 and count >= 4:
        style = "playful"

    tags = []
    if avg_sat >= 60:
        tags.append("modern")
    if avg_sat <= 40 and avg_light <= 50:
        tags.append("classic")
    if temperature == "warm" and avg_sat <= 50:
        tags.append("natural")
    if avg_sat >= 70 and brightness == "bright":
        tags.append("digital")

    return PaletteCharacteristics(temperature, brightness, saturation, style, tags)


def _within(value: float, target: float) -> bool:
    return abs(value - target) < HUE_TOLERANCE


def analyze_harmony(assignments: Sequence[ClusterAssignment]) -> HarmonyAnalysis:
    """
    Detect the hue relationship between the non-neutral colors.

    Checks, in order: complementary, triad, split-complementary, analogous.
    Without a recognised relationship, reports hue conflicts and the
    CIEDE2000 contrast between the first two primary colors.
    """
    colored = [a for a in assignments if a.cluster != ClusterRole.NEUTRAL]
    if len(assignments) < 2 or len(colored) < 2:
        return HarmonyAnalysis()

    hues = sorted(a.color.hsl.h for a in colored)

    for i in range(len(hues)):
        for j in range(i + 1, len(hues)):
            if _within(abs(hues[i] - hues[j]), 180):
                return HarmonyAnalysis("complementary", False, "high")

    if len(hues) >= 3:
        if _within(hues[1] - hues[0], 120) and _within(hues[2] - hues[1], 120):
            return HarmonyAnalysis("triad", False, "high")

        for base in hues:
            first = (base + 150) % 360
            second = (base + 210) % 360
            if any(_within(h, first) for h in hues) and any(_within(h, second) for h in hues):
                return HarmonyAnalysis("split-complementary", False, "medium")

    # Consecutive hues around the wheel; one wide gap is the outside of the arc
    gaps = [get_hue_separation(hues[i], hues[(i + 1) % len(hues)]) for i in range(len(hues))]
    if sum(1 for gap in gaps if gap > 60) <= 1:
        return HarmonyAnalysis("analogous", False, "low")

    has_conflict = False
    for i in range(len(colored)):
        for j in range(i + 1, len(colored)):
            h1, s1, l1 = colored[i].color.hsl
            h2, s2, l2 = colored[j].color.hsl
            if abs(h1 - h2) < 15 and (abs(s1 - s2) > 30 or abs(l1 - l2) > 30):
                has_conflict = True

    primaries = [a for a in colored if a.cluster == ClusterRole.PRIMARY]
    contrast_level = "low"
    if len(primaries) >= 2:
        delta = delta_e_2000(primaries[0].color.lab, primaries[1].color.lab)
        if delta >= 20:
            contrast_level = "high"
        elif delta >= 10:
            contrast_level = "medium"

    return HarmonyAnalysis("none", has_conflict, contrast_level)


_STYLE_VERBS = {
    "energetic": "energizes and motivates",
    "corporate": "conveys professionalism and trust",
    "minimalistic": "speaks with clarity and simplicity",
}


def describe_palette(assignments: Sequence[ClusterAssignment],
                     characteristics: PaletteCharacteristics,
                     harmony: HarmonyAnalysis) -> Dict[str, object]:
    """Short, marketing and technical descriptions plus recommendations."""
    by_role = {role: [a for a in assignments if a.cluster == role] for role in ClusterRole}
    n_primary = len(by_role[ClusterRole.PRIMARY])
    n_secondary = len(by_role[ClusterRole.SECONDARY])
    n_accent = len(by_role[ClusterRole.ACCENT])
    n_neutral = len(by_role[ClusterRole.NEUTRAL])
    c = characteristics
    harmony_name = harmony.type if harmony.type != "none" else None

    short = (
        f"A {c.style} {c.temperature} palette with {len(assignments)} colors, featuring "
        f"{n_primary} primary, {n_secondary} secondary, and {n_accent} accent colors."
    )
    marketing = (
        f"This brand palette embodies a {c.style} identity with {c.temperature} undertones. "
        f"The {c.saturation} color scheme creates a {c.brightness} visual presence that "
        f"{_STYLE_VERBS.get(c.style, 'engages and delights')} audiences. "
        f"The {harmony_name or 'carefully balanced'} color harmony ensures visual coherence while "
        f"maintaining {harmony.contrast_level} contrast for optimal readability and impact."
    )
    technical_lines = [
        "Technical Palette Analysis:",
        f"- Color Count: {len(assignments)} ({n_primary} primary, {n_secondary} secondary, "
        f"{n_accent} accent, {n_neutral} neutral)",
        f"- Temperature: {c.temperature}",
        f"- Brightness: {c.brightness}",
        f"- Saturation: {c.saturation}",
        f"- Style: {c.style}",
        f"- Harmony: {harmony_name or 'custom arrangement'}",
        f"- Contrast Level: {harmony.contrast_level}",
    ]
    if harmony.has_conflict:
        technical_lines.append("- Warning: Potential color conflicts detected")
    technical_lines.append(f"- Tags: {', '.join(c.tags) or 'none'}")

    recommendations = []
    if harmony.has_conflict:
        recommendations.append("Resolve color conflicts by adjusting hue, saturation, or lightness values")
    if harmony.contrast_level == "low":
        recommendations.append("Increase contrast between primary colors for better visual hierarchy")
    if c.saturation == "muted" and c.style == "energetic":
        recommendations.append("Consider increasing saturation to better match the energetic style")
    if len(assignments) > 5:
        recommendations.append("Consider reducing color count for a more focused brand identity")
    if not recommendations:
        recommendations.append("Palette is well-balanced and ready for brand implementation")

    return {
        "short": short,
        "marketing": marketing,
        "technical": "\n".join(technical_lines),
        "recommendations": recommendations,
    }


def brand_palette(name: str) -> List[str]:
    """Colors of a predefined brand, matched case-insensitively by name."""
    wanted = name.strip().casefold()
    for brand, (_, colors) in BRAND_PALETTES.items():
        if brand.casefold() == wanted:
            return list(colors)
    raise ValueError(f"Unknown brand {name!r}")


def analyze_brand(colors: Sequence[ColorLike]) -> Dict[str, object]:
    """Bucketize a palette and attach characteristics, harmony and descriptions."""
    assignments = bucketize_brand_palette(colors)
    characteristics = analyze_palette(assignments)
    harmony = analyze_harmony(assignments)
    return {
        "colors": [a.to_dict() for a in assignments],
        "characteristics": characteristics.to_dict(),
        "harmony": harmony.to_dict(),
        "descriptions": describe_palette(assignments, characteristics, harmony),
    }
