"""
ChromaLab Color Naming

Nearest-name lookup against a reference dictionary (ranked by CIEDE2000)
and rule-based descriptive naming.

Descriptive names are driven by declarative band tables rather than
if/else ladders. A table is an ordered list of `BandRule`s; rules are
grouped by `tier`, the lowest tier with a match wins, and overlapping
matches inside one tier resolve to the narrowest band (then to the rule
listed first).
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from .conversion import ColorLike, as_color, clamp, display_hsl, hex_to_rgb, normalize_hue, rgb_to_lab
from .distance import delta_e_2000
from .presets import CSS_COLORS


@dataclass(frozen=True)
class BandRule:
    """A labelled interval. `lo > hi` denotes a band that wraps around 360."""
    lo: float
    hi: float
    label: str
    closed: bool = False
    tier: int = 0

    @property
    def wraps(self) -> bool:
        return self.lo > self.hi

    @property
    def span(self) -> float:
        return self.hi + 360.0 - self.lo if self.wraps else self.hi - self.lo

    def matches(self, value: float) -> bool:
        below_hi = value <= self.hi if self.closed else value < self.hi
        if self.wraps:
            return value >= self.lo or below_hi
        return value >= self.lo and below_hi


class BandTable:
    """Ordered band lookup: lowest tier first, then narrowest span, then position."""

    def __init__(self, rules: Sequence[BandRule], default: str):
        self.rules = tuple(rules)
        self.default = default

    def match(self, value: float) -> Optional[BandRule]:
        candidates = [
            (rule.tier, rule.span, index, rule)
            for index, rule in enumerate(self.rules)
            if rule.matches(value)
        ]
        if not candidates:
            return None
        return min(candidates, key=lambda item: item[:3])[3]

    def label(self, value: float) -> str:
        rule = self.match(value)
        return rule.label if rule else self.default


SATURATION_BANDS = BandTable([
    BandRule(0, 20, "Muted"),
    BandRule(20, 50, "Soft"),
    BandRule(50, 80, "Vivid"),
    BandRule(80, 100, "Intense", closed=True),
], default="Muted")

LIGHTNESS_BANDS = BandTable([
    BandRule(0, 20, "Deep"),
    BandRule(20, 40, "Dark"),
    BandRule(40, 60, "Mid"),
    BandRule(60, 80, "Light"),
    BandRule(80, 100, "Pale", closed=True),
], default="Mid")

# Neutral spans the whole wheel; the narrower warm/cool bands win where they overlap it
TEMPERATURE_BANDS = BandTable([
    BandRule(330, 60, "Warm", closed=True),
    BandRule(180, 270, "Cool", closed=True),
    BandRule(0, 360, "Neutral", closed=True),
], default="Neutral")

HUE_BANDS = BandTable([
    BandRule(345, 15, "Red"),
    BandRule(15, 45, "Orange"),
    BandRule(45, 75, "Yellow"),
    BandRule(75, 150, "Green"),
    BandRule(150, 210, "Cyan"),
    BandRule(210, 270, "Blue"),
    BandRule(270, 300, "Violet"),
    BandRule(300, 345, "Magenta"),
], default="Red")

MARKETING_NAMES = (
    "Sunset Ember", "Ocean Whisper", "Steel Dawn", "Forest Mist", "Golden Hour",
    "Midnight Blue", "Rose Petal", "Emerald Dream", "Silver Moon", "Crimson Tide",
    "Lavender Sky", "Copper Sunset", "Ice Blue", "Charcoal Night", "Peach Blossom",
    "Turquoise Wave", "Plum Velvet", "Sage Green", "Coral Reef", "Amber Glow",
)


class ColorMatch(NamedTuple):
    """A dictionary entry ranked by distance to a query color."""
    name: str
    hex: str
    distance: float


def describe_hsl(h: float, s: float, l: float) -> Dict[str, str]:
    """Return every band label for an HSL color."""
    h = normalize_hue(h)
    s = clamp(s, 0.0, 100.0)
    l = clamp(l, 0.0, 100.0)
    return {
        "saturation": SATURATION_BANDS.label(s),
        "temperature": TEMPERATURE_BANDS.label(h),
        "hue": HUE_BANDS.label(h),
        "lightness": LIGHTNESS_BANDS.label(l),
    }


def algorithmic_color_naming(h: float, s: float, l: float) -> str:
    """
    Build a descriptive name such as "Muted Cool Blue" from HSL bands.

    Args:
        h: Hue in degrees (wrapped)
        s: Saturation percent (clamped)
        l: Lightness percent (clamped)

    Returns:
        "{saturation} {temperature} {hue}"
    """
    bands = describe_hsl(h, s, l)
    return f"{bands['saturation']} {bands['temperature']} {bands['hue']}"


@lru_cache(maxsize=16)
def _lab_table(entries: Tuple[Tuple[str, str], ...]) -> Tuple[Tuple[str, str, tuple], ...]:
    return tuple((name, hex_value.lower(), rgb_to_lab(hex_to_rgb(hex_value))) for name, hex_value in entries)


def find_closest_color_names(color: ColorLike,
                             dictionary: Optional[Mapping[str, str]] = None,
                             top_n: int = 6) -> List[ColorMatch]:
    """
    Rank dictionary colors by CIEDE2000 distance to `color`.

    Args:
        color: Query color
        dictionary: Mapping of name -> hex; defaults to the CSS named colors
        top_n: Number of matches to return

    Returns:
        Up to `top_n` matches sorted by (distance, name)
    """
    if top_n <= 0:
        return []
    reference = CSS_COLORS if dictionary is None else dictionary
    target = as_color(color).lab

    matches = [
        ColorMatch(name, hex_value, delta_e_2000(target, lab))
        for name, hex_value, lab in _lab_table(tuple(sorted(reference.items())))
    ]
    matches.sort(key=lambda m: (m.distance, m.name))
    return matches[:top_n]


def color_tags(h: float, s: float, l: float) -> List[str]:
    """Semantic tags: warm/cold, saturated/muted, light/dark."""
    tags = []
    temperature = TEMPERATURE_BANDS.label(normalize_hue(h))
    if temperature == "Warm":
        tags.append("warm")
    elif temperature == "Cool":
        tags.append("cold")

    if s >= 70:
        tags.append("saturated")
    elif s < 30:
        tags.append("muted")

    if l >= 70:
        tags.append("light")
    elif l < 30:
        tags.append("dark")
    return tags


def hue_family(h: float, s: float, l: float) -> str:
    """Coarse family used for grouping: neutral, earth, pastel, warm, cold or vibrant."""
    temperature = TEMPERATURE_BANDS.label(normalize_hue(h))
    if s < 15:
        return "neutral"
    if 20 <= h <= 40 and 20 <= s <= 60 and 30 <= l <= 70:
        return "earth"
    if l >= 70 and 30 <= s <= 60:
        return "pastel"
    if temperature == "Warm":
        return "warm"
    if temperature == "Cool":
        return "cold"
    if s >= 70:
        return "vibrant"
    return "neutral"


def classify_tone(lightness: float) -> str:
    if lightness >= 70:
        return "light"
    if lightness >= 30:
        return "mid"
    return "dark"


TONE_GROUPS = ("light", "mid", "dark")
FAMILY_GROUPS = ("warm", "cold", "neutral", "vibrant", "pastel", "earth")


def classify_color(color: ColorLike) -> Dict[str, str]:
    """Tone and family of a color, from its integer HSL."""
    h, s, l = display_hsl(as_color(color).hsl)
    return {"tone": classify_tone(l), "family": hue_family(h, s, l)}


def group_colors(colors: Sequence[ColorLike]) -> Dict[str, List[str]]:
    """
    Bucket colors by tone and by family.

    Every color lands in exactly one tone group and one family group; the
    groups keep input order and always carry every key, empty or not.
    """
    groups: Dict[str, List[str]] = {name: [] for name in TONE_GROUPS + FAMILY_GROUPS}
    for color in colors:
        c = as_color(color)
        labels = classify_color(c)
        groups[labels["tone"]].append(c.hex)
        groups[labels["family"]].append(c.hex)
    return groups


def marketing_name(h: float) -> str:
    index = int(math.floor(normalize_hue(h) / 360.0 * len(MARKETING_NAMES)))
    if 0 <= index < len(MARKETING_NAMES):
        return MARKETING_NAMES[index]
    return "Mystic Shade"


def name_color(color: ColorLike, top_n: int = 6) -> Dict[str, object]:
    """Collect every naming view of a color into one JSON-ready dict."""
    c = as_color(color)
    h, s, l = display_hsl(c.hsl)
    return {
        "hex": c.hex,
        "closest": [m._asdict() for m in find_closest_color_names(c, top_n=top_n)],
        "descriptive": algorithmic_color_naming(h, s, l),
        "marketing": marketing_name(h),
        "tags": color_tags(h, s, l),
        "family": hue_family(h, s, l),
        "tone": classify_tone(l),
    }
