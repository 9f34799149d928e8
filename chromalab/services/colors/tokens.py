"""
ChromaLab UI Design Tokens

Builds a 50-900 shade scale, semantic status colors and a full token set
(primary, background, semantic) from one brand color, with JSON, CSS custom
property and Tailwind config exports.
"""

import json
from typing import Dict, List, Tuple

from loguru import logger

from .contrast import contrast_pair
from .conversion import Color, ColorLike, as_color, clamp

SCALE_SHADES = (50, 100, 200, 300, 400, 500, 600, 700, 800, 900)

# (lightness, saturation factor) for the light end of the scale
_LIGHT_STEPS: Dict[int, Tuple[float, float]] = {
    50: (95, 0.3),
    100: (90, 0.4),
    200: (85, 0.5),
    300: (75, 0.6),
    400: (65, 0.7),
}

# (lightness drop, saturation boost) for the dark end
_DARK_STEPS: Dict[int, Tuple[float, float]] = {
    600: (10, 5),
    700: (20, 10),
    800: (30, 15),
    900: (40, 20),
}

# Hue offsets for status colors
SEMANTIC_OFFSETS = {"success": 120, "warning": 60, "danger": -60}

# Neutral surface lightness values
BACKGROUND_LIGHTNESS = {
    "default": 98,
    "muted": 95,
    "surface": 100,
    "surface_hover": 98,
    "border": 85,
}


def lighten(color: ColorLike, amount: float) -> Color:
    """Raise HSL lightness by `amount` points (capped at 100)."""
    h, s, l = as_color(color).precise_hsl
    return Color.from_hsl(h, s, min(100.0, l + amount))


def darken(color: ColorLike, amount: float) -> Color:
    """Lower HSL lightness by `amount` points (floored at 0)."""
    h, s, l = as_color(color).precise_hsl
    return Color.from_hsl(h, s, max(0.0, l - amount))


def saturate(color: ColorLike, amount: float) -> Color:
    h, s, l = as_color(color).precise_hsl
    return Color.from_hsl(h, clamp(s + amount, 0, 100), l)


def mix_colors(first: ColorLike, second: ColorLike, weight: float = 0.5) -> Color:
    """
    Linear sRGB channel mix.

    Args:
        first: Color returned at weight 0
        second: Color returned at weight 1
        weight: Share of `second`, clamped to [0, 1]
    """
    w = clamp(weight, 0.0, 1.0)
    a = as_color(first).rgb
    b = as_color(second).rgb
    return Color(tuple(x * (1.0 - w) + y * w for x, y in zip(a, b)))


def generate_scale(base: ColorLike) -> Dict[str, str]:
    """
    Generate a 10-step shade scale around a base color.

    Shade 500 is the base color itself. Lighter shades pin lightness and
    scale saturation down; darker shades step lightness down and
    saturation up.

    Args:
        base: Base color in any accepted form

    Returns:
        Mapping of shade name ("50" ... "900") to lowercase hex
    """
    base_color = as_color(base)
    h, s, l = base_color.precise_hsl

    scale = {}
    for shade in SCALE_SHADES:
        if shade == 500:
            color = base_color
        elif shade in _LIGHT_STEPS:
            lightness, factor = _LIGHT_STEPS[shade]
            color = Color.from_hsl(h, s * factor, lightness)
        else:
            drop, boost = _DARK_STEPS[shade]
            color = Color.from_hsl(h, min(100.0, s + boost), max(0.0, l - drop))
        scale[str(shade)] = color.hex
    return scale


def semantic_colors(base: ColorLike) -> Dict[str, str]:
    """Success, warning and danger colors rotated from the base hue."""
    h, s, l = as_color(base).precise_hsl
    return {
        name: Color.from_hsl((h + offset) % 360, s, l).hex
        for name, offset in SEMANTIC_OFFSETS.items()
    }


def generate_ui_tokens(base: ColorLike) -> Dict[str, Dict[str, object]]:
    """
    Build the full token set for a brand color.

    Returns:
        {"primary": {...}, "background": {...}, "semantic": {...}}
    """
    base_color = as_color(base)
    scale = generate_scale(base_color)

    primary = {
        "base": scale["500"],
        "hover": scale["600"],
        "active": scale["700"],
        "muted": scale["100"],
        "foreground": contrast_pair(base_color).hex,
        "scale": scale,
    }
    background = {name: Color.from_hsl(0, 0, l).hex for name, l in BACKGROUND_LIGHTNESS.items()}

    logger.debug(f"Generated UI tokens for {base_color.hex}")
    return {
        "primary": primary,
        "background": background,
        "semantic": semantic_colors(base_color),
    }


def tokens_to_json(tokens: Dict[str, Dict[str, object]]) -> str:
    return json.dumps({"color": tokens}, indent=2)


def _css_name(key: str) -> str:
    return key.replace("_", "-")


def tokens_to_css(tokens: Dict[str, Dict[str, object]]) -> str:
    """Render tokens as CSS custom properties on :root."""
    primary = tokens["primary"]
    lines: List[str] = [":root {", "  /* Primary Colors */"]
    lines.append(f"  --color-primary: {primary['base']};")
    for key in ("hover", "active", "muted", "foreground"):
        lines.append(f"  --color-primary-{key}: {primary[key]};")

    lines.extend(["", "  /* Primary Scale */"])
    for shade, value in primary["scale"].items():
        lines.append(f"  --color-primary-{shade}: {value};")

    lines.extend(["", "  /* Background Colors */"])
    for key, value in tokens["background"].items():
        name = "bg" if key == "default" else ("bg-muted" if key == "muted" else _css_name(key))
        lines.append(f"  --color-{name}: {value};")

    lines.extend(["", "  /* Semantic Colors */"])
    for key, value in tokens["semantic"].items():
        lines.append(f"  --color-{key}: {value};")

    lines.append("}")
    return "\n".join(lines) + "\n"


def tokens_to_tailwind(tokens: Dict[str, Dict[str, object]]) -> str:
    """Render the primary scale and semantic colors as a Tailwind config snippet."""
    lines = [
        "module.exports = {",
        "  theme: {",
        "    extend: {",
        "      colors: {",
        "        primary: {",
    ]
    for shade, value in tokens["primary"]["scale"].items():
        lines.append(f"          {shade}: '{value}',")
    lines.append(f"          DEFAULT: '{tokens['primary']['base']}',")
    lines.append("        },")
    for key, value in tokens["semantic"].items():
        lines.extend([f"        {key}: {{", f"          DEFAULT: '{value}',", "        },"])
    lines.extend(["      },", "    },", "  },", "}"])
    return "\n".join(lines) + "\n"
