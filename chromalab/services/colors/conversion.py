"""
ChromaLab Color Conversion

Parsing and conversion between hex, RGB, HSL, CIE XYZ, LAB and LCH.

Scalar helpers take and return the NamedTuple triples from `types`; the
`*_array` variants operate on numpy arrays of shape (..., 3) and back every
image-sized operation in the engine. The scalar LAB path is a thin wrapper
over the array path so both always agree bit for bit.

Numeric input is clamped into range (NaN becomes 0), never rejected; only
unparseable strings raise `ParseError`.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .errors import ParseError
from .presets import CSS_COLORS
from .types import HSL, LAB, LCH, RGB


# sRGB primaries, D65 reference white
RGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
])
XYZ_TO_RGB = np.array([
    [3.2404542, -1.5371385, -0.4985314],
    [-0.9692660, 1.8760108, 0.0415560],
    [0.0556434, -0.2040259, 1.0572252],
])
D65_WHITE = np.array([95.047, 100.0, 108.883])

SRGB_GAMMA_THRESHOLD = 0.04045
SRGB_LINEAR_THRESHOLD = 0.0031308
LAB_EPSILON = 0.008856
LAB_LINEAR_SLOPE = 7.787
LAB_LINEAR_OFFSET = 16.0 / 116.0

# |a| and |b| below this are treated as neutral gray on the way back to RGB
ACHROMATIC_TOLERANCE = 1e-4


# ============================================================================
# Clamping and rounding
# ============================================================================

def round_half_up(value: float) -> int:
    """Round to the nearest integer, with exact halves rounding up."""
    return int(math.floor(value + 0.5))


def _finite(value, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return number


def clamp(value, lo: float, hi: float) -> float:
    """Clamp a number into [lo, hi]; NaN and non-numbers collapse to lo."""
    number = _finite(value, lo)
    return min(hi, max(lo, number))


def clamp_channel(value) -> int:
    return round_half_up(clamp(value, 0.0, 255.0))


def clamp_rgb(rgb: Sequence[float]) -> RGB:
    r, g, b = rgb
    return RGB(clamp_channel(r), clamp_channel(g), clamp_channel(b))


def normalize_hue(hue) -> float:
    """Wrap a hue angle into [0, 360)."""
    h = _finite(hue)
    if math.isinf(h):
        return 0.0
    h = h % 360.0
    return 0.0 if h >= 360.0 else h


# ============================================================================
# Hex
# ============================================================================

_HEX_RE = re.compile(r"^#?([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)


def rgb_to_hex(rgb: Sequence[float], upper: bool = False) -> str:
    """
    Convert an RGB triple to a 6-digit hex string.

    Args:
        rgb: Channels in [0, 255]; out-of-range values are clamped
        upper: Emit uppercase digits instead of the default lowercase

    Returns:
        Hex color string in format #rrggbb
    """
    r, g, b = clamp_rgb(rgb)
    text = f"#{r:02x}{g:02x}{b:02x}"
    return text.upper() if upper else text


def hex_to_rgb(value: str) -> RGB:
    """
    Convert #RGB or #RRGGBB (leading # optional, any case) to an RGB triple.

    Raises:
        ParseError: If the string is not a 3 or 6 digit hex color
    """
    match = _HEX_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ParseError(str(value), "expected #RGB or #RRGGBB")

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return RGB(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


# ============================================================================
# HSL
# ============================================================================

def rgb_to_hsl(rgb: Sequence[float], precise: bool = False) -> HSL:
    """
    Convert RGB to HSL.

    Components keep one decimal, enough for `hsl_to_rgb` to land within one
    unit per channel of the input. With `precise=True` they keep four
    decimals and the round trip is exact. Use `display_hsl` for the integer
    form shown in CSS strings and payloads.

    Args:
        rgb: Channels in [0, 255]
        precise: Keep fractional components

    Returns:
        HSL with hue in [0, 360) and saturation/lightness in [0, 100]
    """
    r, g, b = (c / 255.0 for c in clamp_rgb(rgb))
    hi = max(r, g, b)
    lo = min(r, g, b)
    l = (hi + lo) / 2.0

    if hi == lo:
        h = s = 0.0
    else:
        d = hi - lo
        s = d / (2.0 - hi - lo) if l > 0.5 else d / (hi + lo)
        if hi == r:
            h = (g - b) / d + (6.0 if g < b else 0.0)
        elif hi == g:
            h = (b - r) / d + 2.0
        else:
            h = (r - g) / d + 4.0
        h /= 6.0

    h, s, l = h * 360.0, s * 100.0, l * 100.0
    if precise:
        return HSL(normalize_hue(round(h, 4)), round(s, 4), round(l, 4))
    return HSL(normalize_hue(round(h, 1)), round(s, 1), round(l, 1))


def display_hsl(hsl: Sequence[float]) -> HSL:
    """Integer HSL, rounded half-up, as used in CSS strings and JSON payloads."""
    h, s, l = hsl
    return HSL(round_half_up(h) % 360, round_half_up(s), round_half_up(l))


def _hue_to_channel(p: np.ndarray, q: np.ndarray, t: np.ndarray) -> np.ndarray:
    t = np.mod(t, 1.0)
    return np.select(
        [t < 1.0 / 6.0, t < 0.5, t < 2.0 / 3.0],
        [p + (q - p) * 6.0 * t, q, p + (q - p) * (2.0 / 3.0 - t) * 6.0],
        default=p,
    )


def hsl_to_rgb_array(hsl) -> np.ndarray:
    """
    Vectorized HSL -> RGB.

    Args:
        hsl: Array of shape (..., 3) with hue in degrees (wrapped) and
            saturation/lightness in percent (clamped)

    Returns:
        uint8 array of shape (..., 3)
    """
    hsl = np.nan_to_num(np.asarray(hsl, dtype=np.float64))
    h = np.mod(hsl[..., 0], 360.0) / 360.0
    s = np.clip(hsl[..., 1], 0.0, 100.0) / 100.0
    l = np.clip(hsl[..., 2], 0.0, 100.0) / 100.0

    q = np.where(l < 0.5, l * (1.0 + s), l + s - l * s)
    p = 2.0 * l - q
    unit = np.stack([
        _hue_to_channel(p, q, h + 1.0 / 3.0),
        _hue_to_channel(p, q, h),
        _hue_to_channel(p, q, h - 1.0 / 3.0),
    ], axis=-1)
    unit = np.where((s == 0.0)[..., None], l[..., None], unit)
    return np.clip(np.floor(unit * 255.0 + 0.5), 0, 255).astype(np.uint8)


def hsl_to_rgb(hsl: Sequence[float]) -> RGB:
    """Convert HSL (hue degrees, saturation/lightness percent) to RGB."""
    h, s, l = hsl
    out = hsl_to_rgb_array([normalize_hue(h), clamp(s, 0.0, 100.0), clamp(l, 0.0, 100.0)])
    return RGB(int(out[0]), int(out[1]), int(out[2]))


def hsl_lightness_array(rgb) -> np.ndarray:
    """Unrounded HSL lightness in [0, 1] for an array of RGB pixels."""
    rgb = np.asarray(rgb, dtype=np.float64)
    return (rgb.max(axis=-1) + rgb.min(axis=-1)) / 2.0 / 255.0


# ============================================================================
# XYZ / LAB / LCH
# ============================================================================

def _linearize(unit: np.ndarray) -> np.ndarray:
    return np.where(unit > SRGB_GAMMA_THRESHOLD, ((unit + 0.055) / 1.055) ** 2.4, unit / 12.92)


def _compand(linear: np.ndarray) -> np.ndarray:
    linear = np.clip(linear, 0.0, 1.0)
    return np.where(linear > SRGB_LINEAR_THRESHOLD, 1.055 * linear ** (1.0 / 2.4) - 0.055, 12.92 * linear)


def _to_u8(unit: np.ndarray) -> np.ndarray:
    return np.clip(np.floor(unit * 255.0 + 0.5), 0, 255).astype(np.uint8)


def rgb_to_xyz_array(rgb) -> np.ndarray:
    """sRGB (..., 3) in [0, 255] -> CIE XYZ scaled so that white Y = 100."""
    unit = np.clip(np.nan_to_num(np.asarray(rgb, dtype=np.float64)), 0.0, 255.0) / 255.0
    return _linearize(unit) @ RGB_TO_XYZ.T * 100.0


def xyz_to_lab_array(xyz) -> np.ndarray:
    t = np.asarray(xyz, dtype=np.float64) / D65_WHITE
    f = np.where(t > LAB_EPSILON, np.cbrt(t), LAB_LINEAR_SLOPE * t + LAB_LINEAR_OFFSET)
    return np.stack([
        116.0 * f[..., 1] - 16.0,
        500.0 * (f[..., 0] - f[..., 1]),
        200.0 * (f[..., 1] - f[..., 2]),
    ], axis=-1)


def rgb_to_lab_array(rgb) -> np.ndarray:
    """Vectorized sRGB -> LAB over an array of shape (..., 3)."""
    return xyz_to_lab_array(rgb_to_xyz_array(rgb))


def lab_to_xyz_array(lab) -> np.ndarray:
    lab = np.nan_to_num(np.asarray(lab, dtype=np.float64))
    fy = (lab[..., 0] + 16.0) / 116.0
    fx = fy + lab[..., 1] / 500.0
    fz = fy - lab[..., 2] / 200.0
    f = np.stack([fx, fy, fz], axis=-1)
    cube = f ** 3
    t = np.where(cube > LAB_EPSILON, cube, (f - LAB_LINEAR_OFFSET) / LAB_LINEAR_SLOPE)
    return t * D65_WHITE


def xyz_to_rgb_array(xyz) -> np.ndarray:
    linear = (np.asarray(xyz, dtype=np.float64) / 100.0) @ XYZ_TO_RGB.T
    return _to_u8(_compand(linear))


def lab_to_rgb_array(lab) -> np.ndarray:
    """
    Vectorized LAB -> sRGB, clamped to the displayable gamut.

    Neutral inputs (a and b within ACHROMATIC_TOLERANCE of zero) are mapped
    through Y alone so that grays come back with R == G == B.

    Returns:
        uint8 array of shape (..., 3)
    """
    lab = np.nan_to_num(np.asarray(lab, dtype=np.float64))
    xyz = lab_to_xyz_array(lab)
    rgb = xyz_to_rgb_array(xyz)

    achromatic = (np.abs(lab[..., 1]) < ACHROMATIC_TOLERANCE) & (np.abs(lab[..., 2]) < ACHROMATIC_TOLERANCE)
    if np.any(achromatic):
        gray_linear = xyz[..., 1] / 100.0 / RGB_TO_XYZ[1].sum()
        gray = _to_u8(_compand(gray_linear))
        rgb = np.where(achromatic[..., None], gray[..., None], rgb)
    return rgb


def rgb_to_xyz(rgb: Sequence[float]) -> Tuple[float, float, float]:
    x, y, z = rgb_to_xyz_array(clamp_rgb(rgb))
    return float(x), float(y), float(z)


def xyz_to_lab(xyz: Sequence[float]) -> LAB:
    l, a, b = xyz_to_lab_array([_finite(v) for v in xyz])
    return LAB(float(l), float(a), float(b))


def rgb_to_lab(rgb: Sequence[float]) -> LAB:
    """Convert sRGB to CIE LAB (D65)."""
    l, a, b = rgb_to_lab_array(clamp_rgb(rgb))
    return LAB(float(l), float(a), float(b))


def lab_to_rgb(lab: Sequence[float]) -> RGB:
    """Convert CIE LAB (D65) to sRGB, clamping out-of-gamut results."""
    r, g, b = lab_to_rgb_array([_finite(v) for v in lab])
    return RGB(int(r), int(g), int(b))


def lab_to_lch(lab: Sequence[float]) -> LCH:
    l, a, b = (_finite(v) for v in lab)
    chroma = math.hypot(a, b)
    hue = math.degrees(math.atan2(b, a))
    if hue < 0:
        hue += 360.0
    return LCH(l, chroma, normalize_hue(hue))


def lch_to_lab(lch: Sequence[float]) -> LAB:
    l, c, h = (_finite(v) for v in lch)
    c = max(0.0, c)
    rad = math.radians(normalize_hue(h))
    return LAB(l, c * math.cos(rad), c * math.sin(rad))


# ============================================================================
# Color value object
# ============================================================================

@dataclass(frozen=True)
class Color:
    """Immutable sRGB color with derived representations."""
    rgb: RGB
    alpha: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "rgb", clamp_rgb(self.rgb))
        object.__setattr__(self, "alpha", clamp(self.alpha, 0.0, 1.0))

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        return cls(hex_to_rgb(value))

    @classmethod
    def from_hsl(cls, h: float, s: float, l: float) -> "Color":
        return cls(hsl_to_rgb((h, s, l)))

    @classmethod
    def from_lab(cls, l: float, a: float, b: float) -> "Color":
        return cls(lab_to_rgb((l, a, b)))

    @classmethod
    def parse(cls, text: str) -> "Color":
        return parse_color(text)

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.rgb)

    @property
    def hsl(self) -> HSL:
        return rgb_to_hsl(self.rgb)

    @property
    def precise_hsl(self) -> HSL:
        return rgb_to_hsl(self.rgb, precise=True)

    @property
    def lab(self) -> LAB:
        return rgb_to_lab(self.rgb)

    @property
    def lch(self) -> LCH:
        return lab_to_lch(self.lab)

    def to_dict(self) -> dict:
        h, s, l = display_hsl(self.hsl)
        return {
            "hex": self.hex,
            "rgb": list(self.rgb),
            "hsl": [h, s, l],
            "lab": [round(v, 2) for v in self.lab],
            "lch": [round(v, 2) for v in self.lch],
            "alpha": self.alpha,
        }

    def __str__(self) -> str:
        return self.hex


ColorLike = Union[Color, str, Sequence[float]]


# ============================================================================
# Parsing
# ============================================================================

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:e[-+]?\d+)?"
_ALPHA = rf"(?:\s*,\s*({_NUMBER})\s*(%?))?"
_RGB_RE = re.compile(
    rf"^rgba?\s*\(\s*({_NUMBER})\s*,\s*({_NUMBER})\s*,\s*({_NUMBER})\s*{_ALPHA}\s*\)$",
    re.IGNORECASE,
)
_HSL_RE = re.compile(
    rf"^hsla?\s*\(\s*({_NUMBER})\s*(?:deg)?\s*,\s*({_NUMBER})\s*%?\s*,\s*({_NUMBER})\s*%?\s*{_ALPHA}\s*\)$",
    re.IGNORECASE,
)


def _parse_alpha(raw: Optional[str], percent: Optional[str]) -> float:
    if raw is None:
        return 1.0
    value = float(raw)
    if percent:
        value /= 100.0
    return clamp(value, 0.0, 1.0)


def parse_color(text: str) -> Color:
    """
    Parse a CSS-style color string.

    Accepts, case-insensitively and with whitespace around separators:
    #RGB, #RRGGBB (the # is optional), rgb(r, g, b), rgba(r, g, b, a),
    hsl(h, s%, l%), hsla(h, s%, l%, a) and CSS named colors. Numbers
    outside their range are clamped.

    Args:
        text: Color string

    Returns:
        Parsed Color

    Raises:
        ParseError: If the string matches none of the accepted shapes
    """
    if not isinstance(text, str):
        raise ParseError(repr(text), "expected a string")

    value = text.strip()
    if not value:
        raise ParseError(text, "empty string")

    named = CSS_COLORS.get(value.lower())
    if named is not None:
        return Color.from_hex(named)

    if _HEX_RE.match(value):
        return Color(hex_to_rgb(value))

    match = _RGB_RE.match(value)
    if match:
        r, g, b = (float(match.group(i)) for i in (1, 2, 3))
        return Color(RGB(r, g, b), _parse_alpha(match.group(4), match.group(5)))

    match = _HSL_RE.match(value)
    if match:
        h, s, l = (float(match.group(i)) for i in (1, 2, 3))
        return Color(hsl_to_rgb((h, s, l)), _parse_alpha(match.group(4), match.group(5)))

    raise ParseError(text)


def as_color(value: ColorLike) -> Color:
    """Coerce a Color, a color string, or an (r, g, b[, a]) sequence to a Color."""
    if isinstance(value, Color):
        return value
    if isinstance(value, str):
        return parse_color(value)
    try:
        items = list(value)
    except TypeError:
        raise ParseError(repr(value), "unsupported color value")
    if len(items) == 3:
        return Color(RGB(*items))
    if len(items) == 4:
        return Color(RGB(*items[:3]), _finite(items[3], 1.0))
    raise ParseError(repr(value), "expected 3 or 4 components")


# ============================================================================
# CSS formatting
# ============================================================================

def format_rgb(color: ColorLike) -> str:
    c = as_color(color)
    r, g, b = c.rgb
    if c.alpha < 1.0:
        return f"rgba({r}, {g}, {b}, {round(c.alpha, 3)})"
    return f"rgb({r}, {g}, {b})"


def format_hsl(color: ColorLike) -> str:
    c = as_color(color)
    h, s, l = display_hsl(c.hsl)
    if c.alpha < 1.0:
        return f"hsla({h}, {s}%, {l}%, {round(c.alpha, 3)})"
    return f"hsl({h}, {s}%, {l}%)"


def format_lab(color: ColorLike) -> str:
    l, a, b = as_color(color).lab
    return f"lab({l:.2f}% {a:.2f} {b:.2f})"


def format_lch(color: ColorLike) -> str:
    l, c, h = as_color(color).lch
    return f"lch({l:.2f}% {c:.2f} {h:.2f})"
