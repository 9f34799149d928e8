"""
Unit tests for color conversion and parsing.

Covers hex/HSL/LAB conversions, clamping, CSS parsing and formatting.
"""

import numpy as np
import pytest

from chromalab.services.colors.conversion import (
    Color, as_color, clamp, display_hsl, format_hsl, format_lab, format_lch, format_rgb, hex_to_rgb,
    hsl_lightness_array, hsl_to_rgb, hsl_to_rgb_array, lab_to_rgb_array, rgb_to_lab_array,
    lab_to_lch, lab_to_rgb, lch_to_lab, normalize_hue, parse_color, rgb_to_hex,
    rgb_to_hsl, rgb_to_lab, rgb_to_xyz, xyz_to_lab,
)
from chromalab.services.colors.errors import ColorEngineError, ParseError
from chromalab.services.colors.types import RGB


class TestHex:
    """Hex encode/decode"""

    def test_rgb_to_hex_is_lowercase_by_default(self):
        assert rgb_to_hex((52, 152, 219)) == "#3498db"
        assert rgb_to_hex((52, 152, 219), upper=True) == "#3498DB"

    def test_rgb_to_hex_clamps_out_of_range(self):
        assert rgb_to_hex((300, -20, 127.6)) == "#ff0080"

    def test_hex_to_rgb_short_and_long_forms(self):
        assert hex_to_rgb("#fff") == RGB(255, 255, 255)
        assert hex_to_rgb("0A2A43") == RGB(10, 42, 67)
        assert hex_to_rgb("  #1F4E79 ") == RGB(31, 78, 121)

    def test_hex_round_trip(self):
        for r in range(0, 256, 17):
            for g in range(0, 256, 17):
                for b in range(0, 256, 17):
                    assert hex_to_rgb(rgb_to_hex((r, g, b))) == (r, g, b)
        assert hex_to_rgb(rgb_to_hex((1, 2, 254))) == (1, 2, 254)

    @pytest.mark.parametrize("bad", ["#ff", "#12345", "#gggggg", "", "blue-ish"])
    def test_hex_to_rgb_rejects_malformed(self, bad):
        with pytest.raises(ParseError):
            hex_to_rgb(bad)


class TestHsl:
    """RGB <-> HSL"""

    def test_known_color(self):
        assert rgb_to_hsl((52, 152, 219)) == pytest.approx((204.1, 69.9, 53.1), abs=0.051)
        assert display_hsl(rgb_to_hsl((52, 152, 219))) == (204, 70, 53)

    def test_grays_have_zero_hue_and_saturation(self):
        h, s, l = rgb_to_hsl((128, 128, 128))
        assert (h, s) == (0, 0)
        assert l == pytest.approx(50.2)
        assert display_hsl((h, s, l)) == (0, 0, 50)

    def test_display_hsl_wraps_hue(self):
        assert display_hsl((359.6, 10.5, 0.4)) == (0, 11, 0)

    def test_primaries(self):
        assert hsl_to_rgb((0, 100, 50)) == RGB(255, 0, 0)
        assert hsl_to_rgb((120, 100, 50)) == RGB(0, 255, 0)
        assert hsl_to_rgb((240, 100, 50)) == RGB(0, 0, 255)

    def test_hue_wraps_and_components_clamp(self):
        assert hsl_to_rgb((360, 100, 50)) == hsl_to_rgb((0, 100, 50))
        assert hsl_to_rgb((-120, 100, 50)) == hsl_to_rgb((240, 100, 50))
        assert hsl_to_rgb((0, 150, 120)) == RGB(255, 255, 255)

    def test_round_trip_within_one(self):
        drifted = []
        for r in range(0, 256, 15):
            for g in range(0, 256, 15):
                for b in range(0, 256, 15):
                    back = hsl_to_rgb(rgb_to_hsl((r, g, b)))
                    if any(abs(x - y) > 1 for x, y in zip(back, (r, g, b))):
                        drifted.append(((r, g, b), tuple(back)))
        assert drifted == []

    def test_round_trip_within_one_off_grid(self):
        for rgb in [(52, 152, 219), (10, 42, 67), (211, 181, 143), (1, 254, 3), (200, 17, 99), (0, 0, 75)]:
            back = hsl_to_rgb(rgb_to_hsl(rgb))
            assert all(abs(a - b) <= 1 for a, b in zip(back, rgb))

    def test_precise_round_trip_is_exact(self):
        for rgb in [(52, 152, 219), (10, 42, 67), (200, 17, 99)]:
            assert hsl_to_rgb(rgb_to_hsl(rgb, precise=True)) == rgb


class TestLab:
    """sRGB <-> CIELAB (D65)"""

    def test_white_and_black(self):
        l, a, b = rgb_to_lab((255, 255, 255))
        assert l == pytest.approx(100.0, abs=1e-3)
        assert a == pytest.approx(0.0, abs=1e-3)
        assert b == pytest.approx(0.0, abs=1e-3)
        assert rgb_to_lab((0, 0, 0)) == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)

    def test_red_reference_value(self):
        l, a, b = rgb_to_lab((255, 0, 0))
        assert l == pytest.approx(53.24, abs=0.05)
        assert a == pytest.approx(80.09, abs=0.05)
        assert b == pytest.approx(67.20, abs=0.05)

    def test_neutral_lab_returns_exact_gray(self):
        for lightness in (0, 12.5, 50, 77.7, 100):
            r, g, b = lab_to_rgb((lightness, 0, 0))
            assert r == g == b

    def test_lab_round_trip(self):
        for rgb in [(52, 152, 219), (255, 0, 0), (12, 200, 64)]:
            back = lab_to_rgb(rgb_to_lab(rgb))
            assert all(abs(a - b) <= 1 for a, b in zip(back, rgb))

    def test_out_of_gamut_is_clamped(self):
        r, g, b = lab_to_rgb((50, 200, -200))
        assert all(0 <= c <= 255 for c in (r, g, b))

    def test_xyz_stage(self):
        x, y, z = rgb_to_xyz((255, 255, 255))
        assert (x, y, z) == pytest.approx((95.047, 100.0, 108.883), abs=1e-3)
        assert xyz_to_lab((x, y, z)) == pytest.approx(rgb_to_lab((255, 255, 255)), abs=1e-9)

    def test_color_from_lab(self):
        assert Color.from_lab(*rgb_to_lab((52, 152, 219))).hex == "#3498db"

    def test_lch_round_trip(self):
        lab = rgb_to_lab((52, 152, 219))
        back = lch_to_lab(lab_to_lch(lab))
        assert back == pytest.approx(tuple(lab), abs=1e-9)

    def test_lch_hue_in_range(self):
        _, _, h = lab_to_lch((50, -10, -10))
        assert 0 <= h < 360


class TestVectorized:
    """Array conversions used by the image pipelines"""

    def test_lab_array_round_trip(self, noise_image):
        back = lab_to_rgb_array(rgb_to_lab_array(noise_image))
        assert back.dtype == np.uint8
        assert np.abs(back.astype(int) - noise_image.astype(int)).max() <= 1

    def test_array_matches_scalar(self):
        rgb = np.array([[52, 152, 219], [255, 0, 0]])
        assert rgb_to_lab_array(rgb)[0] == pytest.approx(tuple(rgb_to_lab((52, 152, 219))), abs=1e-9)

    def test_hsl_arrays(self):
        out = hsl_to_rgb_array([[0, 100, 50], [120, 100, 50], [480, 100, 50]])
        assert out.tolist() == [[255, 0, 0], [0, 255, 0], [0, 255, 0]]
        assert hsl_lightness_array([[255, 255, 255], [0, 0, 0], [255, 0, 0]]).tolist() == [1.0, 0.0, 0.5]


class TestClamping:
    """Numeric guards"""

    def test_clamp_collapses_nan_to_low_bound(self):
        assert clamp(float("nan"), 0, 100) == 0
        assert clamp(150, 0, 100) == 100

    def test_normalize_hue(self):
        assert normalize_hue(370) == 10
        assert normalize_hue(-30) == 330
        assert normalize_hue(360) == 0

    def test_color_construction_clamps(self):
        c = Color(RGB(-4, 260, 12.4), alpha=2.0)
        assert c.rgb == RGB(0, 255, 12)
        assert c.alpha == 1.0


class TestParsing:
    """CSS color parsing"""

    @pytest.mark.parametrize("text, expected", [
        ("#FFF", "#ffffff"),
        ("fff", "#ffffff"),
        ("rgb(255, 0, 0)", "#ff0000"),
        ("RGB( 0 ,128, 255 )", "#0080ff"),
        ("hsl(120, 100%, 50%)", "#00ff00"),
        ("hsl(240deg, 100%, 50%)", "#0000ff"),
        ("RebeccaPurple", "#663399"),
        ("  navy ", "#000080"),
    ])
    def test_accepted_forms(self, text, expected):
        assert parse_color(text).hex == expected

    def test_alpha_forms(self):
        assert parse_color("rgba(0, 0, 255, 0.25)").alpha == pytest.approx(0.25)
        assert parse_color("rgba(0, 0, 255, 50%)").alpha == pytest.approx(0.5)
        assert parse_color("hsla(0, 100%, 50%, 2)").alpha == 1.0

    def test_out_of_range_numbers_clamp(self):
        assert parse_color("rgb(300, -5, 0)").rgb == RGB(255, 0, 0)

    @pytest.mark.parametrize("bad", ["", "   ", "notacolor", "rgb(1,2)", "#12", "hsl(a, b, c)"])
    def test_rejects_unknown_strings(self, bad):
        with pytest.raises(ParseError) as exc_info:
            parse_color(bad)
        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value, ColorEngineError)

    def test_as_color_accepts_sequences(self):
        assert as_color((1, 2, 3)).rgb == RGB(1, 2, 3)
        assert as_color([1, 2, 3, 0.5]).alpha == 0.5
        with pytest.raises(ParseError):
            as_color((1, 2))

    def test_formatting(self):
        assert format_rgb("#3498db") == "rgb(52, 152, 219)"
        assert format_hsl("#3498db") == "hsl(204, 70%, 53%)"
        assert format_rgb("rgba(1, 2, 3, 0.5)") == "rgba(1, 2, 3, 0.5)"
        assert format_lab("#ff0000") == "lab(53.24% 80.09 67.20)"
        assert format_lch("#ff0000") == "lch(53.24% 104.55 40.00)"

    def test_to_dict(self):
        data = Color.from_hex("#3498db").to_dict()
        assert data["hex"] == "#3498db"
        assert data["rgb"] == [52, 152, 219]
        assert data["hsl"] == [204, 70, 53]
        assert len(data["lab"]) == 3
