"""
Unit tests for brand palette bucketization and analysis.
"""

import pytest

from chromalab.services.colors.brand import (
    analyze_brand, analyze_harmony, analyze_palette, brand_palette, brand_score, bucketize_brand_palette,
    is_neutral,
)
from chromalab.services.colors.conversion import as_color
from chromalab.services.colors.types import ClusterRole


PRIMARIES_WITH_NEUTRALS = ["#ff0000", "#00ff00", "#0000ff", "#ffffff", "#808080"]


class TestBucketize:
    """Tier assignment"""

    def test_tiers_and_equal_shares(self):
        assignments = bucketize_brand_palette(PRIMARIES_WITH_NEUTRALS)
        roles = {a.color.hex: a.cluster for a in assignments}
        assert roles["#ff0000"] is ClusterRole.PRIMARY
        assert roles["#00ff00"] is ClusterRole.SECONDARY
        assert roles["#0000ff"] is ClusterRole.ACCENT
        assert roles["#ffffff"] is ClusterRole.NEUTRAL
        assert roles["#808080"] is ClusterRole.NEUTRAL
        assert all(a.percentage == pytest.approx(20.0) for a in assignments)

    def test_ordered_by_tier(self):
        assignments = bucketize_brand_palette(PRIMARIES_WITH_NEUTRALS)
        assert [a.cluster for a in assignments] == [
            ClusterRole.PRIMARY, ClusterRole.SECONDARY, ClusterRole.ACCENT,
            ClusterRole.NEUTRAL, ClusterRole.NEUTRAL,
        ]

    def test_empty_palette(self):
        assert bucketize_brand_palette([]) == []

    def test_neutral_rules(self):
        assert is_neutral(as_color("#808080"))
        assert is_neutral(as_color("#050505"))
        assert not is_neutral(as_color("#3498db"))

    def test_score_prefers_mid_lightness(self):
        assert brand_score(as_color("hsl(0, 100%, 50%)")) > brand_score(as_color("hsl(0, 100%, 80%)"))


class TestHarmonyDetection:

    def test_triad(self):
        harmony = analyze_harmony(bucketize_brand_palette(PRIMARIES_WITH_NEUTRALS))
        assert harmony.type == "triad"
        assert harmony.contrast_level == "high"

    def test_complementary(self):
        harmony = analyze_harmony(bucketize_brand_palette(["#ff0000", "#00ffff"]))
        assert harmony.type == "complementary"

    def test_analogous(self):
        harmony = analyze_harmony(bucketize_brand_palette(["hsl(200, 80%, 50%)", "hsl(220, 80%, 50%)"]))
        assert harmony.type == "analogous"

    def test_analogous_across_red_wrap(self):
        harmony = analyze_harmony(bucketize_brand_palette(["hsl(350, 80%, 50%)", "hsl(10, 80%, 50%)"]))
        assert harmony.type == "analogous"

    def test_distant_pair_is_not_analogous(self):
        harmony = analyze_harmony(bucketize_brand_palette(["hsl(0, 80%, 50%)", "hsl(100, 80%, 50%)"]))
        assert harmony.type == "none"

    def test_neutral_only_palette_has_no_harmony(self):
        harmony = analyze_harmony(bucketize_brand_palette(["#ffffff", "#000000"]))
        assert harmony.type == "none"
        assert harmony.has_conflict is False


class TestPaletteAnalysis:

    def test_vibrant_palette(self):
        characteristics = analyze_palette(bucketize_brand_palette(["#ff0000", "#ff8000"]))
        assert characteristics.temperature == "warm"
        assert characteristics.saturation == "vibrant"
        assert characteristics.style == "energetic"
        assert "modern" in characteristics.tags

    def test_empty_defaults(self):
        assert analyze_palette([]).to_dict()["style"] == "corporate"

    def test_analyze_brand_payload(self):
        data = analyze_brand(PRIMARIES_WITH_NEUTRALS)
        assert set(data) == {"colors", "characteristics", "harmony", "descriptions"}
        assert len(data["colors"]) == 5
        assert data["colors"][0]["cluster"] == "primary"
        assert data["harmony"]["type"] == "triad"
        assert data["descriptions"]["technical"].startswith("Technical Palette Analysis:")
        assert data["descriptions"]["recommendations"]


class TestBrandPresets:

    def test_lookup_is_case_insensitive(self):
        assert brand_palette("spotify") == ["#1db954", "#191414", "#ffffff"]
        assert brand_palette("  IKEA ") == brand_palette("ikea")

    def test_unknown_brand(self):
        with pytest.raises(ValueError, match="Unknown brand"):
            brand_palette("Acme")

    def test_preset_palette_analyzes(self):
        data = analyze_brand(brand_palette("Spotify"))
        assert data["colors"][0]["hex"] == "#1db954"
        assert data["colors"][0]["cluster"] == "primary"
