"""
API integration tests for the v1 endpoints.

Tests the complete HTTP surface:
- color utilities (parse, contrast, names, harmony, simulate)
- brand analysis, design tokens and presets
- image pipelines (extract, gradient map, heatmap) with uploads
- error mapping and request IDs
"""

import base64
import io
import json

import numpy as np
import pytest
from PIL import Image

from conftest import encode_png


def png_upload(pixels, name="img.png", content_type="image/png"):
    return {"file": (name, encode_png(pixels), content_type)}


class TestColorEndpoints:
    """Stateless color utilities"""

    def test_parse(self, test_client):
        response = test_client.get("/v1/colors/parse", params={"color": "rgb(52, 152, 219)"})
        assert response.status_code == 200
        assert response.headers["X-Request-ID"].startswith("req-")
        data = response.json()
        assert data["color"]["hex"] == "#3498db"
        assert data["formats"]["hsl"] == "hsl(204, 70%, 53%)"
        assert set(data["formats"]) == {"hex", "rgb", "hsl", "lab", "lch"}

    def test_parse_invalid_color(self, test_client):
        response = test_client.get("/v1/colors/parse", params={"color": "notacolor"})
        assert response.status_code == 400
        assert "X-Request-ID" in response.headers
        assert "notacolor" in response.json()["detail"]

    def test_contrast_pair(self, test_client):
        response = test_client.get("/v1/colors/contrast", params={"foreground": "#000", "background": "#fff"})
        assert response.status_code == 200
        data = response.json()
        assert data["ratio"] == 21.0
        assert data["aaa"] is True
        assert data["recommendation"].startswith("Excellent")

    def test_contrast_single_color(self, test_client):
        response = test_client.get("/v1/colors/contrast", params={"foreground": "#1e3a8a"})
        assert response.status_code == 200
        assert response.json()["best_text_color"] == "#ffffff"

    def test_names(self, test_client):
        response = test_client.get("/v1/colors/names", params={"color": "#ff0000", "top_n": 3})
        assert response.status_code == 200
        data = response.json()
        assert data["closest"][0] == {"name": "red", "hex": "#ff0000", "distance": 0.0}
        assert len(data["closest"]) == 3

    def test_names_top_n_bounds(self, test_client):
        response = test_client.get("/v1/colors/names", params={"color": "#ff0000", "top_n": 0})
        assert response.status_code == 422

    def test_harmony_mode(self, test_client):
        response = test_client.get("/v1/colors/harmony", params={"color": "#3498db", "mode": "complementary"})
        assert response.status_code == 200
        data = response.json()
        assert data["base"] == "#3498db"
        assert len(data["colors"]) == 2
        assert data["colors"][0]["hex"] == "#3498db"

    def test_harmony_swatch(self, test_client):
        response = test_client.get(
            "/v1/colors/harmony", params={"color": "#3498db", "mode": "triadic", "include_swatch": True},
        )
        swatch = Image.open(io.BytesIO(base64.b64decode(response.json()["swatch_png_b64"])))
        assert swatch.size == (120, 40)

    def test_harmony_all_modes_default_base(self, test_client):
        response = test_client.get("/v1/colors/harmony")
        assert response.status_code == 200
        data = response.json()
        assert "triadic" in data["harmonies"]
        assert data["base"] == data["harmonies"]["complementary"][0]["hex"]

    def test_harmony_invalid_mode(self, test_client):
        response = test_client.get("/v1/colors/harmony", params={"color": "#3498db", "mode": "pentadic"})
        assert response.status_code == 400

    def test_simulate(self, test_client):
        response = test_client.get("/v1/colors/simulate", params={"color": "#ff0000", "kind": "achromatopsia"})
        assert response.status_code == 200
        assert response.json()["simulated"] == "#4c4c4c"

        response = test_client.get("/v1/colors/simulate", params={"color": "#ff0000"})
        assert response.json()["simulations"]["normal"] == "#ff0000"


class TestBrandAndTokens:

    def test_brand_analyze(self, test_client):
        response = test_client.post(
            "/v1/brand/analyze",
            json={"colors": ["#ff0000", "#00ff00", "#0000ff", "#ffffff", "#808080"]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["colors"][0]["hex"] == "#ff0000"
        assert data["colors"][0]["cluster"] == "primary"
        assert data["harmony"]["type"] == "triad"

    def test_brand_rejects_empty_palette(self, test_client):
        response = test_client.post("/v1/brand/analyze", json={"colors": []})
        assert response.status_code == 422

    def test_brand_invalid_color(self, test_client):
        response = test_client.post("/v1/brand/analyze", json={"colors": ["#ff0000", "blurple"]})
        assert response.status_code == 400

    def test_brand_by_name(self, test_client):
        response = test_client.post("/v1/brand/analyze", json={"brand": "Spotify"})
        assert response.status_code == 200
        data = response.json()
        assert data["brand"] == "Spotify"
        assert [c["hex"] for c in data["colors"]][0] == "#1db954"

    def test_brand_unknown_name(self, test_client):
        response = test_client.post("/v1/brand/analyze", json={"brand": "Acme"})
        assert response.status_code == 400

    @pytest.mark.parametrize("body", [{}, {"brand": "IKEA", "colors": ["#ffcc00"]}])
    def test_brand_needs_exactly_one_source(self, test_client, body):
        response = test_client.post("/v1/brand/analyze", json=body)
        assert response.status_code == 422

    def test_brand_presets(self, test_client):
        response = test_client.get("/v1/brand/presets")
        assert response.status_code == 200
        brands = {b["name"]: b for b in response.json()["brands"]}
        assert brands["IKEA"]["colors"] == ["#ffcc00", "#003399", "#ffffff"]

    def test_tokens_json(self, test_client):
        response = test_client.get("/v1/tokens", params={"color": "#3498db"})
        assert response.status_code == 200
        data = response.json()
        assert data["tokens"]["primary"]["base"] == "#3498db"
        assert json.loads(data["json"])["color"]["primary"]["scale"]["500"] == "#3498db"

    def test_tokens_css(self, test_client):
        response = test_client.get("/v1/tokens", params={"color": "#3498db", "format": "css"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/css")
        assert response.text.startswith(":root {")

    def test_tokens_tailwind(self, test_client):
        response = test_client.get("/v1/tokens", params={"color": "#3498db", "format": "tailwind"})
        assert response.status_code == 200
        assert response.text.startswith("module.exports")

    def test_tokens_unknown_format(self, test_client):
        response = test_client.get("/v1/tokens", params={"color": "#3498db", "format": "scss"})
        assert response.status_code == 422

    def test_presets(self, test_client):
        response = test_client.get("/v1/gradients/presets")
        assert response.status_code == 200
        presets = {p["name"]: p for p in response.json()["presets"]}
        assert presets["Duotone"]["stops"] == [
            {"position": 0.0, "color": "#000000"},
            {"position": 1.0, "color": "#ffffff"},
        ]


class TestExtractEndpoint:
    """POST /v1/images/extract"""

    def test_extract(self, test_client, two_color_image):
        response = test_client.post("/v1/images/extract?k=2", files=png_upload(two_color_image))
        assert response.status_code == 200
        assert response.headers["X-Request-ID"].startswith("ext-")
        data = response.json()
        assert (data["width"], data["height"]) == (64, 64)
        assert data["k"] == 2
        assert data["cached"] is False
        assert [c["percentage"] for c in data["colors"]] == pytest.approx([75.0, 25.0])
        assert data["sample_count"] == 64 * 64
        assert [(c["tone"], c["family"]) for c in data["colors"]] == [("mid", "warm"), ("mid", "cold")]
        assert len(data["groups"]["mid"]) == 2
        assert data["groups"]["warm"] == [data["colors"][0]["hex"]]
        assert data["groups"]["cold"] == [data["colors"][1]["hex"]]

        swatch = Image.open(io.BytesIO(base64.b64decode(data["swatch_png_b64"])))
        assert swatch.format == "PNG"

    def test_identical_upload_served_from_cache(self, test_client, two_color_image):
        first = test_client.post("/v1/images/extract?k=2&seed=1", files=png_upload(two_color_image))
        second = test_client.post("/v1/images/extract?k=2&seed=1", files=png_upload(two_color_image))
        assert first.json()["cached"] is False
        assert second.json()["cached"] is True
        assert second.json()["colors"] == first.json()["colors"]

        stats = test_client.get("/v1/metrics").json()
        assert stats["cache"]["hits"] == 1
        assert stats["counters"]["cache_misses_total"] == 1

    def test_different_seed_is_a_cache_miss(self, test_client, two_color_image):
        test_client.post("/v1/images/extract?k=2&seed=1", files=png_upload(two_color_image))
        response = test_client.post("/v1/images/extract?k=2&seed=2", files=png_upload(two_color_image))
        assert response.json()["cached"] is False

    def test_without_swatch(self, test_client, two_color_image):
        response = test_client.post("/v1/images/extract?k=2&include_swatch=false", files=png_upload(two_color_image))
        assert response.json()["swatch_png_b64"] is None

    def test_transparent_pixels_ignored(self, test_client):
        img = np.zeros((16, 16, 4), dtype=np.uint8)
        img[:, :8] = (0, 255, 0, 255)
        img[:, 8:] = (255, 0, 255, 0)
        response = test_client.post("/v1/images/extract?k=1", files=png_upload(img))
        assert response.status_code == 200
        data = response.json()
        assert data["sample_count"] == 128
        assert data["colors"][0]["percentage"] == 100.0

    def test_unsupported_media_type(self, test_client):
        response = test_client.post(
            "/v1/images/extract",
            files={"file": ("notes.txt", b"hello world", "text/plain")},
        )
        assert response.status_code == 415
        assert "X-Request-ID" in response.headers

    def test_corrupt_png(self, test_client):
        response = test_client.post(
            "/v1/images/extract",
            files={"file": ("img.png", b"not really a png file", "image/png")},
        )
        assert response.status_code == 400

    def test_too_few_colors(self, test_client):
        solid = np.full((32, 32, 3), 90, dtype=np.uint8)
        response = test_client.post("/v1/images/extract?k=3", files=png_upload(solid))
        assert response.status_code == 422
        assert "Insufficient unique colors" in response.json()["detail"]

    def test_k_out_of_range(self, test_client, two_color_image):
        response = test_client.post("/v1/images/extract?k=0", files=png_upload(two_color_image))
        assert response.status_code == 422


class TestGradientMapEndpoint:
    """POST /v1/images/gradient-map"""

    def test_preset(self, test_client, noise_image):
        response = test_client.post("/v1/images/gradient-map?preset=Duotone", files=png_upload(noise_image))
        assert response.status_code == 200
        data = response.json()
        assert (data["width"], data["height"]) == (40, 40)
        assert data["blend_mode"] == "normal"
        image = Image.open(io.BytesIO(base64.b64decode(data["image_png_b64"])))
        assert image.size == (40, 40)
        assert image.mode == "RGBA"

    def test_custom_stops(self, test_client, noise_image):
        stops = [{"position": 1.4, "color": "white"}, {"position": 0, "color": "#000"}]
        response = test_client.post(
            "/v1/images/gradient-map?intensity=0.5&blend_mode=screen",
            files=png_upload(noise_image),
            data={"stops": json.dumps(stops)},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["stops"] == [
            {"position": 0.0, "color": "#000000"},
            {"position": 1.0, "color": "#ffffff"},
        ]
        assert data["intensity"] == 0.5

    def test_missing_stops(self, test_client, noise_image):
        response = test_client.post("/v1/images/gradient-map", files=png_upload(noise_image))
        assert response.status_code == 400

    def test_malformed_stops(self, test_client, noise_image):
        response = test_client.post(
            "/v1/images/gradient-map",
            files=png_upload(noise_image),
            data={"stops": "[{\"position\": 0}"},
        )
        assert response.status_code == 400

    def test_unknown_blend_mode(self, test_client, noise_image):
        response = test_client.post(
            "/v1/images/gradient-map?preset=Warm&blend_mode=dissolve", files=png_upload(noise_image),
        )
        assert response.status_code == 400


class TestHeatmapEndpoint:
    """POST /v1/images/heatmap"""

    def test_heatmap(self, test_client):
        img = np.zeros((32, 64, 3), dtype=np.uint8)
        img[:, 32:] = 255
        response = test_client.post("/v1/images/heatmap?grid_size=32", files=png_upload(img))
        assert response.status_code == 200
        data = response.json()
        assert data["text_color"] == "#ffffff"
        assert [cell["level"] for cell in data["cells"][0]] == ["high", "low"]
        assert data["summary"]["cells"] == 2

    def test_grid_size_out_of_range(self, test_client, noise_image):
        response = test_client.post("/v1/images/heatmap?grid_size=0", files=png_upload(noise_image))
        assert response.status_code == 400


class TestMetricsEndpoint:

    def test_counters_track_requests_and_failures(self, test_client):
        test_client.get("/v1/colors/parse", params={"color": "#fff"})
        test_client.get("/v1/colors/parse", params={"color": "nope"})
        data = test_client.get("/v1/metrics").json()
        assert data["counters"]["requests_total_parse"] == 2
        assert data["counters"]["failed_total_ParseError"] == 1
        assert data["timing_stats"]["parse_duration_ms"]["count"] == 1
        assert data["uptime_seconds"] >= 0
