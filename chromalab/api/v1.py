"""
ChromaLab v1 API Routes
Color utilities, brand analysis, design tokens and image pipelines.
"""
import time
from typing import Any, Dict, Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse

from chromalab.config import config
from chromalab.schemas import (
    BrandAnalyzeRequest, BrandAnalyzeResponse, ErrorResponse, ExtractResponse, GradientMapResponse,
    HealthResponse, HeatmapResponse, ParseResponse,
)
from chromalab.services.cache import get_extraction_cache
from chromalab.services.colors import __version__
from chromalab.services.colors.brand import analyze_brand, brand_palette
from chromalab.services.colors.contrast import analyze_contrast, check_contrast, recommendation
from chromalab.services.colors.conversion import (
    as_color, format_hsl, format_lab, format_lch, format_rgb,
)
from chromalab.services.colors.errors import ClusteringError, ExtractionCancelled
from chromalab.services.colors.extract_api import handle_extract, handle_gradient_map, handle_heatmap
from chromalab.services.colors.harmony import DEFAULT_BASE, generate_all_harmonies, generate_harmony
from chromalab.services.colors.naming import name_color
from chromalab.services.colors.presets import BRAND_PALETTES, GRADIENT_PRESETS
from chromalab.services.colors.swatches import render_swatch_strip
from chromalab.services.colors.tokens import (
    generate_ui_tokens, tokens_to_css, tokens_to_json, tokens_to_tailwind,
)
from chromalab.services.colors.vision import simulate_all, simulate_color_blindness
from chromalab.utils.ids import generate_request_id
from chromalab.utils.logging import get_logger
from chromalab.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["ChromaLab v1"])
ERROR_RESPONSES = {400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}}
logger = get_logger()


def _to_http_error(exc: Exception, request_id: str, endpoint: str) -> HTTPException:
    """Map engine exceptions to HTTP errors; anything unexpected becomes a logged 500."""
    headers = {"X-Request-ID": request_id}
    if isinstance(exc, HTTPException):
        get_metrics().increment_failure_count(f"http_{exc.status_code}")
        return HTTPException(status_code=exc.status_code, detail=exc.detail, headers=headers)
    if isinstance(exc, ExtractionCancelled):
        status_code = 504
    elif isinstance(exc, ClusteringError):
        status_code = 422
    elif isinstance(exc, ValueError):
        status_code = 400
    else:
        logger.error(f"Unhandled error in {endpoint}: {exc!r}", extra={"request_id": request_id})
        get_metrics().increment_failure_count("internal")
        return HTTPException(status_code=500, detail="Internal server error", headers=headers)

    get_metrics().increment_failure_count(type(exc).__name__)
    logger.warning(f"{endpoint} rejected: {exc}", extra={"request_id": request_id})
    return HTTPException(status_code=status_code, detail=str(exc), headers=headers)


def _respond(content: Any, request_id: str, endpoint: str, start_time: float) -> JSONResponse:
    get_metrics().record_timing(endpoint, (time.time() - start_time) * 1000)
    return JSONResponse(content=content, headers={"X-Request-ID": request_id})


def _begin(endpoint: str, prefix: str = "req"):
    get_metrics().increment_request_count(endpoint)
    return generate_request_id(prefix), time.time()


# ============================================================================
# Service
# ============================================================================

@router.get("/healthz", response_model=HealthResponse, summary="Health Check")
async def health_check() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(ok=True, version=__version__, service="chromalab")


@router.get("/metrics", summary="Service Metrics")
def service_metrics() -> Dict[str, Any]:
    """Counters, timing percentiles and extraction cache statistics."""
    if not config.METRICS_ENABLED:
        raise HTTPException(status_code=404, detail="Metrics are disabled")
    summary = get_metrics().get_summary()
    summary["cache"] = get_extraction_cache().get_cache_stats()
    return summary


# ============================================================================
# Colors
# ============================================================================

@router.get("/colors/parse", response_model=ParseResponse, responses=ERROR_RESPONSES, summary="Parse a Color")
def parse_endpoint(color: str = Query(..., min_length=1, description="hex, rgb(), hsl() or CSS name")):
    """Parse any accepted color notation and return every representation."""
    request_id, start_time = _begin("parse")
    try:
        parsed = as_color(color)
        content = {
            "color": parsed.to_dict(),
            "formats": {
                "hex": parsed.hex,
                "rgb": format_rgb(parsed),
                "hsl": format_hsl(parsed),
                "lab": format_lab(parsed),
                "lch": format_lch(parsed),
            },
        }
    except Exception as e:
        raise _to_http_error(e, request_id, "parse")
    return _respond(content, request_id, "parse", start_time)


@router.get("/colors/contrast", summary="WCAG Contrast")
def contrast_endpoint(
    foreground: str = Query(..., min_length=1, description="Text color"),
    background: Optional[str] = Query(None, description="Background color; omit to test against white and black"),
    large_text: bool = Query(False, description="Grade against large-text thresholds"),
):
    """
    Contrast ratio and WCAG AA/AAA compliance.

    With only `foreground`, the color is graded against white and black and a
    readable text color is recommended.
    """
    request_id, start_time = _begin("contrast")
    try:
        if background is None:
            content = analyze_contrast(foreground, large_text=large_text)
        else:
            fg, bg = as_color(foreground), as_color(background)
            result = check_contrast(fg, bg)
            content = {
                "foreground": fg.hex,
                "background": bg.hex,
                **result.to_dict(),
                "recommendation": recommendation(result.ratio, large_text=large_text),
            }
    except Exception as e:
        raise _to_http_error(e, request_id, "contrast")
    return _respond(content, request_id, "contrast", start_time)


@router.get("/colors/names", summary="Name a Color")
def names_endpoint(
    color: str = Query(..., min_length=1),
    top_n: int = Query(6, ge=1, le=20, description="Closest CSS names to return"),
):
    """Closest CSS names (CIEDE2000), descriptive and marketing names, tags and tone."""
    request_id, start_time = _begin("names")
    try:
        content = name_color(color, top_n=top_n)
    except Exception as e:
        raise _to_http_error(e, request_id, "names")
    return _respond(content, request_id, "names", start_time)


@router.get("/colors/harmony", summary="Color Harmonies")
def harmony_endpoint(
    color: Optional[str] = Query(None, description="Base color; defaults to hsl(204, 70%, 53%)"),
    mode: Optional[str] = Query(None, description="Harmony mode; omit for all modes"),
    include_swatch: bool = Query(False, description="Include a PNG swatch strip for a single mode"),
):
    request_id, start_time = _begin("harmony")
    try:
        base = as_color(color) if color else DEFAULT_BASE
        if mode:
            candidates = generate_harmony(base, mode)
            content = {
                "base": base.hex,
                "mode": mode,
                "colors": [c.to_dict() for c in candidates],
            }
            if include_swatch:
                content["swatch_png_b64"] = render_swatch_strip([c.color for c in candidates], highlight_index=0)
        else:
            content = {
                "base": base.hex,
                "harmonies": {
                    name: [c.to_dict() for c in candidates]
                    for name, candidates in generate_all_harmonies(base).items()
                },
            }
    except Exception as e:
        raise _to_http_error(e, request_id, "harmony")
    return _respond(content, request_id, "harmony", start_time)


@router.get("/colors/simulate", summary="Color Vision Deficiency Simulation")
def simulate_endpoint(
    color: str = Query(..., min_length=1),
    kind: Optional[str] = Query(None, description="Deficiency name; omit for all"),
):
    request_id, start_time = _begin("simulate")
    try:
        parsed = as_color(color)
        if kind:
            content = {"hex": parsed.hex, "kind": kind, "simulated": simulate_color_blindness(parsed, kind).hex}
        else:
            content = {"hex": parsed.hex, "simulations": simulate_all(parsed)}
    except Exception as e:
        raise _to_http_error(e, request_id, "simulate")
    return _respond(content, request_id, "simulate", start_time)


# ============================================================================
# Brand and tokens
# ============================================================================

@router.post("/brand/analyze", response_model=BrandAnalyzeResponse, responses=ERROR_RESPONSES,
             summary="Brand Palette Analysis")
def brand_endpoint(request: BrandAnalyzeRequest):
    """Bucketize a palette into primary/secondary/accent/neutral and describe it."""
    request_id, start_time = _begin("brand")
    try:
        colors = request.colors if request.colors is not None else brand_palette(request.brand)
        content = analyze_brand(colors)
        content["brand"] = request.brand
    except Exception as e:
        raise _to_http_error(e, request_id, "brand")
    return _respond(content, request_id, "brand", start_time)


@router.get("/brand/presets", summary="Predefined Brand Palettes")
def brand_presets_endpoint() -> Dict[str, Any]:
    return {
        "brands": [
            {"name": name, "description": description, "colors": colors}
            for name, (description, colors) in BRAND_PALETTES.items()
        ]
    }


@router.get("/tokens", summary="UI Design Tokens")
def tokens_endpoint(
    color: str = Query(..., min_length=1, description="Brand color"),
    output: str = Query("json", alias="format", pattern="^(json|css|tailwind)$", description="Output format"),
):
    request_id, start_time = _begin("tokens")
    try:
        tokens = generate_ui_tokens(color)
    except Exception as e:
        raise _to_http_error(e, request_id, "tokens")

    if output == "css":
        return PlainTextResponse(tokens_to_css(tokens), media_type="text/css",
                                 headers={"X-Request-ID": request_id})
    if output == "tailwind":
        return PlainTextResponse(tokens_to_tailwind(tokens), media_type="application/javascript",
                                 headers={"X-Request-ID": request_id})
    return _respond({"tokens": tokens, "json": tokens_to_json(tokens)}, request_id, "tokens", start_time)


@router.get("/gradients/presets", summary="Gradient Map Presets")
def presets_endpoint() -> Dict[str, Any]:
    return {
        "presets": [
            {
                "name": name,
                "description": description,
                "stops": [{"position": position, "color": color} for position, color in stops],
            }
            for name, (description, stops) in GRADIENT_PRESETS.items()
        ]
    }


# ============================================================================
# Images
# ============================================================================

@router.post("/images/extract", response_model=ExtractResponse, responses=ERROR_RESPONSES,
             summary="Dominant Color Extraction")
async def extract_endpoint(
    file: UploadFile = File(..., description="PNG or JPEG image"),
    k: int = Query(config.DEFAULT_K, ge=1, le=config.MAX_K, description="Number of colors"),
    stride: int = Query(config.DEFAULT_STRIDE, ge=1, le=64, description="Sample every n-th pixel"),
    seed: Optional[int] = Query(config.RANDOM_SEED, ge=0, description="k-means++ seed"),
    max_edge: int = Query(config.MAX_EDGE, ge=64, le=4096, description="Downscale long edge to this size"),
    include_swatch: bool = Query(True, description="Include a PNG palette strip"),
):
    """
    Extract the k dominant colors of an image with k-means in CIELAB.

    Transparent pixels are ignored. Colors are sorted by share, descending.
    Identical uploads with identical parameters are served from cache.
    """
    request_id, start_time = _begin("extract", "ext")
    try:
        result = await handle_extract(request_id, file, k, stride, seed, max_edge, include_swatch)
    except Exception as e:
        raise _to_http_error(e, request_id, "extract")
    return _respond(result.model_dump(), request_id, "extract", start_time)


@router.post("/images/gradient-map", response_model=GradientMapResponse, responses=ERROR_RESPONSES,
             summary="Gradient Map")
async def gradient_map_endpoint(
    file: UploadFile = File(..., description="PNG or JPEG image"),
    stops: Optional[str] = Form(None, description='JSON list, e.g. [{"position": 0, "color": "#000"}]'),
    preset: Optional[str] = Query(None, description="Preset name from /v1/gradients/presets"),
    intensity: float = Query(1.0, description="Blend weight; clamped to [0, 1]"),
    blend_mode: str = Query("normal", description="normal, multiply, screen, overlay, soft-light, color, luminosity"),
    use_lab: bool = Query(True, description="Luminance and interpolation in LAB (else HSL)"),
    max_edge: int = Query(config.MAX_EDGE, ge=64, le=4096),
):
    request_id, start_time = _begin("gradient_map", "grad")
    try:
        result = await handle_gradient_map(request_id, file, stops, preset, intensity, blend_mode, use_lab, max_edge)
    except Exception as e:
        raise _to_http_error(e, request_id, "gradient_map")
    return _respond(result.model_dump(), request_id, "gradient_map", start_time)


@router.post("/images/heatmap", response_model=HeatmapResponse, responses=ERROR_RESPONSES,
             summary="Text Contrast Heatmap")
async def heatmap_endpoint(
    file: UploadFile = File(..., description="PNG or JPEG image"),
    text_color: str = Query("#ffffff", min_length=1, description="Color of text placed on the image"),
    grid_size: int = Query(32, description="Cell edge in pixels"),
    max_edge: int = Query(config.MAX_EDGE, ge=64, le=4096),
):
    request_id, start_time = _begin("heatmap", "heat")
    try:
        result = await handle_heatmap(request_id, file, text_color, grid_size, max_edge)
    except Exception as e:
        raise _to_http_error(e, request_id, "heatmap")
    return _respond(result.model_dump(), request_id, "heatmap", start_time)
