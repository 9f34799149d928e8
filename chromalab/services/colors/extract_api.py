"""
Image Endpoint Handlers

Coordinates the image pipelines behind the HTTP layer: upload validation,
decoding, downscaling, the engine call (run in Starlette's threadpool),
caching and response assembly. Engine errors propagate to the router,
which maps them to HTTP status codes.
"""

import time
from typing import Any, Dict, List, Optional

from fastapi import UploadFile
from pydantic import TypeAdapter
from starlette.concurrency import run_in_threadpool

from chromalab.config import config
from chromalab.schemas import (
    ExtractResponse, GradientMapResponse, GradientStopModel, HeatmapResponse,
)
from chromalab.services.cache import get_extraction_cache
from chromalab.services.colors.contrast import contrast_heatmap, heatmap_summary
from chromalab.services.colors.conversion import as_color
from chromalab.services.colors.errors import RangeError
from chromalab.services.colors.extraction import extract_dominant_colors
from chromalab.services.colors.gradient_map import BlendMode, apply_gradient_map, make_stops, preset_stops
from chromalab.services.colors.naming import classify_color, group_colors
from chromalab.services.colors.swatches import render_palette_strip
from chromalab.services.fingerprint import compute_sha256
from chromalab.services.imaging import (
    decode_image_rgba, encode_png_base64, get_image_dimensions, read_upload_bytes, resize_long_edge,
)
from chromalab.utils.logging import get_logger
from chromalab.utils.metrics import get_metrics

logger = get_logger()

_STOPS_ADAPTER = TypeAdapter(List[GradientStopModel])


def _elapsed_ms(start_time: float) -> float:
    return round((time.time() - start_time) * 1000, 2)


async def handle_extract(request_id: str,
                         file: UploadFile,
                         k: int,
                         stride: int = 1,
                         seed: Optional[int] = None,
                         max_edge: Optional[int] = None,
                         include_swatch: bool = True) -> ExtractResponse:
    """
    Extract dominant colors from an uploaded image.

    Results are cached by image content hash and run parameters when a seed
    is given; unseeded runs are not reproducible and skip the cache.

    Raises:
        HTTPException: For upload problems (400/413/415)
        ClusteringError: When the image cannot be clustered with this k
        ExtractionCancelled: When the run exceeds the extraction timeout
    """
    start_time = time.time()
    metrics = get_metrics()
    max_edge = max_edge or config.MAX_EDGE

    file_bytes = await read_upload_bytes(file)
    sha256 = compute_sha256(file_bytes)
    cache = get_extraction_cache()
    use_cache = config.CACHE_ENABLED and seed is not None

    cached = cache.get(sha256, k, stride, seed, max_edge) if use_cache else None
    if use_cache:
        metrics.increment_cache(cached is not None)

    if cached is not None:
        logger.info("Extraction served from cache", extra={"request_id": request_id, "sha256": sha256[:12]})
        payload = dict(cached)
        if not include_swatch:
            payload["swatch_png_b64"] = None
        return ExtractResponse(
            request_id=request_id,
            cached=True,
            processing_time_ms=_elapsed_ms(start_time),
            **payload,
        )

    rgba = resize_long_edge(decode_image_rgba(file_bytes), max_edge)
    width, height = get_image_dimensions(rgba)
    logger.info(f"Extracting k={k} from {width}x{height} image",
                extra={"request_id": request_id, "stride": stride, "seed": seed})

    deadline = start_time + config.TIMEOUT_EXTRACTION_MS / 1000.0
    cluster_start = time.time()
    result = await run_in_threadpool(
        extract_dominant_colors,
        rgba,
        k=k,
        stride=stride,
        max_iter=config.MAX_ITER,
        random_state=seed,
        should_cancel=lambda: time.time() > deadline,
    )
    metrics.record_timing("kmeans", _elapsed_ms(cluster_start))
    if not result.converged:
        metrics.increment_convergence_warning()

    swatch = render_palette_strip(result.assignments) if result.assignments else None
    payload: Dict[str, Any] = {
        "width": width,
        "height": height,
        "k": k,
        "swatch_png_b64": swatch,
        **result.to_dict(),
    }
    for entry, assignment in zip(payload["colors"], result.assignments):
        entry.update(classify_color(assignment.color))
    payload["groups"] = group_colors([a.color for a in result.assignments])
    if use_cache:
        cache.set(sha256, k, stride, seed, max_edge, payload)

    response_payload = dict(payload)
    if not include_swatch:
        response_payload["swatch_png_b64"] = None
    logger.info(f"Extraction complete: {len(result.assignments)} colors in {result.iterations} iterations",
                extra={"request_id": request_id, "converged": result.converged})
    return ExtractResponse(
        request_id=request_id,
        cached=False,
        processing_time_ms=_elapsed_ms(start_time),
        **response_payload,
    )


def resolve_stops(stops_json: Optional[str], preset: Optional[str]):
    """
    Gradient stops from a JSON list or a named preset.

    Raises:
        ValueError: If neither (or both) are given, the JSON is invalid, a
            color does not parse, or the preset is unknown
    """
    if stops_json and preset:
        raise ValueError("Provide either 'stops' or 'preset', not both")
    if preset:
        return preset_stops(preset)
    if not stops_json:
        raise ValueError("Provide gradient 'stops' or a 'preset' name")
    models = _STOPS_ADAPTER.validate_json(stops_json)
    return make_stops([(m.position, m.color) for m in models])


async def handle_gradient_map(request_id: str,
                              file: UploadFile,
                              stops_json: Optional[str],
                              preset: Optional[str],
                              intensity: float,
                              blend_mode: str,
                              use_lab: bool,
                              max_edge: Optional[int] = None) -> GradientMapResponse:
    """Recolor an uploaded image through a gradient ramp and return it as a PNG."""
    start_time = time.time()
    mode = BlendMode(blend_mode)
    stops = resolve_stops(stops_json, preset)

    file_bytes = await read_upload_bytes(file)
    rgba = resize_long_edge(decode_image_rgba(file_bytes), max_edge or config.MAX_EDGE)
    width, height = get_image_dimensions(rgba)
    logger.info(f"Gradient map on {width}x{height} image: {len(stops)} stops, mode={mode.value}",
                extra={"request_id": request_id, "intensity": intensity, "use_lab": use_lab})

    mapped = await run_in_threadpool(
        apply_gradient_map, rgba, stops, intensity, mode, use_lab, config.CHUNK_ROWS,
    )
    image_b64 = await run_in_threadpool(encode_png_base64, mapped)
    get_metrics().record_timing("gradient_map", _elapsed_ms(start_time))

    return GradientMapResponse(
        request_id=request_id,
        width=width,
        height=height,
        blend_mode=mode.value,
        intensity=min(1.0, max(0.0, intensity)),
        use_lab=use_lab,
        stops=[GradientStopModel(position=s.position, color=s.color.hex) for s in stops],
        image_png_b64=image_b64,
        processing_time_ms=_elapsed_ms(start_time),
    )


async def handle_heatmap(request_id: str,
                         file: UploadFile,
                         text_color: str,
                         grid_size: int,
                         max_edge: Optional[int] = None) -> HeatmapResponse:
    """Grade text readability over each grid cell of an uploaded image."""
    start_time = time.time()
    color = as_color(text_color)
    if not config.validate_grid_size(grid_size):
        raise RangeError(f"grid_size must be between 1 and {config.MAX_GRID_SIZE}, got {grid_size}")

    file_bytes = await read_upload_bytes(file)
    rgba = resize_long_edge(decode_image_rgba(file_bytes), max_edge or config.MAX_EDGE)
    width, height = get_image_dimensions(rgba)

    grid = await run_in_threadpool(contrast_heatmap, rgba, color, grid_size)
    get_metrics().record_timing("heatmap", _elapsed_ms(start_time))
    logger.info(f"Heatmap {len(grid)} rows for text {color.hex}", extra={"request_id": request_id})

    return HeatmapResponse(
        request_id=request_id,
        width=width,
        height=height,
        grid_size=grid_size,
        text_color=color.hex,
        cells=[[cell.to_dict() for cell in row] for row in grid],
        summary=heatmap_summary(grid),
        processing_time_ms=_elapsed_ms(start_time),
    )
