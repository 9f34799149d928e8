"""
ChromaLab API Schemas
Pydantic models for color, brand, extraction, gradient map and heatmap
request/response validation.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("chromalab", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


# ============================================================================
# COLOR SCHEMAS
# ============================================================================

class ColorInfo(BaseModel):
    """All representations of one parsed color."""
    hex: str = Field(..., pattern=r"^#[0-9a-f]{6}$", description="Lowercase #rrggbb")
    rgb: List[int] = Field(..., min_length=3, max_length=3)
    hsl: List[int] = Field(..., min_length=3, max_length=3, description="Hue degrees, saturation and lightness percent")
    lab: List[float] = Field(..., min_length=3, max_length=3, description="CIE L*a*b* (D65)")
    lch: List[float] = Field(..., min_length=3, max_length=3)
    alpha: float = Field(1.0, ge=0.0, le=1.0)


class ParseResponse(BaseModel):
    """Parsed color plus CSS-style formatted strings."""
    color: ColorInfo
    formats: Dict[str, str] = Field(..., description="hex, rgb, hsl, lab and lch strings")


class ColorEntry(BaseModel):
    """Single color in a palette with its share."""
    hex: str = Field(..., pattern=r"^#[0-9a-f]{6}$", description="Lowercase #rrggbb")
    rgb: List[int] = Field(..., min_length=3, max_length=3)
    percentage: float = Field(..., ge=0.0, le=100.0, description="Share of the palette in percent")
    cluster: Optional[str] = Field(None, description="primary, secondary, accent or neutral")
    tone: Optional[str] = Field(None, description="light, mid or dark")
    family: Optional[str] = Field(None, description="warm, cold, neutral, vibrant, pastel or earth")


class BrandAnalyzeRequest(BaseModel):
    """Brand palette to bucketize, given explicitly or by predefined brand name."""
    colors: Optional[List[str]] = Field(None, min_length=1, max_length=32, description="Colors in any accepted CSS form")
    brand: Optional[str] = Field(None, min_length=1, description="Predefined brand name, e.g. \"Spotify\"")

    @field_validator("colors")
    @classmethod
    def validate_colors(cls, v):
        if v is None:
            return v
        if any(not c or not c.strip() for c in v):
            raise ValueError("colors must not contain empty strings")
        return [c.strip() for c in v]

    @model_validator(mode="after")
    def validate_source(self):
        if (self.colors is None) == (self.brand is None):
            raise ValueError("provide exactly one of colors or brand")
        return self


class BrandAnalyzeResponse(BaseModel):
    brand: Optional[str] = None
    colors: List[ColorEntry]
    characteristics: Dict[str, Any]
    harmony: Dict[str, Any]
    descriptions: Dict[str, Any]


# ============================================================================
# IMAGE SCHEMAS
# ============================================================================

class ExtractResponse(BaseModel):
    """Dominant colors of an uploaded image."""
    request_id: str
    width: int = Field(..., description="Processed image width in pixels")
    height: int = Field(..., description="Processed image height in pixels")
    k: int
    colors: List[ColorEntry] = Field(..., description="Colors sorted by share, descending")
    iterations: int
    converged: bool
    sample_count: int
    warnings: List[str] = Field(default_factory=list)
    groups: Dict[str, List[str]] = Field(default_factory=dict, description="Hex colors by tone and by family")
    cached: bool = Field(False, description="Whether the result came from the extraction cache")
    swatch_png_b64: Optional[str] = Field(None, description="Base64 PNG strip of the palette")
    processing_time_ms: float


class GradientStopModel(BaseModel):
    position: float = Field(..., description="Stop position; clamped to [0, 1]")
    color: str = Field(..., min_length=1, description="Stop color in any accepted CSS form")


class GradientMapResponse(BaseModel):
    """Recolored image."""
    request_id: str
    width: int
    height: int
    blend_mode: str
    intensity: float
    use_lab: bool
    stops: List[GradientStopModel] = Field(..., description="Normalized (clamped, sorted) stops")
    image_png_b64: str = Field(..., description="Base64-encoded RGBA PNG")
    processing_time_ms: float


class HeatmapCellModel(BaseModel):
    row: int
    col: int
    level: str = Field(..., description="low, medium or high")
    ratio: float
    rgb: List[int] = Field(..., min_length=3, max_length=3)


class HeatmapResponse(BaseModel):
    """Text readability grid over an uploaded image."""
    request_id: str
    width: int
    height: int
    grid_size: int
    text_color: str
    cells: List[List[HeatmapCellModel]]
    summary: Dict[str, Any]
    processing_time_ms: float
