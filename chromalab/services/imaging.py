"""
ChromaLab Imaging Utilities
Handles upload validation, decoding to RGBA pixel buffers, downscaling and
PNG encoding of processed images.
"""
import base64
import io
from typing import Optional, Tuple

import cv2
import numpy as np
from fastapi import HTTPException, UploadFile
from PIL import Image

from chromalab.config import config


def validate_file_upload(file: UploadFile) -> None:
    """
    Validate uploaded file metadata before reading it.

    Args:
        file: FastAPI UploadFile object

    Raises:
        HTTPException: 413 for oversized files, 415 for unsupported formats
    """
    # file.size may be None for some clients
    if getattr(file, "size", None) and file.size > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    if file.content_type not in config.SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    if file.filename and "." in file.filename:
        ext = "." + file.filename.lower().rsplit(".", 1)[-1]
        if ext not in config.SUPPORTED_EXTENSIONS:
            raise HTTPException(
                status_code=415,
                detail=f"Unsupported file extension. Supported: {', '.join(sorted(config.SUPPORTED_EXTENSIONS))}"
            )


def validate_magic_bytes(file_bytes: bytes) -> str:
    """
    Validate file magic bytes to ensure it's actually an image.

    Returns:
        Detected MIME type

    Raises:
        HTTPException: 400 for invalid/corrupt files
    """
    if len(file_bytes) < 8:
        raise HTTPException(status_code=400, detail="File too small or corrupt")

    if file_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if file_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    raise HTTPException(
        status_code=400,
        detail="Invalid image file. Magic bytes don't match supported formats."
    )


async def read_upload_bytes(file: UploadFile) -> bytes:
    """
    Read and validate an uploaded image.

    Raises:
        HTTPException: 400 for unreadable or non-image data, 413 when too large,
            415 for unsupported formats
    """
    validate_file_upload(file)
    try:
        file_bytes = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    validate_magic_bytes(file_bytes)
    return file_bytes


def decode_image_rgba(file_bytes: bytes) -> np.ndarray:
    """
    Decode image bytes to an H x W x 4 uint8 RGBA array.

    Raises:
        HTTPException: 400 when the bytes cannot be decoded
    """
    try:
        pil_image = Image.open(io.BytesIO(file_bytes))
        pil_image.load()
        if pil_image.mode != "RGBA":
            pil_image = pil_image.convert("RGBA")
        rgba = np.array(pil_image, dtype=np.uint8)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to decode image: {str(e)}")

    if rgba.ndim != 3 or rgba.shape[0] == 0 or rgba.shape[1] == 0:
        raise HTTPException(status_code=400, detail="Decoded image has no pixels")
    return rgba


def resize_long_edge(img: np.ndarray, max_edge: Optional[int] = None) -> np.ndarray:
    """
    Resize image so the longest edge is at most max_edge pixels.

    Args:
        img: Input image (any channel count)
        max_edge: Maximum edge size (default from config)

    Returns:
        Resized image, or the input unchanged when already small enough
    """
    if max_edge is None:
        max_edge = config.MAX_EDGE

    height, width = img.shape[:2]
    current_max = max(height, width)
    if current_max <= max_edge:
        return img

    scale = max_edge / current_max
    new_width = max(1, int(width * scale))
    new_height = max(1, int(height * scale))

    # INTER_AREA for downscaling
    return cv2.resize(img, (new_width, new_height), interpolation=cv2.INTER_AREA)


def encode_png_base64(rgba: np.ndarray) -> str:
    """Encode an RGBA array as a base64 PNG string."""
    bgra = cv2.cvtColor(np.ascontiguousarray(rgba), cv2.COLOR_RGBA2BGRA)
    success, buffer = cv2.imencode(".png", bgra)
    if not success:
        raise RuntimeError("Failed to encode image as PNG")
    return base64.b64encode(buffer.tobytes()).decode("ascii")


def get_image_dimensions(img: np.ndarray) -> Tuple[int, int]:
    """Return (width, height)."""
    height, width = img.shape[:2]
    return width, height
