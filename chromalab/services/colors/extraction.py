"""
Dominant color extraction.

This module implements the k-means palette extraction pipeline: pixel
sampling, k-means++ seeding, and Lloyd iterations with perceptual (LAB)
distance. Runs are bounded by a hard iteration cap and are reproducible
for a given `random_state`.
"""

import time
import warnings
from typing import Callable, List, Optional, Union

import numpy as np
from loguru import logger
from sklearn.cluster import kmeans_plusplus
from sklearn.utils import check_random_state

from .conversion import Color, lab_to_rgb, rgb_to_lab_array
from .errors import ClusteringError, ConvergenceWarning, ExtractionCancelled
from .types import RGB, ClusterAssignment, ExtractionResult, as_pixel_buffer, opaque_rgb_samples

DEFAULT_MAX_ITER = 20
DEFAULT_TOLERANCE = 0.01  # max centroid shift in LAB units
DEFAULT_CHUNK_SIZE = 65536  # samples per assignment block

RandomStateLike = Optional[Union[int, np.random.RandomState]]


def sample_pixels(pixels, stride: int = 1) -> np.ndarray:
    """
    Sample opaque pixels from an image.

    Args:
        pixels: H x W x 3/4 image array
        stride: Keep every `stride`-th pixel in row-major order (values < 1 act as 1)

    Returns:
        RGB samples (N, 3) uint8

    Raises:
        ClusteringError: If the buffer is empty or fully transparent
    """
    buffer = as_pixel_buffer(pixels)
    if buffer.shape[0] == 0 or buffer.shape[1] == 0:
        raise ClusteringError("Empty pixel buffer")

    samples = opaque_rgb_samples(buffer, stride)
    if samples.shape[0] == 0:
        raise ClusteringError("No opaque pixels to cluster")

    logger.debug(f"Sampled {samples.shape[0]} pixels from {buffer.shape[1]}x{buffer.shape[0]} (stride={stride})")
    return samples


def assign_labels(samples_lab: np.ndarray, centers: np.ndarray,
                  chunk_size: int = DEFAULT_CHUNK_SIZE) -> np.ndarray:
    """Index of the nearest center (squared LAB distance) for every sample, computed in blocks."""
    labels = np.empty(samples_lab.shape[0], dtype=np.intp)
    step = max(1, int(chunk_size))
    for start in range(0, samples_lab.shape[0], step):
        block = samples_lab[start:start + step]
        distances = ((block[:, None, :] - centers[None, :, :]) ** 2).sum(axis=2)
        labels[start:start + step] = np.argmin(distances, axis=1)
    return labels


def extract_dominant_colors(pixels,
                            k: int = 5,
                            stride: int = 1,
                            max_iter: int = DEFAULT_MAX_ITER,
                            tolerance: float = DEFAULT_TOLERANCE,
                            random_state: RandomStateLike = None,
                            should_cancel: Optional[Callable[[], bool]] = None,
                            chunk_size: int = DEFAULT_CHUNK_SIZE) -> ExtractionResult:
    """
    Extract the k dominant colors of an image with k-means in LAB space.

    Args:
        pixels: H x W x 3/4 image array (alpha 0 pixels are ignored)
        k: Number of clusters
        stride: Sampling stride for large images
        max_iter: Hard iteration cap
        tolerance: Convergence threshold on the largest centroid shift (LAB units)
        random_state: Seed or RandomState for k-means++ seeding
        should_cancel: Polled between iterations; returning True aborts the run
        chunk_size: Samples per assignment block

    Returns:
        ExtractionResult with assignments sorted by percentage (descending).
        Clusters that end up empty are dropped.

    Raises:
        ClusteringError: If k < 1, the buffer has no usable pixels, or k
            exceeds the number of distinct sampled colors
        ExtractionCancelled: If `should_cancel` returns True
    """
    if k is None or int(k) < 1:
        raise ClusteringError(f"k must be at least 1, got {k}")
    k = int(k)
    max_iter = max(1, int(max_iter))

    samples = sample_pixels(pixels, stride)
    n_samples = samples.shape[0]
    logger.info(f"Starting clustering with k={k}, {n_samples} pixels")

    n_unique = np.unique(samples, axis=0).shape[0]
    if n_unique < k:
        raise ClusteringError(f"Insufficient unique colors: {n_unique} < {k}")

    start_time = time.time()
    samples_lab = rgb_to_lab_array(samples)
    rng = check_random_state(random_state)
    centers, _ = kmeans_plusplus(samples_lab, n_clusters=k, random_state=rng)
    centers = centers.astype(np.float64)

    converged = False
    iterations = 0
    labels = None
    for iteration in range(1, max_iter + 1):
        if should_cancel is not None and should_cancel():
            logger.info(f"Clustering cancelled before iteration {iteration}")
            raise ExtractionCancelled(f"Extraction cancelled after {iteration - 1} iterations")

        iterations = iteration
        labels = assign_labels(samples_lab, centers, chunk_size)

        updated = centers.copy()
        for cluster in range(k):
            members = samples_lab[labels == cluster]
            if members.shape[0]:
                updated[cluster] = members.mean(axis=0)

        shift = float(np.max(np.linalg.norm(updated - centers, axis=1)))
        centers = updated
        logger.debug(f"Iteration {iteration}: max centroid shift {shift:.5f}")
        if shift < tolerance:
            converged = True
            break

    messages: List[str] = []
    if not converged:
        message = f"k-means did not converge within {max_iter} iterations; returning best-effort centroids"
        messages.append(message)
        warnings.warn(message, ConvergenceWarning, stacklevel=2)
        logger.warning(message)

    counts = np.bincount(labels, minlength=k)
    assignments = []
    for cluster in range(k):
        if counts[cluster] == 0:
            logger.debug(f"Dropping empty cluster {cluster}")
            continue
        rgb = lab_to_rgb(centers[cluster])
        assignments.append(ClusterAssignment(
            color=Color(RGB(*rgb)),
            percentage=float(counts[cluster]) / n_samples * 100.0,
        ))

    # Stable sort keeps cluster index order for equal shares
    assignments.sort(key=lambda a: -a.percentage)

    duration_ms = (time.time() - start_time) * 1000
    shares = [f"{a.percentage:.1f}" for a in assignments]
    logger.info(f"Clustering finished in {iterations} iterations ({duration_ms:.1f}ms): {shares}")

    return ExtractionResult(
        assignments=tuple(assignments),
        iterations=iterations,
        converged=converged,
        sample_count=n_samples,
        warnings=tuple(messages),
    )
