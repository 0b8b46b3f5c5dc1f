"""
Sobel Edge Detection for Region Barriers

Stage 1 of the edge-based layering pipeline.

Computes a per-pixel gradient magnitude on the luminance channel and
thresholds it into a binary barrier map. The flood fill in the region
labeler never crosses a barrier pixel, so the threshold directly controls
how many regions the photo is split into.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import logging
import numpy as np
import cv2

from ..data_loader.raster import RasterImage


logger = logging.getLogger(__name__)

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])

EDGE_VALUE = 255


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class SobelConfig:
    """
    Configuration for Sobel edge detection.
    """
    threshold: int = 30
    """Gradient magnitude at or above which a pixel is an edge. Range [0, 255]."""

    def __post_init__(self):
        """Validate configuration parameters."""
        if not 0 <= self.threshold <= 255:
            raise ValueError(f"threshold must be in [0, 255], got {self.threshold}")


# ============================================================================
# Results
# ============================================================================

@dataclass
class EdgeDetectionResult:
    """
    Results from edge detection.

    Contains the binary edge map and optionally the intensity map it was
    thresholded from.
    """
    edges: np.ndarray
    """Binary edge map. Shape: (H*W,), values {0, 255}"""

    width: int
    height: int

    magnitude: Optional[np.ndarray] = None
    """Gradient magnitude before thresholding. Shape: (H*W,), values [0, 255]"""

    def get_edge_count(self) -> int:
        """
        Get number of edge pixels.

        Returns:
            count: Number of non-zero pixels in edge map
        """
        return int(np.count_nonzero(self.edges))

    def get_edge_density(self) -> float:
        """
        Get edge density (fraction of image that is edges).

        Returns:
            density: Edge pixel count / total pixels, 0.0 for an empty image
        """
        if self.edges.size == 0:
            return 0.0
        return self.get_edge_count() / self.edges.size

    def reshape_edges(self) -> np.ndarray:
        """Edge map as (H, W)."""
        return self.edges.reshape(self.height, self.width)


# ============================================================================
# Functional API
# ============================================================================

def luminance(image: RasterImage) -> np.ndarray:
    """
    Per-pixel luminance 0.299R + 0.587G + 0.114B.

    Args:
        image: Source image

    Returns:
        luma: float64 array of shape (H, W)
    """
    return image.rgb.astype(np.float64) @ LUMA_WEIGHTS


def detect_edges(image: RasterImage) -> np.ndarray:
    """
    Sobel gradient magnitude of the luminance field.

    The 3x3 kernels are only evaluated where the full neighbourhood exists:
    the one-pixel border is always 0. Magnitudes are clamped to [0, 255] and
    truncated to uint8.

    Args:
        image: Source image

    Returns:
        edge_map: uint8 intensity map, shape (H*W,)
    """
    w, h = image.width, image.height
    magnitude = np.zeros((h, w), dtype=np.uint8)

    if w < 3 or h < 3:
        return magnitude.reshape(-1)

    luma = luminance(image)
    gx = cv2.Sobel(luma, cv2.CV_64F, 1, 0, ksize=3)
    gy = cv2.Sobel(luma, cv2.CV_64F, 0, 1, ksize=3)

    interior = np.sqrt(gx[1:-1, 1:-1] ** 2 + gy[1:-1, 1:-1] ** 2)
    magnitude[1:-1, 1:-1] = np.clip(interior, 0, 255).astype(np.uint8)

    return magnitude.reshape(-1)


def threshold_edges(edge_map: np.ndarray, threshold: float) -> np.ndarray:
    """
    Binarize an intensity edge map.

    Args:
        edge_map: Intensity map, values [0, 255]
        threshold: Pixels >= threshold become edges

    Returns:
        binary: uint8 map with values {0, 255}, same shape as edge_map
    """
    return np.where(edge_map >= threshold, EDGE_VALUE, 0).astype(np.uint8)


# ============================================================================
# Abstract Base Class (Interface)
# ============================================================================

class BaseEdgeDetector(ABC):
    """
    Abstract base class for edge detection implementations.

    Implementations turn an RGBA raster into a binary barrier map that the
    region labeler floods around.
    """

    def __init__(self, config: SobelConfig):
        """
        Initialize edge detector.

        Args:
            config: Configuration parameters
        """
        self.config = config

    @abstractmethod
    def detect_edges(
        self,
        image: RasterImage,
        return_intermediates: bool = False
    ) -> EdgeDetectionResult:
        """
        Detect edges in an image.

        Args:
            image: Source image
            return_intermediates: Whether to keep the intensity map

        Returns:
            result: EdgeDetectionResult with binary edge map
        """
        pass


# ============================================================================
# Sobel Implementation
# ============================================================================

class SobelEdgeDetector(BaseEdgeDetector):
    """
    Sobel gradient-magnitude edge detection with a fixed threshold.

    Algorithm:
    1. Convert RGB to luminance
    2. Convolve with the 3x3 horizontal and vertical Sobel kernels
    3. Magnitude sqrt(gx^2 + gy^2), clamped to [0, 255], border left at 0
    4. Threshold: >= threshold -> 255, else 0

    Example:
        >>> detector = SobelEdgeDetector(SobelConfig(threshold=30))
        >>> result = detector.detect_edges(image)
        >>> barrier = result.edges  # flat binary map
    """

    def detect_edges(
        self,
        image: RasterImage,
        return_intermediates: bool = False
    ) -> EdgeDetectionResult:
        magnitude = detect_edges(image)
        edges = threshold_edges(magnitude, self.config.threshold)

        result = EdgeDetectionResult(
            edges=edges,
            width=image.width,
            height=image.height,
            magnitude=magnitude if return_intermediates else None
        )

        logger.debug(
            "Sobel edges: %d px (%.2f%%) at threshold %d",
            result.get_edge_count(), result.get_edge_density() * 100,
            self.config.threshold
        )

        return result
