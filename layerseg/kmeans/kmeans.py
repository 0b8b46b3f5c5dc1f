"""
K-Means Colour Clustering for Layer Extraction

Independent clustering path: groups raw pixels into K colour layers without
edge detection.

Speed over exactness: centroids are seeded by a farthest-point pass over
~1000 strided pixels and refined for a fixed 15 iterations on a strided
sample of ~20000 pixels. Only the final assignment looks at every pixel.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Union
import logging
import numpy as np
from sklearn.utils import check_random_state

from ..color import Rgb, rgb_from_mean
from ..data_loader.raster import RasterImage


logger = logging.getLogger(__name__)

RandomStateLike = Union[None, int, np.random.RandomState]


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class KMeansConfig:
    """
    Configuration for k-means colour clustering.
    """
    n_clusters: int = 6
    """Number of colour layers (k)."""

    n_iter: int = 15
    """Fixed number of refinement iterations. There is no convergence test."""

    init_sample_size: int = 1000
    """Approximate number of strided pixels scanned per farthest-point pick."""

    iteration_sample_size: int = 20000
    """Approximate number of strided pixels assigned per refinement iteration."""

    random_state: RandomStateLike = None
    """Seed or RandomState for the first centroid. None = unseeded."""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.n_clusters < 1:
            raise ValueError(f"n_clusters must be >= 1, got {self.n_clusters}")
        if self.n_iter < 1:
            raise ValueError(f"n_iter must be >= 1, got {self.n_iter}")
        if self.init_sample_size < 1:
            raise ValueError(f"init_sample_size must be >= 1, got {self.init_sample_size}")
        if self.iteration_sample_size < 1:
            raise ValueError(
                f"iteration_sample_size must be >= 1, got {self.iteration_sample_size}"
            )


# ============================================================================
# Results
# ============================================================================

@dataclass
class KMeansResult:
    """
    Results from k-means clustering, in centroid order (not yet sorted).
    """
    labels: np.ndarray
    """Cluster index of every pixel. Shape: (N,)"""

    centroids: np.ndarray
    """RGB centroids (float). Shape: (n_clusters, 3)"""

    counts: np.ndarray
    """Pixels assigned to each centroid. Shape: (n_clusters,)"""

    inertia: float
    """Sum of squared RGB distances of every pixel to its centroid."""

    n_iter: int
    """Refinement iterations run."""


@dataclass
class ColorBasedLayer:
    """One colour cluster."""
    id: int
    color: Rgb
    pixel_count: int
    ratio: float
    """pixel_count / total pixels."""


@dataclass
class ColorBasedLayerMap:
    """
    Colour layers plus the per-pixel layer id.

    Layers are sorted by pixel_count descending; ids are dense in that order.
    """
    labels: np.ndarray
    layers: List[ColorBasedLayer]
    width: int
    height: int

    def reshape_labels(self) -> np.ndarray:
        """Labels as (H, W)."""
        return self.labels.reshape(self.height, self.width)


# ============================================================================
# Abstract Base Class (Interface)
# ============================================================================

class BaseKMeans(ABC):
    """
    Abstract base class for k-means clustering implementations.

    All implementations:
    1. Accept pixel RGB values as an (N, 3) array
    2. Return KMeansResult with labels, centroids and counts
    3. Support the fit/predict/fit_predict interface
    """

    def __init__(self, config: KMeansConfig):
        """
        Initialize k-means clusterer.

        Args:
            config: Configuration parameters
        """
        self.config = config
        self._fitted = False
        self._centroids: Optional[np.ndarray] = None

    @property
    def centroids(self) -> np.ndarray:
        if not self._fitted:
            raise RuntimeError("Must call fit() before accessing centroids")
        return self._centroids

    @abstractmethod
    def fit(self, pixels: np.ndarray) -> 'BaseKMeans':
        """
        Fit k-means on pixel RGB values.

        Args:
            pixels: RGB values, shape (N, 3)

        Returns:
            self (for method chaining)
        """
        pass

    @abstractmethod
    def predict(self, pixels: np.ndarray) -> np.ndarray:
        """
        Predict cluster labels for pixels using fitted centroids.

        Raises:
            RuntimeError: If called before fit()
        """
        pass

    @abstractmethod
    def fit_predict(self, pixels: np.ndarray) -> KMeansResult:
        """Fit k-means and return complete results."""
        pass

    def compute_inertia(
        self,
        pixels: np.ndarray,
        labels: np.ndarray,
        centroids: Optional[np.ndarray] = None
    ) -> float:
        """
        Compute the k-means objective: sum of squared distances of each
        pixel to its assigned centroid.

        Args:
            pixels: RGB values, shape (N, 3)
            labels: Cluster assignments, shape (N,)
            centroids: Cluster centers, shape (K, 3). Defaults to the fitted ones

        Returns:
            inertia: Sum of squared distances
        """
        if centroids is None:
            centroids = self.centroids

        inertia = 0.0
        for k in range(len(centroids)):
            cluster_pixels = pixels[labels == k].astype(np.float64)
            if len(cluster_pixels) > 0:
                inertia += float(np.sum((cluster_pixels - centroids[k]) ** 2))

        return inertia


# ============================================================================
# Subsampled Implementation
# ============================================================================

def _nearest_centroid(pixels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Index of the nearest centroid (squared RGB distance) for each pixel.

    On equal distances the lower centroid index wins.
    """
    pixels = pixels.astype(np.float64)
    labels = np.zeros(len(pixels), dtype=np.int32)
    best = np.full(len(pixels), np.inf)

    for c, centroid in enumerate(centroids):
        dist = np.sum((pixels - centroid) ** 2, axis=1)
        closer = dist < best
        labels[closer] = c
        best[closer] = dist[closer]

    return labels


def _farthest_pixel(pixels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Pixel with the greatest minimum squared distance to ``centroids``,
    searched over every pixel (first maximum on ties).

    Only repeats a centroid when the image has no other colour left.
    """
    pixels = pixels.astype(np.float64)
    min_dist = np.full(len(pixels), np.inf)
    for centroid in centroids:
        min_dist = np.minimum(min_dist, np.sum((pixels - centroid) ** 2, axis=1))
    return pixels[int(np.argmax(min_dist))]


class ColorKMeans(BaseKMeans):
    """
    Subsampled k-means over RGB pixels.

    Algorithm:
    1. First centroid: a uniformly random pixel
    2. Each further centroid: the strided-sample pixel farthest (by minimum
       squared distance) from the centroids chosen so far; once the sample
       holds no new colour, the farthest pixel of the full image
    3. n_iter rounds of: assign a strided sample to the nearest centroid,
       move each centroid to the mean of its samples (empty ones stay put)
    4. Assign every pixel to its nearest centroid

    Example:
        >>> kmeans = ColorKMeans(KMeansConfig(n_clusters=4, random_state=0))
        >>> result = kmeans.fit_predict(image.pixels())
        >>> result.counts.sum() == image.pixel_count
        True
    """

    def _initialize_centroids(self, pixels: np.ndarray) -> np.ndarray:
        rng = check_random_state(self.config.random_state)
        n = len(pixels)
        k = self.config.n_clusters

        centroids = np.zeros((k, 3), dtype=np.float64)
        centroids[0] = pixels[rng.randint(n)]

        step = max(1, n // self.config.init_sample_size)
        sample = pixels[::step].astype(np.float64)
        min_dist = np.sum((sample - centroids[0]) ** 2, axis=1)

        for c in range(1, k):
            best = int(np.argmax(min_dist))
            if min_dist[best] > 0:
                centroids[c] = sample[best]
            else:
                # Every sampled colour is already a centroid
                centroids[c] = _farthest_pixel(pixels, centroids[:c])
            min_dist = np.minimum(min_dist, np.sum((sample - centroids[c]) ** 2, axis=1))

        return centroids

    def fit(self, pixels: np.ndarray) -> 'ColorKMeans':
        if pixels.ndim != 2 or pixels.shape[1] != 3:
            raise ValueError(f"pixels must have shape (N, 3), got {pixels.shape}")
        if len(pixels) == 0:
            raise ValueError("Cannot fit k-means on zero pixels")

        centroids = self._initialize_centroids(pixels)
        k = len(centroids)

        step = max(1, len(pixels) // self.config.iteration_sample_size)
        sample = pixels[::step].astype(np.float64)

        for _ in range(self.config.n_iter):
            labels = _nearest_centroid(sample, centroids)
            counts = np.bincount(labels, minlength=k)
            for c in np.flatnonzero(counts):
                centroids[c] = sample[labels == c].mean(axis=0)

        self._centroids = centroids
        self._fitted = True

        return self

    def predict(self, pixels: np.ndarray) -> np.ndarray:
        if not self._fitted:
            raise RuntimeError(
                "Must call fit() before predict(). "
                "Or use fit_predict() to do both."
            )
        return _nearest_centroid(pixels, self._centroids)

    def fit_predict(self, pixels: np.ndarray) -> KMeansResult:
        self.fit(pixels)
        labels = self.predict(pixels)

        return KMeansResult(
            labels=labels,
            centroids=self._centroids.copy(),
            counts=np.bincount(labels, minlength=len(self._centroids)),
            inertia=self.compute_inertia(pixels, labels),
            n_iter=self.config.n_iter
        )


# ============================================================================
# Helper Functions
# ============================================================================

def count_distinct_colors(pixels: np.ndarray) -> int:
    """Number of distinct RGB triples in an (N, 3) uint8 array."""
    packed = (
        (pixels[:, 0].astype(np.int32) << 16)
        | (pixels[:, 1].astype(np.int32) << 8)
        | pixels[:, 2].astype(np.int32)
    )
    return int(np.unique(packed).size)


def extract_color_layers(
    image: RasterImage,
    k: int = 6,
    random_state: RandomStateLike = None
) -> ColorBasedLayerMap:
    """
    Cluster an image's pixels into k colour layers.

    ``k`` is clamped to [1, number of distinct colours in the image], so
    seeding never repeats a colour. Clusters left without pixels after the
    final assignment are dropped, so every layer has pixel_count > 0 and
    there may be fewer than k layers. An image without pixels gives no
    layers.

    Args:
        image: Source image
        k: Requested number of layers
        random_state: Seed or RandomState; None gives unseeded results

    Returns:
        color_map: Layers sorted by pixel_count descending with dense ids,
                   and the matching per-pixel labels

    Example:
        >>> color_map = extract_color_layers(image, k=6, random_state=42)
        >>> sum(layer.ratio for layer in color_map.layers)  # ~1.0
    """
    pixel_count = image.pixel_count
    if pixel_count == 0:
        return ColorBasedLayerMap(
            labels=np.zeros(0, dtype=np.int32),
            layers=[],
            width=image.width,
            height=image.height
        )

    pixels = image.pixels()
    n_distinct = count_distinct_colors(pixels)
    n_clusters = min(max(k, 1), n_distinct)
    if n_clusters != k:
        logger.debug("Clamped k=%d to %d (%d distinct colours)", k, n_clusters, n_distinct)

    config = KMeansConfig(n_clusters=n_clusters, random_state=random_state)
    result = ColorKMeans(config).fit_predict(pixels)

    layers = [
        ColorBasedLayer(
            id=c,
            color=rgb_from_mean(result.centroids[c]),
            pixel_count=int(result.counts[c]),
            ratio=float(result.counts[c]) / pixel_count
        )
        for c in range(n_clusters)
        if result.counts[c] > 0
    ]

    # Largest first; ties keep centroid order
    layers.sort(key=lambda layer: -layer.pixel_count)
    remap = np.full(n_clusters, -1, dtype=np.int32)
    for new_id, layer in enumerate(layers):
        remap[layer.id] = new_id
        layer.id = new_id

    return ColorBasedLayerMap(
        labels=remap[result.labels],
        layers=layers,
        width=image.width,
        height=image.height
    )
