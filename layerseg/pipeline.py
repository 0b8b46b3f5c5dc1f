"""
Layering pipeline: runs both paths on a photo.

Edge path:   Sobel edges -> flood fill -> edge reassignment -> colour merge
Colour path: k-means over raw pixels

Example:
    >>> from layerseg import SegmentationConfig, SegmentationPipeline, load_image
    >>> pipeline = SegmentationPipeline(SegmentationConfig(edge_threshold=40))
    >>> result = pipeline.run(load_image('photo.png'))
    >>> len(result.layered.layers), len(result.color_layers.layers)
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
import logging
import time

from .config import SegmentationConfig
from .data_loader.raster import RasterImage
from .kmeans import ColorBasedLayerMap, extract_color_layers
from .segmentation import (
    LayeredSegmentationMap,
    SegmentationMap,
    merge_segments_by_color,
    segment_image
)


logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outputs of one pipeline run."""
    segmentation: SegmentationMap
    layered: LayeredSegmentationMap
    color_layers: Optional[ColorBasedLayerMap] = None
    timings: Dict[str, float] = field(default_factory=dict)
    """Seconds spent per stage."""

    def __str__(self) -> str:
        color_count = len(self.color_layers.layers) if self.color_layers else 0
        total = sum(self.timings.values())
        return (
            f"PipelineResult(segments={len(self.segmentation.segments)}, "
            f"layers={len(self.layered.layers)}, "
            f"color_layers={color_count}, "
            f"time={total*1000:.1f}ms)"
        )


class SegmentationPipeline:
    """
    Runs the edge-based and k-means layering paths with one configuration.
    """

    def __init__(self, config: Optional[SegmentationConfig] = None):
        """
        Args:
            config: Pipeline configuration. If None, uses defaults.
        """
        self.config = config or SegmentationConfig()

    def segment(self, image: RasterImage) -> SegmentationMap:
        """Edge detection, flood fill and edge reassignment."""
        return segment_image(image, self.config.edge_threshold)

    def merge(self, segmentation: SegmentationMap) -> LayeredSegmentationMap:
        """Consolidate segments into colour layers."""
        return merge_segments_by_color(
            segmentation,
            color_threshold=self.config.color_threshold,
            min_area=self.config.min_area
        )

    def color_layers(self, image: RasterImage) -> ColorBasedLayerMap:
        """k-means colour layers."""
        return extract_color_layers(
            image,
            k=self.config.n_layers,
            random_state=self.config.random_state
        )

    def run(self, image: RasterImage) -> PipelineResult:
        """
        Run every enabled stage on ``image``.

        Args:
            image: Source photo

        Returns:
            result: PipelineResult with per-stage timings
        """
        timings = {}

        start = time.perf_counter()
        segmentation = self.segment(image)
        timings['segment'] = time.perf_counter() - start

        start = time.perf_counter()
        layered = self.merge(segmentation)
        timings['merge'] = time.perf_counter() - start

        color_map = None
        if self.config.run_color_layers:
            start = time.perf_counter()
            color_map = self.color_layers(image)
            timings['color_layers'] = time.perf_counter() - start

        result = PipelineResult(
            segmentation=segmentation,
            layered=layered,
            color_layers=color_map,
            timings=timings
        )

        logger.info(
            "Layered %dx%d image: %d segments -> %d layers in %.1fms",
            image.width, image.height, len(segmentation.segments),
            len(layered.layers), sum(timings.values()) * 1000
        )

        return result


def process_images_batch(
    images: Dict[str, RasterImage],
    config: Optional[SegmentationConfig] = None
) -> Dict[str, PipelineResult]:
    """
    Run the pipeline on a batch of images with one configuration.

    Args:
        images: {image_id: RasterImage}
        config: Shared configuration. If None, uses defaults.

    Returns:
        results: {image_id: PipelineResult}, same keys as ``images``
    """
    pipeline = SegmentationPipeline(config)
    results = {}

    for image_id, image in images.items():
        logger.info("Processing image '%s'", image_id)
        results[image_id] = pipeline.run(image)

    return results
