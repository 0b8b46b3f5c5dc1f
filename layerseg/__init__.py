"""
layerseg - Photo to colour layer segmentation.

Splits a raster photo into colour-homogeneous layers for a stacked 3D
preview, along two independent paths:

- Edge-based: Sobel edges, flood fill under the edge barrier, edge pixel
  reassignment and Union-Find merging in Oklab space
- Colour-based: subsampled k-means over raw pixels
"""

from .config import SegmentationConfig
from .data_loader import RasterImage, load_image, save_image, load_config, save_config
from .edges import detect_edges, threshold_edges
from .segmentation import (
    SegmentationMap,
    LayeredSegmentationMap,
    segment_image,
    merge_segments_by_color
)
from .kmeans import ColorBasedLayerMap, extract_color_layers
from .pipeline import SegmentationPipeline, PipelineResult, process_images_batch

__version__ = "0.1.0"

__all__ = [
    'SegmentationConfig',
    'RasterImage',
    'load_image',
    'save_image',
    'load_config',
    'save_config',
    'detect_edges',
    'threshold_edges',
    'SegmentationMap',
    'LayeredSegmentationMap',
    'segment_image',
    'merge_segments_by_color',
    'ColorBasedLayerMap',
    'extract_color_layers',
    'SegmentationPipeline',
    'PipelineResult',
    'process_images_batch'
]
