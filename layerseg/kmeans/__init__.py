"""
K-Means colour clustering module for layer extraction.
"""

from .kmeans import (
    KMeansConfig,
    KMeansResult,
    ColorBasedLayer,
    ColorBasedLayerMap,
    BaseKMeans,
    ColorKMeans,
    count_distinct_colors,
    extract_color_layers
)

__all__ = [
    'KMeansConfig',
    'KMeansResult',
    'ColorBasedLayer',
    'ColorBasedLayerMap',
    'BaseKMeans',
    'ColorKMeans',
    'count_distinct_colors',
    'extract_color_layers'
]
