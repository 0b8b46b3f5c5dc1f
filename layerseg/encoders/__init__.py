"""
Encoders from label buffers and edge maps to displayable RGBA images.
"""

from .image_encoders import (
    EDGE_HIGHLIGHT,
    labels_to_image,
    segmentation_to_image,
    layered_to_image,
    color_layers_to_image,
    edge_map_to_image,
    overlay_edges,
    layer_to_image
)

__all__ = [
    'EDGE_HIGHLIGHT',
    'labels_to_image',
    'segmentation_to_image',
    'layered_to_image',
    'color_layers_to_image',
    'edge_map_to_image',
    'overlay_edges',
    'layer_to_image'
]
