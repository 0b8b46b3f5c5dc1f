"""
Edge-based segmentation module.

- region_labeler: flood fill of non-edge pixels into segments
- edge_assigner: hands edge pixels to the closest-coloured neighbour segment
- union_find: disjoint-set forest used by the merger
- merging: consolidation of segments into colour layers
"""

from .types import (
    UNASSIGNED,
    BoundingBox,
    Segment,
    SegmentationMap,
    LayerGroup,
    LayeredSegmentationMap
)
from .edge_assigner import assign_edge_pixels, NEIGHBORS_8
from .region_labeler import label_regions, segment_image
from .union_find import UnionFind
from .merging import merge_segments_by_color

__all__ = [
    'UNASSIGNED',
    'BoundingBox',
    'Segment',
    'SegmentationMap',
    'LayerGroup',
    'LayeredSegmentationMap',
    'assign_edge_pixels',
    'NEIGHBORS_8',
    'label_regions',
    'segment_image',
    'UnionFind',
    'merge_segments_by_color'
]
