"""
Result types of the edge-based segmentation path.

Label buffers are flat int32 arrays indexed by ``y * width + x``. A value
>= 0 is a segment (or layer) id, -1 means the pixel belongs to no segment.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np
from scipy import ndimage

from ..color import Rgb

UNASSIGNED = -1


@dataclass
class BoundingBox:
    """Axis-aligned pixel bounds, inclusive of both ends."""
    x: int
    y: int
    width: int
    height: int


@dataclass
class Segment:
    """
    One connected region of non-edge pixels.

    ``color`` is the mean colour of the flooded pixels. The edge assigner
    appends pixels and increments ``area`` without recomputing it.
    """
    id: int
    bounds: BoundingBox
    color: Rgb
    area: int
    pixels: List[int] = field(default_factory=list)
    """Flat pixel indices belonging to the segment."""


@dataclass
class SegmentationMap:
    """
    Segments plus a label buffer mapping every pixel to one of them.

    Invariant: sum of segment areas + count of -1 labels == width * height.
    """
    labels: np.ndarray
    segments: List[Segment]
    width: int
    height: int
    edge_map: Optional[np.ndarray] = None
    """Binary barrier map the segments were flooded around (visualization)."""

    def reshape_labels(self) -> np.ndarray:
        """Labels as (H, W)."""
        return self.labels.reshape(self.height, self.width)

    def unassigned_count(self) -> int:
        """Number of pixels labelled -1."""
        return int(np.count_nonzero(self.labels == UNASSIGNED))


@dataclass
class LayerGroup:
    """
    Union of segments merged into one colour layer.

    ``color`` is the area-weighted mean of the member colours.
    """
    id: int
    color: Rgb
    total_area: int
    source_segment_ids: List[int]
    segments: List[Segment] = field(default_factory=list)


@dataclass
class LayeredSegmentationMap:
    """
    Merged layers on top of the segmentation they were built from.

    ``layers`` is sorted by ``total_area`` descending and ``layer_labels``
    holds the dense layer ids in that order.
    """
    base: SegmentationMap
    layers: List[LayerGroup]
    layer_labels: np.ndarray

    @property
    def width(self) -> int:
        return self.base.width

    @property
    def height(self) -> int:
        return self.base.height

    def reshape_labels(self) -> np.ndarray:
        """Layer labels as (H, W)."""
        return self.layer_labels.reshape(self.height, self.width)

    def to_segmentation_map(self) -> SegmentationMap:
        """
        Flatten the layers into a new SegmentationMap.

        Each layer becomes one Segment with the layer's id, colour and area.
        Bounds and pixel lists are recomputed from ``layer_labels``. The
        result can be passed back to the merger.
        """
        labels = self.layer_labels.astype(np.int32, copy=True)
        segments = []

        slices = ndimage.find_objects(
            (labels + 1).reshape(self.height, self.width),
            max_label=len(self.layers)
        )
        order = np.argsort(labels, kind='stable')
        counts = np.bincount(labels[labels >= 0], minlength=len(self.layers))
        starts = np.searchsorted(labels[order], np.arange(len(self.layers)))

        for layer in self.layers:
            member_pixels = order[starts[layer.id]:starts[layer.id] + counts[layer.id]]
            bounds = _bounds_from_slice(slices[layer.id])
            segments.append(Segment(
                id=layer.id,
                bounds=bounds,
                color=layer.color,
                area=layer.total_area,
                pixels=member_pixels.tolist()
            ))

        return SegmentationMap(
            labels=labels,
            segments=segments,
            width=self.width,
            height=self.height,
            edge_map=self.base.edge_map
        )


def _bounds_from_slice(region) -> BoundingBox:
    """BoundingBox from a find_objects slice pair (None -> empty box)."""
    if region is None:
        return BoundingBox(0, 0, 0, 0)
    rows, cols = region
    return BoundingBox(
        x=int(cols.start),
        y=int(rows.start),
        width=int(cols.stop - cols.start),
        height=int(rows.stop - rows.start)
    )
