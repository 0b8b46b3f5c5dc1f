"""
Edge Pixel Reassignment

Closes the one-pixel gaps the edge barrier leaves between segments: each
edge pixel joins the neighbouring segment whose colour is closest to its
own, so the layers tile the image without seams.
"""

from typing import List
import numpy as np

from ..data_loader.raster import RasterImage
from .types import Segment, UNASSIGNED


# (dx, dy) scan order. The first neighbour with the strictly smallest
# distance wins, so ties resolve in this order.
NEIGHBORS_8 = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)


def assign_edge_pixels(
    labels: np.ndarray,
    edge_map: np.ndarray,
    image: RasterImage,
    segments: List[Segment]
) -> int:
    """
    Assign edge pixels to their closest-coloured neighbouring segment.

    Edge pixels are visited in raster order and the label buffer is updated
    as the scan goes, so an edge pixel resolved earlier counts as a labelled
    neighbour for the ones after it. Distances are squared RGB distances to
    the segment colours as they were before the scan; colours are not
    updated while segments grow.

    Args:
        labels: Flat int32 label buffer, mutated in place
        edge_map: Flat barrier map, non-zero = edge pixel
        image: Source image
        segments: Segments referenced by ``labels``; the chosen segment gets
                  the pixel appended and its area incremented

    Returns:
        orphans: Number of edge pixels left at -1 (no labelled neighbour)
    """
    width, height = image.width, image.height
    by_id = {seg.id: seg for seg in segments}
    colors = {seg.id: seg.color for seg in segments}

    rgb = image.pixels().tolist()
    labels_list = labels.tolist()
    orphans = 0

    for i in np.flatnonzero(edge_map).tolist():
        x = i % width
        y = i // width
        pr, pg, pb = rgb[i]

        best_label = UNASSIGNED
        best_dist = float('inf')

        for dx, dy in NEIGHBORS_8:
            nx = x + dx
            ny = y + dy
            if nx < 0 or nx >= width or ny < 0 or ny >= height:
                continue

            neighbor_label = labels_list[ny * width + nx]
            if neighbor_label < 0:
                continue

            color = colors.get(neighbor_label)
            if color is None:
                continue

            dr = pr - color.r
            dg = pg - color.g
            db = pb - color.b
            dist = dr * dr + dg * dg + db * db

            if dist < best_dist:
                best_dist = dist
                best_label = neighbor_label

        if best_label >= 0:
            labels_list[i] = best_label
            seg = by_id[best_label]
            seg.pixels.append(i)
            seg.area += 1
        else:
            orphans += 1

    labels[:] = labels_list
    return orphans
