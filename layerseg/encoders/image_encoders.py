"""
Label buffer and edge map encoders.

Turn pipeline outputs back into RGBA rasters for display: flat colour fills
per segment/layer, grayscale edge maps, edge overlays on the source photo,
and single layers cut out of the photo for the stacked preview.
"""

from typing import Sequence, Tuple
import numpy as np

from ..color import BLACK, Rgb
from ..data_loader.raster import RasterImage
from ..kmeans import ColorBasedLayerMap
from ..segmentation import LayeredSegmentationMap, SegmentationMap


EDGE_HIGHLIGHT = (255, 0, 0)


def _rgba_from_rgb(rgb: np.ndarray, width: int, height: int) -> RasterImage:
    """Opaque RasterImage from an (N, 3) uint8 array."""
    rgba = np.empty((width * height, 4), dtype=np.uint8)
    rgba[:, :3] = rgb
    rgba[:, 3] = 255
    return RasterImage(width=width, height=height, data=rgba.reshape(-1))


def labels_to_image(
    labels: np.ndarray,
    colors: Sequence[Rgb],
    width: int,
    height: int
) -> RasterImage:
    """
    Fill every pixel with the colour of its label.

    Args:
        labels: Flat label buffer; values index into ``colors`` or are -1
        colors: Colour per label id
        width: Image width
        height: Image height

    Returns:
        image: Opaque RGBA image; -1 pixels are black

    Raises:
        IndexError: If a label is >= len(colors)
    """
    labels = np.asarray(labels)
    palette = np.array(list(colors), dtype=np.uint8).reshape(-1, 3)

    rgb = np.empty((labels.size, 3), dtype=np.uint8)
    rgb[:] = BLACK
    assigned = labels >= 0
    rgb[assigned] = palette[labels[assigned]]
    return _rgba_from_rgb(rgb, width, height)


def segmentation_to_image(seg_map: SegmentationMap, mark_edges: bool = False) -> RasterImage:
    """
    Paint each segment with its representative colour.

    Args:
        seg_map: Segmentation to render
        mark_edges: Paint every pixel of the barrier map black, even ones
                    the edge assigner has since handed to a segment

    Returns:
        image: Opaque RGBA image
    """
    colors = [BLACK] * len(seg_map.segments)
    for seg in seg_map.segments:
        colors[seg.id] = seg.color

    image = labels_to_image(seg_map.labels, colors, seg_map.width, seg_map.height)

    if mark_edges and seg_map.edge_map is not None:
        image.data.reshape(-1, 4)[seg_map.edge_map > 0, :3] = BLACK

    return image


def layered_to_image(layered: LayeredSegmentationMap) -> RasterImage:
    """Paint each merged layer with its area-weighted colour."""
    colors = [layer.color for layer in layered.layers]
    return labels_to_image(layered.layer_labels, colors, layered.width, layered.height)


def color_layers_to_image(color_map: ColorBasedLayerMap) -> RasterImage:
    """Posterized image: every pixel painted with its cluster colour."""
    colors = [layer.color for layer in color_map.layers]
    return labels_to_image(color_map.labels, colors, color_map.width, color_map.height)


def edge_map_to_image(edge_map: np.ndarray, width: int, height: int) -> RasterImage:
    """Render an intensity or binary edge map as an opaque grayscale image."""
    gray = np.asarray(edge_map, dtype=np.uint8)
    return _rgba_from_rgb(np.repeat(gray[:, None], 3, axis=1), width, height)


def overlay_edges(
    image: RasterImage,
    edge_map: np.ndarray,
    color: Tuple[int, int, int] = EDGE_HIGHLIGHT
) -> RasterImage:
    """
    Copy of ``image`` with edge pixels painted in a highlight colour.

    Alpha is copied from the source.
    """
    data = image.data.copy()
    data.reshape(-1, 4)[np.asarray(edge_map) > 0, :3] = color
    return RasterImage(width=image.width, height=image.height, data=data)


def layer_to_image(
    labels: np.ndarray,
    layer_id: int,
    source: RasterImage
) -> RasterImage:
    """
    Cut a single layer out of the source photo.

    Pixels of the layer keep their source RGB and are opaque; everything
    else is fully transparent black.

    Args:
        labels: Flat layer label buffer matching ``source``
        layer_id: Layer to isolate
        source: Photo the labels were computed from

    Returns:
        image: RGBA image of the layer alone
    """
    mask = np.asarray(labels) == layer_id
    rgba = np.zeros((source.pixel_count, 4), dtype=np.uint8)
    rgba[mask, :3] = source.pixels()[mask]
    rgba[mask, 3] = 255
    return RasterImage(width=source.width, height=source.height, data=rgba.reshape(-1))
