"""
Visualization utilities for layering results.

Figures are returned, never shown, so they work in notebooks and scripts.
"""

from typing import List, Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt

from ..data_loader.raster import RasterImage
from ..encoders import (
    color_layers_to_image,
    edge_map_to_image,
    layered_to_image,
    segmentation_to_image
)
from ..kmeans import ColorBasedLayerMap
from ..pipeline import PipelineResult


def _show(ax: plt.Axes, image: RasterImage, title: str) -> None:
    ax.imshow(image.to_array())
    ax.axis('off')
    ax.set_title(title, fontsize=12, pad=10)


def plot_segmentation_results(
    image: RasterImage,
    result: PipelineResult,
    figsize: Tuple[int, int] = (20, 5)
) -> plt.Figure:
    """
    One-row grid comparing the stages of a pipeline run.

    Panels:
    - Original photo
    - Binary edge map
    - Segments (mean colour per segment)
    - Merged layers (area-weighted colour per layer)
    - k-means colour layers, if the colour path ran

    Args:
        image: Photo the result was computed from
        result: Pipeline output
        figsize: Figure size (width, height) in inches

    Returns:
        fig: matplotlib Figure

    Example:
        >>> result = SegmentationPipeline().run(image)
        >>> fig = plot_segmentation_results(image, result)
        >>> fig.savefig('layers.png')
    """
    seg = result.segmentation
    panels: List[Tuple[RasterImage, str]] = [(image, 'Original')]

    if seg.edge_map is not None:
        edges = edge_map_to_image(seg.edge_map, seg.width, seg.height)
        panels.append((edges, 'Edges'))

    panels.append((segmentation_to_image(seg), f'Segments ({len(seg.segments)})'))
    panels.append((
        layered_to_image(result.layered),
        f'Merged layers ({len(result.layered.layers)})'
    ))

    if result.color_layers is not None:
        panels.append((
            color_layers_to_image(result.color_layers),
            f'Color layers (K={len(result.color_layers.layers)})'
        ))

    fig, axes = plt.subplots(1, len(panels), figsize=figsize)
    axes = np.atleast_1d(axes)

    for ax, (panel, title) in zip(axes, panels):
        _show(ax, panel, title)

    plt.tight_layout()

    return fig


def plot_color_distribution(
    color_map: ColorBasedLayerMap,
    ax: Optional[plt.Axes] = None,
    figsize: Tuple[int, int] = (8, 5)
) -> plt.Figure:
    """
    Bar chart of colour layer coverage, each bar drawn in its layer colour.

    Args:
        color_map: k-means colour layers
        ax: Axes to draw into. If None, a new figure is created
        figsize: Figure size when creating a new figure

    Returns:
        fig: Figure containing the chart
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    percentages = np.array([layer.ratio * 100 for layer in color_map.layers])
    colors = [np.array(layer.color) / 255.0 for layer in color_map.layers]
    x_pos = np.arange(len(color_map.layers))

    bars = ax.bar(x_pos, percentages, color=colors, edgecolor='black', linewidth=1.5)

    ax.set_xlabel('Layer', fontsize=10)
    ax.set_ylabel('Coverage (%)', fontsize=10)
    ax.set_title('Color layers', fontsize=12, pad=10)
    ax.set_xticks(x_pos)
    ax.set_xticklabels([layer.color.to_hex() for layer in color_map.layers], rotation=45)
    if len(percentages):
        ax.set_ylim(0, percentages.max() * 1.1)

    for bar, percentage in zip(bars, percentages):
        ax.text(
            bar.get_x() + bar.get_width() / 2.,
            bar.get_height(),
            f'{percentage:.1f}%',
            ha='center',
            va='bottom',
            fontsize=8
        )

    fig.tight_layout()

    return fig
