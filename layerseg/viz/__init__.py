"""
Visualization of layering results (matplotlib).
"""

from .layer_grid import plot_segmentation_results, plot_color_distribution

__all__ = ['plot_segmentation_results', 'plot_color_distribution']
