"""
Image and JSON IO.

- raster: RasterImage container, image file load/save (Pillow)
- json_loader: configuration and layer summary persistence
"""

from .raster import RasterImage, load_image, save_image
from .json_loader import save_config, load_config, layer_summary, export_layer_summary

__all__ = [
    'RasterImage',
    'load_image',
    'save_image',
    'save_config',
    'load_config',
    'layer_summary',
    'export_layer_summary'
]
