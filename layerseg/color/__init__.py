"""
Colour helpers: 8-bit RGB values and Oklab perceptual distance.
"""

from .rgb import Rgb, BLACK, round_half_up, rgb_from_mean
from .oklab import (
    srgb_to_linear,
    srgb_to_oklab,
    oklab_distance,
    perceptual_distance,
    pairwise_perceptual_distance
)

__all__ = [
    'Rgb',
    'BLACK',
    'round_half_up',
    'rgb_from_mean',
    'srgb_to_linear',
    'srgb_to_oklab',
    'oklab_distance',
    'perceptual_distance',
    'pairwise_perceptual_distance'
]
