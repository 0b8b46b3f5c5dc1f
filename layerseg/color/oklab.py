"""
Oklab perceptual colour distance.

Only the conversion needed by segment merging lives here: sRGB (gamma
encoded, [0, 1]) to linear RGB, linear RGB to LMS, cube root, LMS' to Oklab.
Distances are plain Euclidean distances in Oklab, where ~0.02 is a just
noticeable difference and 0.1 separates clearly distinct colours.

Reference: Björn Ottosson, "A perceptual color space for image processing" (2020).
"""

from typing import Sequence
import numpy as np

from .rgb import Rgb


_LINEAR_RGB_TO_LMS = np.array([
    [0.4122214708, 0.5363325363, 0.0514459929],
    [0.2119034982, 0.6806995451, 0.1073969566],
    [0.0883024619, 0.2817188376, 0.6299787005],
])

_LMS_TO_OKLAB = np.array([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660],
])


def srgb_to_linear(c: np.ndarray) -> np.ndarray:
    """Gamma expansion of sRGB channel values in [0, 1]."""
    c = np.asarray(c, dtype=np.float64)
    return np.where(c <= 0.04045, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)


def srgb_to_oklab(srgb: np.ndarray) -> np.ndarray:
    """
    Convert sRGB colours to Oklab.

    Args:
        srgb: Array of shape (..., 3) with channels in [0, 1]

    Returns:
        oklab: Array of shape (..., 3) holding (L, a, b)
    """
    linear = srgb_to_linear(srgb)
    lms = linear @ _LINEAR_RGB_TO_LMS.T
    lms_ = np.cbrt(lms)
    return lms_ @ _LMS_TO_OKLAB.T


def oklab_distance(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Euclidean distance between Oklab colours (broadcasts over leading axes)."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return np.sqrt(np.sum(diff * diff, axis=-1))


def perceptual_distance(color_a: Sequence[int], color_b: Sequence[int]) -> float:
    """
    Perceptual distance between two 8-bit sRGB colours.

    Args:
        color_a: (r, g, b) with channels in [0, 255]
        color_b: (r, g, b) with channels in [0, 255]

    Returns:
        distance: Oklab Delta E, 0 for identical colours

    Example:
        >>> perceptual_distance(Rgb(255, 0, 0), Rgb(250, 5, 5)) < 0.05
        True
    """
    lab = srgb_to_oklab(np.array([color_a, color_b], dtype=np.float64) / 255.0)
    return float(oklab_distance(lab[0], lab[1]))


def pairwise_perceptual_distance(colors: Sequence[Rgb]) -> np.ndarray:
    """
    All-pairs perceptual distance matrix.

    Args:
        colors: n colours with channels in [0, 255]

    Returns:
        distances: Symmetric (n, n) float64 matrix with a zero diagonal
    """
    if len(colors) == 0:
        return np.zeros((0, 0), dtype=np.float64)

    lab = srgb_to_oklab(np.asarray(colors, dtype=np.float64) / 255.0)
    return oklab_distance(lab[:, None, :], lab[None, :, :])
