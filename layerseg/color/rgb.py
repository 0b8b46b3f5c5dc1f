"""
8-bit RGB colour value used for segment and layer representative colours.
"""

from typing import NamedTuple, Sequence
import numpy as np


class Rgb(NamedTuple):
    """sRGB colour with integer channels in [0, 255]."""
    r: int
    g: int
    b: int

    def to_hex(self) -> str:
        """'#rrggbb' notation."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def normalized(self) -> np.ndarray:
        """Channels scaled to [0, 1] as a float array of shape (3,)."""
        return np.array(self, dtype=np.float64) / 255.0


BLACK = Rgb(0, 0, 0)


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round to nearest integer, halves away from zero for positive input."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(np.int64)


def rgb_from_mean(values: Sequence[float]) -> Rgb:
    """
    Build an Rgb from (possibly fractional) channel means.

    Channels are rounded half-up and clamped to [0, 255].
    """
    r, g, b = np.clip(round_half_up(values), 0, 255)
    return Rgb(int(r), int(g), int(b))
