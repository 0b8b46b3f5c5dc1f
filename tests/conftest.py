"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from layerseg.color import Rgb
from layerseg.data_loader import RasterImage
from layerseg.segmentation import BoundingBox, Segment, SegmentationMap


SOLID = (90, 140, 200)
RED = (200, 0, 0)
BLUE = (0, 0, 100)


def make_image(rgb: np.ndarray) -> RasterImage:
    """RasterImage from an (H, W, 3) integer array."""
    return RasterImage.from_array(np.asarray(rgb, dtype=np.uint8))


def split_rgb(width: int, height: int, left=RED, right=BLUE, split: int | None = None) -> np.ndarray:
    """Two flat colours side by side, boundary at column ``split``."""
    split = width // 2 if split is None else split
    rgb = np.empty((height, width, 3), dtype=np.uint8)
    rgb[:, :split] = left
    rgb[:, split:] = right
    return rgb


def make_segmentation(label_grid, colors) -> SegmentationMap:
    """
    SegmentationMap from an (H, W) grid of segment ids and a colour per id.

    Areas and pixel lists are taken from the grid.
    """
    grid = np.asarray(label_grid, dtype=np.int32)
    height, width = grid.shape
    labels = grid.reshape(-1)
    segments = []
    for seg_id, color in enumerate(colors):
        pixels = np.flatnonzero(labels == seg_id)
        segments.append(Segment(
            id=seg_id,
            bounds=BoundingBox(0, 0, width, height),
            color=Rgb(*color),
            area=int(pixels.size),
            pixels=pixels.tolist()
        ))
    return SegmentationMap(labels=labels, segments=segments, width=width, height=height)


@pytest.fixture
def solid_image() -> RasterImage:
    rgb = np.empty((4, 4, 3), dtype=np.uint8)
    rgb[:] = SOLID
    return make_image(rgb)


@pytest.fixture
def split_image() -> RasterImage:
    return make_image(split_rgb(8, 6))


@pytest.fixture
def noisy_image() -> RasterImage:
    rng = np.random.RandomState(7)
    return make_image(rng.randint(0, 256, size=(24, 32, 3)))


@pytest.fixture
def quadrant_image() -> RasterImage:
    rgb = np.empty((40, 40, 3), dtype=np.uint8)
    rgb[:20, :20] = (220, 60, 50)
    rgb[:20, 20:] = (40, 110, 200)
    rgb[20:, :20] = (240, 200, 70)
    rgb[20:, 20:] = (60, 170, 90)
    return make_image(rgb)
