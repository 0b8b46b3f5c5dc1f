"""Tests for rendering label buffers and edge maps as images."""

from __future__ import annotations

import numpy as np
import pytest

from layerseg.color import Rgb
from layerseg.encoders import (
    EDGE_HIGHLIGHT,
    color_layers_to_image,
    edge_map_to_image,
    labels_to_image,
    layer_to_image,
    layered_to_image,
    overlay_edges,
    segmentation_to_image,
)
from layerseg.kmeans import extract_color_layers
from layerseg.segmentation import merge_segments_by_color, segment_image
from tests.conftest import BLUE, RED


def test_labels_to_image_paints_unassigned_black():
    labels = np.array([0, -1, 1], dtype=np.int32)
    image = labels_to_image(labels, [Rgb(*RED), Rgb(*BLUE)], 3, 1)

    assert image.rgb[0].tolist() == [list(RED), [0, 0, 0], list(BLUE)]
    assert (image.rgba[:, :, 3] == 255).all()


def test_labels_to_image_without_colors():
    image = labels_to_image(np.full(4, -1, dtype=np.int32), [], 2, 2)
    assert not image.rgb.any()


def test_labels_to_image_rejects_out_of_range_ids():
    labels = np.array([0, 2], dtype=np.int32)
    with pytest.raises(IndexError):
        labels_to_image(labels, [Rgb(*RED), Rgb(*BLUE)], 2, 1)


def test_segmentation_to_image(split_image):
    seg = segment_image(split_image, edge_threshold=30)

    plain = segmentation_to_image(seg)
    assert (plain.pixels() == [100, 0, 50]).all()

    marked = segmentation_to_image(seg, mark_edges=True)
    edge_px = seg.edge_map > 0
    assert not marked.pixels()[edge_px].any()
    assert (marked.pixels()[~edge_px] == [100, 0, 50]).all()


def test_layered_to_image(split_image):
    layered = merge_segments_by_color(segment_image(split_image), min_area=0)
    image = layered_to_image(layered)
    assert image.width == 8 and image.height == 6
    assert (image.pixels() == list(layered.layers[0].color)).all()


def test_color_layers_to_image_posterizes(quadrant_image):
    color_map = extract_color_layers(quadrant_image, k=4, random_state=0)
    image = color_layers_to_image(color_map)
    assert (image.data == quadrant_image.data).all()


def test_edge_map_to_image_is_gray():
    edge_map = np.array([0, 128, 255, 7], dtype=np.uint8)
    image = edge_map_to_image(edge_map, 2, 2)
    pixels = image.pixels()
    assert pixels[:, 0].tolist() == [0, 128, 255, 7]
    assert (pixels[:, 0] == pixels[:, 1]).all() and (pixels[:, 1] == pixels[:, 2]).all()


class TestOverlayEdges:

    def test_edges_are_red(self, split_image):
        seg = segment_image(split_image, edge_threshold=30)
        overlay = overlay_edges(split_image, seg.edge_map)

        edge_px = seg.edge_map > 0
        assert (overlay.pixels()[edge_px] == EDGE_HIGHLIGHT).all()
        assert (overlay.pixels()[~edge_px] == split_image.pixels()[~edge_px]).all()

    def test_source_is_untouched_and_alpha_kept(self, split_image):
        split_image.rgba[0, 0, 3] = 10
        before = split_image.data.copy()
        edges = np.full(split_image.pixel_count, 255, dtype=np.uint8)

        overlay = overlay_edges(split_image, edges, color=(0, 255, 0))

        assert (split_image.data == before).all()
        assert overlay.rgba[0, 0, 3] == 10
        assert (overlay.pixels() == [0, 255, 0]).all()


def test_layer_to_image_is_transparent_outside_layer(split_image):
    labels = np.zeros(48, dtype=np.int32)
    labels.reshape(6, 8)[:, 4:] = 1

    image = layer_to_image(labels, 1, split_image)
    rgba = image.rgba

    assert (rgba[:, :4] == 0).all()
    assert (rgba[:, 4:, 3] == 255).all()
    assert (rgba[:, 4:, :3] == BLUE).all()
