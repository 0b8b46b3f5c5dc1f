"""Tests for Union-Find and colour-based segment merging."""

from __future__ import annotations

import numpy as np

from layerseg.color import Rgb
from layerseg.segmentation import (
    UNASSIGNED,
    SegmentationMap,
    UnionFind,
    merge_segments_by_color,
)
from tests.conftest import make_segmentation


RED = (200, 0, 0)
NEAR_RED = (205, 5, 0)
BLUE = (0, 0, 100)


def striped_segmentation(widths, colors, height=10):
    """Vertical stripes, one segment per stripe, in left-to-right id order."""
    grid = np.concatenate([
        np.full((height, w), seg_id) for seg_id, w in enumerate(widths)
    ], axis=1)
    return make_segmentation(grid, colors)


class TestUnionFind:

    def test_starts_disjoint(self):
        uf = UnionFind(3)
        assert len(uf) == 3
        assert not uf.connected(0, 1)
        assert [uf.find(i) for i in range(3)] == [0, 1, 2]

    def test_union_is_transitive(self):
        uf = UnionFind(5)
        assert uf.union(0, 1)
        assert uf.union(1, 2)
        assert uf.connected(0, 2)
        assert not uf.connected(0, 3)

    def test_union_of_same_set_returns_false(self):
        uf = UnionFind(3)
        uf.union(0, 2)
        assert not uf.union(2, 0)

    def test_path_compression(self):
        uf = UnionFind(4)
        uf.union(0, 1)
        uf.union(2, 3)
        uf.union(1, 3)
        root = uf.find(3)
        assert all(uf.parent[i] == root for i in range(4))

    def test_groups_ordered_by_smallest_member(self):
        uf = UnionFind(6)
        uf.union(5, 1)
        uf.union(4, 2)
        uf.union(2, 0)
        groups = list(uf.groups().values())
        assert groups == [[0, 2, 4], [1, 5], [3]]


class TestMergeSegmentsByColor:

    def test_no_segments(self):
        empty = SegmentationMap(
            labels=np.full(6, UNASSIGNED, dtype=np.int32),
            segments=[],
            width=3,
            height=2
        )
        layered = merge_segments_by_color(empty)
        assert layered.layers == []
        assert (layered.layer_labels == UNASSIGNED).all()
        assert layered.layer_labels.shape == (6,)

    def test_close_colors_merge(self):
        seg = striped_segmentation([20, 20], [RED, NEAR_RED])
        layered = merge_segments_by_color(seg, color_threshold=0.1, min_area=0)
        assert len(layered.layers) == 1
        assert layered.layers[0].color == Rgb(203, 3, 0)

    def test_distinct_colors_stay_apart(self):
        seg = striped_segmentation([20, 20], [RED, BLUE])
        layered = merge_segments_by_color(seg, color_threshold=0.1, min_area=0)
        assert len(layered.layers) == 2

    def test_layers_sorted_by_area_with_dense_ids(self):
        seg = striped_segmentation([10, 30, 20], [BLUE, RED, (0, 160, 0)])
        layered = merge_segments_by_color(seg, color_threshold=0.05, min_area=0)

        assert [layer.total_area for layer in layered.layers] == [300, 200, 100]
        assert [layer.id for layer in layered.layers] == [0, 1, 2]
        assert [layer.source_segment_ids for layer in layered.layers] == [[1], [2], [0]]
        grid = layered.reshape_labels()
        assert (grid[:, :10] == 2).all()
        assert (grid[:, 10:40] == 0).all()
        assert (grid[:, 40:] == 1).all()

    def test_small_segments_join_closest_large_segment(self):
        seg = striped_segmentation([20, 1, 20], [RED, (180, 10, 10), BLUE])
        layered = merge_segments_by_color(seg, color_threshold=0.01, min_area=100)

        assert len(layered.layers) == 2
        red_layer = layered.layers[0]
        assert sorted(red_layer.source_segment_ids) == [0, 1]
        assert red_layer.total_area == 210

    def test_small_segments_without_large_partner(self):
        seg = striped_segmentation([2, 3], [RED, BLUE], height=2)
        layered = merge_segments_by_color(seg, color_threshold=0.01, min_area=100)
        assert len(layered.layers) == 2

    def test_area_is_conserved(self):
        seg = striped_segmentation([7, 3, 12, 1, 9], [RED, NEAR_RED, BLUE, (0, 0, 110), (240, 240, 240)])
        layered = merge_segments_by_color(seg, color_threshold=0.1, min_area=20)

        total = sum(layer.total_area for layer in layered.layers)
        assert total == sum(s.area for s in seg.segments)
        for layer in layered.layers:
            originals = sum(seg.segments[i].area for i in layer.source_segment_ids)
            assert originals == layer.total_area
            assert int(np.count_nonzero(layered.layer_labels == layer.id)) == layer.total_area

    def test_unassigned_pixels_stay_unassigned(self):
        grid = [[0, 0, -1], [1, 1, -1]]
        seg = make_segmentation(grid, [RED, BLUE])
        layered = merge_segments_by_color(seg, min_area=0)
        assert layered.layer_labels.tolist()[2] == UNASSIGNED
        assert layered.layer_labels.tolist()[5] == UNASSIGNED

    def test_input_is_not_modified(self):
        seg = striped_segmentation([20, 20], [RED, NEAR_RED])
        labels_before = seg.labels.copy()
        merge_segments_by_color(seg, min_area=0)
        assert (seg.labels == labels_before).all()
        assert [s.area for s in seg.segments] == [200, 200]

    def test_custom_distance(self):
        seg = striped_segmentation([20, 20, 20], [RED, BLUE, (0, 160, 0)])
        calls = []

        def same(a, b):
            calls.append((a, b))
            return 0.0

        layered = merge_segments_by_color(seg, color_threshold=0.1, min_area=0, distance=same)
        assert len(layered.layers) == 1
        assert len(calls) == 3
        assert all(isinstance(c, Rgb) for pair in calls for c in pair)

    def test_remerging_flattened_layers(self):
        seg = striped_segmentation([30, 20], [RED, BLUE])
        layered = merge_segments_by_color(seg, color_threshold=0.1, min_area=0)

        flat = layered.to_segmentation_map()
        assert [s.id for s in flat.segments] == [0, 1]
        assert [s.area for s in flat.segments] == [300, 200]
        assert flat.segments[1].bounds.x == 30
        assert flat.segments[1].bounds.width == 20
        assert sorted(flat.segments[0].pixels) == np.flatnonzero(flat.labels == 0).tolist()

        again = merge_segments_by_color(flat, color_threshold=0.1, min_area=0)
        assert [layer.total_area for layer in again.layers] == [300, 200]
        np.testing.assert_array_equal(again.layer_labels, layered.layer_labels)

    def test_single_group_is_stable_under_remerge(self):
        seg = striped_segmentation([25, 15], [RED, NEAR_RED])
        layered = merge_segments_by_color(seg, color_threshold=0.1, min_area=0)
        assert len(layered.layers) == 1

        again = merge_segments_by_color(layered.to_segmentation_map(), color_threshold=0.2, min_area=0)

        assert len(again.layers) == 1
        assert again.layers[0].color == layered.layers[0].color
        assert again.layers[0].total_area == layered.layers[0].total_area
        np.testing.assert_array_equal(again.layer_labels, layered.layer_labels)
