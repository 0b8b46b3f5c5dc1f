"""Tests for the layering pipeline, batch runs and layer summaries."""

from __future__ import annotations

import json

import pytest

from layerseg import SegmentationConfig, SegmentationPipeline, process_images_batch
from layerseg.data_loader import export_layer_summary, layer_summary


class TestSegmentationPipeline:

    def test_run(self, quadrant_image):
        config = SegmentationConfig(min_area=10, n_layers=4, random_state=0)
        result = SegmentationPipeline(config).run(quadrant_image)

        assert set(result.timings) == {"segment", "merge", "color_layers"}
        assert all(t >= 0 for t in result.timings.values())
        assert result.layered.base is result.segmentation
        assert sum(layer.total_area for layer in result.layered.layers) == (
            sum(seg.area for seg in result.segmentation.segments)
        )
        assert len(result.color_layers.layers) == 4
        assert "PipelineResult(segments=" in str(result)

    def test_color_path_can_be_disabled(self, solid_image):
        config = SegmentationConfig(run_color_layers=False)
        result = SegmentationPipeline(config).run(solid_image)

        assert result.color_layers is None
        assert "color_layers" not in result.timings
        assert len(result.layered.layers) == 1
        assert result.layered.layers[0].total_area == 16

    def test_default_config(self):
        assert SegmentationPipeline().config == SegmentationConfig()

    def test_logs_run(self, solid_image, caplog):
        with caplog.at_level("INFO", logger="layerseg.pipeline"):
            SegmentationPipeline().run(solid_image)
        assert "Layered 4x4 image" in caplog.text


def test_process_images_batch(solid_image, split_image):
    results = process_images_batch(
        {"solid": solid_image, "split": split_image},
        SegmentationConfig(n_layers=2, random_state=0)
    )
    assert list(results) == ["solid", "split"]
    assert len(results["split"].color_layers.layers) == 2
    assert len(results["solid"].color_layers.layers) == 1


class TestLayerSummary:

    def test_summary_contents(self, solid_image):
        result = SegmentationPipeline(SegmentationConfig(random_state=0)).run(solid_image)
        summary = layer_summary(result)

        assert (summary["width"], summary["height"]) == (4, 4)
        assert summary["segment_count"] == 1
        layer = summary["merged_layers"][0]
        assert layer["color"] == "#5a8cc8"
        assert layer["total_area"] == 16
        assert layer["ratio"] == pytest.approx(1.0)
        assert layer["source_segment_ids"] == [0]
        assert summary["color_layers"][0]["pixel_count"] == 16

    def test_summary_without_color_layers(self, solid_image):
        result = SegmentationPipeline(SegmentationConfig(run_color_layers=False)).run(solid_image)
        assert "color_layers" not in layer_summary(result)

    def test_export(self, tmp_path, split_image):
        result = SegmentationPipeline(SegmentationConfig(random_state=0)).run(split_image)
        path = export_layer_summary(result, tmp_path / "summary.json")

        payload = json.loads(path.read_text())
        assert "created" in payload
        assert payload["merged_layers"][0]["total_area"] == 48
