"""Smoke tests for the matplotlib figures."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from layerseg import SegmentationConfig, SegmentationPipeline  # noqa: E402
from layerseg.viz import plot_color_distribution, plot_segmentation_results  # noqa: E402


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


def test_segmentation_results_has_one_panel_per_stage(quadrant_image):
    result = SegmentationPipeline(SegmentationConfig(n_layers=4, random_state=0)).run(quadrant_image)
    fig = plot_segmentation_results(quadrant_image, result)

    titles = [ax.get_title() for ax in fig.axes]
    assert len(titles) == 5
    assert titles[0] == "Original"
    assert titles[-1] == "Color layers (K=4)"


def test_segmentation_results_without_color_layers(solid_image):
    result = SegmentationPipeline(SegmentationConfig(run_color_layers=False)).run(solid_image)
    fig = plot_segmentation_results(solid_image, result)
    assert len(fig.axes) == 4


def test_color_distribution(quadrant_image):
    result = SegmentationPipeline(SegmentationConfig(n_layers=4, random_state=0)).run(quadrant_image)

    fig = plot_color_distribution(result.color_layers)
    ax = fig.axes[0]
    assert len(ax.patches) == 4
    assert [label.get_text() for label in ax.get_xticklabels()][0].startswith("#")


def test_color_distribution_into_existing_axes(quadrant_image):
    result = SegmentationPipeline(SegmentationConfig(n_layers=2, random_state=0)).run(quadrant_image)
    fig, ax = plt.subplots()
    assert plot_color_distribution(result.color_layers, ax=ax) is fig
