import marimo

__generated_with = "0.17.6"
app = marimo.App(width="full")


@app.cell
def _():
    import marimo as mo
    import logging
    import numpy as np
    from pathlib import Path

    from layerseg import SegmentationConfig, SegmentationPipeline, RasterImage, load_image
    from layerseg.encoders import layer_to_image
    from layerseg.viz import plot_segmentation_results, plot_color_distribution

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    return (
        Path,
        RasterImage,
        SegmentationConfig,
        SegmentationPipeline,
        layer_to_image,
        load_image,
        mo,
        np,
        plot_color_distribution,
        plot_segmentation_results,
    )


@app.cell
def _(mo):
    mo.md("""
    # Photo Layer Segmentation

    This notebook splits a photo into colour layers for a stacked 3D preview,
    along two independent paths:

    - **Edge-based**: Sobel edges act as barriers for a flood fill; edge pixels
      are then handed to the closest-coloured neighbouring segment, and the
      segments are merged in Oklab space into layers.
    - **Colour-based**: k-means clusters the raw pixels into K colours.

    Leave the path empty to use a generated test image.
    """)
    return


@app.cell
def _(mo):
    image_path = mo.ui.text(label="Image path", value="")
    edge_threshold = mo.ui.slider(5, 120, value=30, label="Edge threshold")
    color_threshold = mo.ui.slider(0.02, 0.3, step=0.01, value=0.1, label="Oklab merge threshold")
    min_area = mo.ui.slider(10, 1000, step=10, value=100, label="Min segment area")
    n_layers = mo.ui.slider(1, 12, value=6, label="K (colour layers)")
    mo.vstack([image_path, edge_threshold, color_threshold, min_area, n_layers])
    return color_threshold, edge_threshold, image_path, min_area, n_layers


@app.cell
def _(Path, RasterImage, image_path, load_image, np):
    if image_path.value and Path(image_path.value).exists():
        image = load_image(image_path.value)
    else:
        # Four flat quadrants with a soft gradient and some noise
        h, w = 120, 160
        yy, xx = np.mgrid[0:h, 0:w]
        rgb = np.zeros((h, w, 3), dtype=np.float64)
        rgb[:h // 2, :w // 2] = [220, 60, 50]
        rgb[:h // 2, w // 2:] = [40, 110, 200]
        rgb[h // 2:, :w // 2] = [240, 200, 70]
        rgb[h // 2:, w // 2:] = [60, 170, 90]
        rgb += (xx / w * 20)[..., None]
        rgb += np.random.default_rng(0).normal(0, 3, rgb.shape)
        image = RasterImage.from_array(np.clip(rgb, 0, 255).astype(np.uint8))
    return (image,)


@app.cell
def _(
    SegmentationConfig,
    SegmentationPipeline,
    color_threshold,
    edge_threshold,
    image,
    min_area,
    n_layers,
):
    config = SegmentationConfig(
        edge_threshold=edge_threshold.value,
        color_threshold=color_threshold.value,
        min_area=int(min_area.value),
        n_layers=int(n_layers.value),
        random_state=42,
    )
    result = SegmentationPipeline(config).run(image)
    return (result,)


@app.cell
def _(image, plot_segmentation_results, result):
    fig_stages = plot_segmentation_results(image, result)
    fig_stages
    return


@app.cell
def _(mo, result):
    mo.md(f"""
    ## Summary

    - Segments after flood fill and edge reassignment: **{len(result.segmentation.segments)}**
    - Orphaned edge pixels: **{result.segmentation.unassigned_count()}**
    - Merged layers: **{len(result.layered.layers)}**
    - Timings: {', '.join(f'{k} {v * 1000:.0f}ms' for k, v in result.timings.items())}
    """)
    return


@app.cell
def _(plot_color_distribution, result):
    fig_colors = plot_color_distribution(result.color_layers)
    fig_colors
    return


@app.cell
def _(image, layer_to_image, mo, result):
    # One transparent plate per merged layer, background first
    plates = [
        mo.image(layer_to_image(result.layered.layer_labels, layer.id, image).to_array())
        for layer in result.layered.layers[:8]
    ]
    mo.hstack(plates, wrap=True)
    return


if __name__ == "__main__":
    app.run()
