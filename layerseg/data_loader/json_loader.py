"""
JSON persistence for pipeline configurations and layer summaries.

Config file format::

    {
        "config_version": "1.0",
        "saved": "2026-01-11T10:30:00",
        "config": {"edge_threshold": 30, "color_threshold": 0.1, ...}
    }
"""

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Union

from ..config import SegmentationConfig

if TYPE_CHECKING:
    from ..pipeline import PipelineResult


CONFIG_VERSION = "1.0"


def save_config(config: SegmentationConfig, path: Union[str, Path]) -> Path:
    """
    Save a configuration as JSON.

    Args:
        config: Configuration to store
        path: Destination file; parent directories are created

    Returns:
        path: The written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        "config_version": CONFIG_VERSION,
        "saved": datetime.now().isoformat(),
        "config": config.to_dict()
    }

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2)

    return path


def load_config(path: Union[str, Path]) -> SegmentationConfig:
    """
    Load a configuration saved by save_config().

    A bare dictionary of config fields (without the envelope) is accepted too.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON or holds invalid values
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    return SegmentationConfig.from_dict(data.get("config", data))


def layer_summary(result: 'PipelineResult') -> Dict[str, Any]:
    """
    Plain-data summary of a pipeline run: layer ids, colours and areas.
    """
    layered = result.layered
    pixel_count = layered.width * layered.height

    summary: Dict[str, Any] = {
        "width": layered.width,
        "height": layered.height,
        "segment_count": len(layered.base.segments),
        "merged_layers": [
            {
                "id": layer.id,
                "color": layer.color.to_hex(),
                "total_area": layer.total_area,
                "ratio": layer.total_area / pixel_count if pixel_count else 0.0,
                "source_segment_ids": list(layer.source_segment_ids)
            }
            for layer in layered.layers
        ],
        "timings": dict(result.timings)
    }

    if result.color_layers is not None:
        summary["color_layers"] = [
            {
                "id": layer.id,
                "color": layer.color.to_hex(),
                "pixel_count": layer.pixel_count,
                "ratio": layer.ratio
            }
            for layer in result.color_layers.layers
        ]

    return summary


def export_layer_summary(result: 'PipelineResult', path: Union[str, Path]) -> Path:
    """
    Write layer_summary() as JSON with a creation timestamp.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = layer_summary(result)
    payload["created"] = datetime.now().isoformat()

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2)

    return path
