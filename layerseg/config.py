"""
Pipeline configuration.

One dataclass holds every tuning knob of both layering paths. The three
edge-path values trade detail against cost: a lower ``edge_threshold`` or
``min_area`` yields more segments, and merging compares every pair of them.
"""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional


# bool is an int subclass and only accepted where it is the declared type
_FIELD_TYPES = {
    'edge_threshold': (int, float),
    'color_threshold': (int, float),
    'min_area': (int,),
    'n_layers': (int,),
    'run_color_layers': (bool,),
}


@dataclass
class SegmentationConfig:
    """
    Configuration for the layering pipeline.
    """
    edge_threshold: float = 30
    """Sobel magnitude at or above which a pixel is an edge. Range [0, 255]."""

    color_threshold: float = 0.1
    """Oklab distance below which two segments are merged."""

    min_area: int = 100
    """Segments smaller than this are absorbed into the closest large segment."""

    n_layers: int = 6
    """Number of k-means colour layers (k)."""

    random_state: Optional[int] = None
    """Seed for k-means initialization. None = unseeded."""

    run_color_layers: bool = True
    """Whether the pipeline also runs the k-means colour path."""

    def __post_init__(self):
        """Validate configuration parameters."""
        for name, kinds in _FIELD_TYPES.items():
            value = getattr(self, name)
            if isinstance(value, bool) != (kinds == (bool,)) or not isinstance(value, kinds):
                raise ValueError(
                    f"{name} must be of type {'/'.join(k.__name__ for k in kinds)}, "
                    f"got {value!r}"
                )
        if self.random_state is not None and (
            isinstance(self.random_state, bool) or not isinstance(self.random_state, int)
        ):
            raise ValueError(f"random_state must be an int or None, got {self.random_state!r}")

        if not 0 <= self.edge_threshold <= 255:
            raise ValueError(
                f"edge_threshold must be in [0, 255], got {self.edge_threshold}"
            )
        if self.color_threshold <= 0:
            raise ValueError(
                f"color_threshold must be > 0, got {self.color_threshold}"
            )
        if self.min_area < 0:
            raise ValueError(f"min_area must be >= 0, got {self.min_area}")
        if self.n_layers < 1:
            raise ValueError(f"n_layers must be >= 1, got {self.n_layers}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SegmentationConfig':
        """
        Create from dictionary. Missing keys take their defaults.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**data)
