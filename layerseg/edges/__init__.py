"""
Sobel edge detection module.

Produces the binary barrier map used by the region labeler.
"""

from .edge_detector import (
    SobelConfig,
    EdgeDetectionResult,
    BaseEdgeDetector,
    SobelEdgeDetector,
    luminance,
    detect_edges,
    threshold_edges,
    EDGE_VALUE
)

__all__ = [
    'SobelConfig',
    'EdgeDetectionResult',
    'BaseEdgeDetector',
    'SobelEdgeDetector',
    'luminance',
    'detect_edges',
    'threshold_edges',
    'EDGE_VALUE'
]
