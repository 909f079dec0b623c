"""
Multi-capture aggregation: several noisy captures of one page -> one composite text.
"""

from .aggregate import aggregate_frames, aggregate_frames_detailed, completeness_score
from .config import AggregationConfig
from .similarity import line_similarity

__all__ = [
    "AggregationConfig",
    "aggregate_frames",
    "aggregate_frames_detailed",
    "completeness_score",
    "line_similarity",
]
