from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AggregationConfig:
    """
    Multi-capture merge parameters.

    Similarity scores are in [0, 1]; two lines with score >= duplicate_threshold
    are treated as captures of the same printed line.
    """

    duplicate_threshold: float = 0.88
    # Substring containment only counts when shorter/longer >= this ratio.
    containment_min_length_ratio: float = 0.6

    # Word recovery runs only while the composite is shorter than this.
    recovery_max_chars: int = 500
    # A word must appear in at least this many frames to be recovered.
    min_frames_for_recovery: int = 2

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not (0.0 < self.duplicate_threshold <= 1.0):
            raise ValueError("duplicate_threshold must be within (0, 1]")
        if not (0.0 <= self.containment_min_length_ratio <= 1.0):
            raise ValueError("containment_min_length_ratio must be within [0, 1]")
        if self.recovery_max_chars < 0:
            raise ValueError("recovery_max_chars must be >= 0")
        if self.min_frames_for_recovery < 2:
            raise ValueError("min_frames_for_recovery must be >= 2")

    def to_dict(self) -> dict[str, object]:
        return {
            "duplicate_threshold": self.duplicate_threshold,
            "containment_min_length_ratio": self.containment_min_length_ratio,
            "recovery_max_chars": self.recovery_max_chars,
            "min_frames_for_recovery": self.min_frames_for_recovery,
        }
