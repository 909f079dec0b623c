from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LayoutConfig:
    """
    Deterministic geometry parameters.

    Defaults are explicit constants (no time/randomness).
    Confidence is used only as a threshold, never as a weight.
    """

    # Two lines share a visual row iff |top_a - top_b| < row_threshold_px.
    row_threshold_px: float = 15.0

    # word_break_threshold = mean_char_width * k
    word_break_k: float = 1.5
    default_char_width_px: float = 20.0

    fuse_letter_runs: bool = True
    # Cap for spelled-out runs in text without geometry (plain-text input).
    max_fused_letters: int = 5

    # Elements below the floor are dropped; elements without a confidence are kept.
    confidence_floor: float = 0.0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.row_threshold_px <= 0:
            raise ValueError("row_threshold_px must be > 0")
        if self.word_break_k <= 0:
            raise ValueError("word_break_k must be > 0")
        if self.default_char_width_px <= 0:
            raise ValueError("default_char_width_px must be > 0")
        if self.max_fused_letters < 2:
            raise ValueError("max_fused_letters must be >= 2")
        if not (0.0 <= self.confidence_floor <= 1.0):
            raise ValueError("confidence_floor must be within [0, 1]")

    def to_dict(self) -> dict[str, object]:
        return {
            "row_threshold_px": self.row_threshold_px,
            "word_break_k": self.word_break_k,
            "default_char_width_px": self.default_char_width_px,
            "fuse_letter_runs": self.fuse_letter_runs,
            "max_fused_letters": self.max_fused_letters,
            "confidence_floor": self.confidence_floor,
        }
