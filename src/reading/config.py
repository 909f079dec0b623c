from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from frames.config import AggregationConfig
from layout.config import LayoutConfig
from normalize_text.config import NormalizeConfig


@dataclass(frozen=True, slots=True)
class ReadingConfig:
    """
    End-to-end reading parameters, one section per stage.
    """

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    normalize: NormalizeConfig = field(default_factory=NormalizeConfig)
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    segment_questions: bool = True

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.segment_questions, bool):
            raise ValueError("segment_questions must be a bool")
        self.layout.validate()
        self.normalize.validate()
        self.aggregation.validate()

    def to_dict(self) -> dict[str, Any]:
        return {
            "layout": self.layout.to_dict(),
            "normalize": self.normalize.to_dict(),
            "aggregation": self.aggregation.to_dict(),
            "segment_questions": self.segment_questions,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "ReadingConfig":
        if not isinstance(d, dict):
            raise ValueError("Reading config must be a JSON object")
        unknown = sorted(set(d) - {"layout", "normalize", "aggregation", "segment_questions"})
        if unknown:
            raise ValueError(f"Unknown reading config keys: {unknown}")
        try:
            return ReadingConfig(
                layout=LayoutConfig(**(d.get("layout") or {})),
                normalize=NormalizeConfig(**(d.get("normalize") or {})),
                aggregation=AggregationConfig(**(d.get("aggregation") or {})),
                segment_questions=bool(d.get("segment_questions", True)),
            )
        except TypeError as e:
            raise ValueError(f"Invalid reading config: {e}") from e


def load_reading_config(path: Path) -> ReadingConfig:
    return ReadingConfig.from_dict(json.loads(path.read_text(encoding="utf-8")))
