"""
Canonical pipeline contracts.

These models are the schema boundary between the recognition adapters, the
reading stages and the JSON artifacts. Stage code should consume/produce
these contract objects (not ad-hoc dicts).
"""

from .recognition import (
    BBox,
    Block,
    Element,
    Line,
    Page,
    RecognitionFlavor,
    RecognitionPayloadError,
)
from .reading import (
    AggregationResult,
    EmptyFrameSetError,
    Question,
    ReadingError,
    ReadingResult,
    ReadingRow,
    RowKind,
)
from .fallback import keep_nonempty, never_regress

__all__ = [
    "BBox",
    "Element",
    "Line",
    "Block",
    "Page",
    "RecognitionFlavor",
    "RecognitionPayloadError",
    "RowKind",
    "ReadingRow",
    "Question",
    "ReadingError",
    "ReadingResult",
    "AggregationResult",
    "EmptyFrameSetError",
    "keep_nonempty",
    "never_regress",
]
