from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from contracts.recognition import Page, RecognitionFlavor, RecognitionPayloadError


class RecognitionAdapter(ABC):
    """
    Interface for recognition payload adapters.

    IMPORTANT:
    - Adapters must return literal text hypotheses, bounding boxes, confidences.
    - Adapters must NOT apply correction/guessing/normalization.
    """

    flavor: RecognitionFlavor

    @abstractmethod
    def to_page(self, payload: Any) -> Page:
        raise NotImplementedError


def require_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise RecognitionPayloadError(f"{what} must be a list, got {type(value).__name__}")
    return value


def require_object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise RecognitionPayloadError(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


def optional_confidence(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise RecognitionPayloadError(f"Invalid confidence: {value!r}") from e
