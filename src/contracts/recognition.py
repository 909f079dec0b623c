from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class RecognitionFlavor(str, Enum):
    """
    Payload shapes accepted at the recognition boundary.

    Every flavor is normalized into the same Page/Block/Line/Element contract
    before any reading-order or text processing happens.
    """

    CANONICAL = "canonical"
    ON_DEVICE = "on_device"
    CLOUD_DOCUMENT = "cloud_document"


class RecognitionPayloadError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class BBox:
    """
    Image-pixel coordinates, origin top-left, y increasing downward.
    """

    left: float
    top: float
    right: float
    bottom: float

    def width(self) -> float:
        return float(self.right - self.left)

    def height(self) -> float:
        return float(self.bottom - self.top)

    def union(self, other: "BBox") -> "BBox":
        return BBox(
            left=min(self.left, other.left),
            top=min(self.top, other.top),
            right=max(self.right, other.right),
            bottom=max(self.bottom, other.bottom),
        )

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "BBox":
        try:
            return BBox(
                left=float(d["left"]),
                top=float(d["top"]),
                right=float(d["right"]),
                bottom=float(d["bottom"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RecognitionPayloadError(f"Invalid bounding box: {d!r}") from e

    def to_dict(self) -> dict[str, Any]:
        return {"left": self.left, "top": self.top, "right": self.right, "bottom": self.bottom}


def bbox_union_many(boxes: Iterable[BBox]) -> BBox:
    boxes = list(boxes)
    if not boxes:
        return BBox(0.0, 0.0, 0.0, 0.0)
    out = boxes[0]
    for b in boxes[1:]:
        out = out.union(b)
    return out


@dataclass(frozen=True, slots=True)
class Element:
    text: str
    bbox: BBox
    confidence: float | None = None  # most engines omit it; never assumed present

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Element":
        if "bbox" not in d:
            raise RecognitionPayloadError("Element is missing 'bbox'")
        confidence = d.get("confidence")
        if confidence is not None:
            try:
                confidence = float(confidence)
            except (TypeError, ValueError) as e:
                raise RecognitionPayloadError(f"Invalid confidence: {confidence!r}") from e
        return Element(text=str(d.get("text", "")), bbox=BBox.from_dict(d["bbox"]), confidence=confidence)

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "bbox": self.bbox.to_dict(), "confidence": self.confidence}


@dataclass(frozen=True, slots=True)
class Line:
    # Element order is as reported by the recognizer and is not trusted.
    elements: list[Element]
    text: str
    bbox: BBox

    @staticmethod
    def from_elements(elements: list[Element], text: str | None = None) -> "Line":
        joined = " ".join(e.text for e in elements) if text is None else text
        return Line(elements=list(elements), text=joined, bbox=bbox_union_many(e.bbox for e in elements))

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Line":
        elements_raw = d.get("elements") or []
        if not isinstance(elements_raw, list):
            raise RecognitionPayloadError("Line.elements must be a list")
        elements = [Element.from_dict(e) for e in elements_raw]
        text = d.get("text")
        if d.get("bbox") is not None:
            bbox = BBox.from_dict(d["bbox"])
        elif elements:
            bbox = bbox_union_many(e.bbox for e in elements)
        else:
            raise RecognitionPayloadError("Line without elements must carry a 'bbox'")
        return Line(
            elements=elements,
            text=(" ".join(e.text for e in elements) if text is None else str(text)),
            bbox=bbox,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "elements": [e.to_dict() for e in self.elements],
            "text": self.text,
            "bbox": self.bbox.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class Block:
    # Recognizer grouping; advisory only.
    lines: list[Line]

    @property
    def bbox(self) -> BBox:
        return bbox_union_many(l.bbox for l in self.lines)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Block":
        lines_raw = d.get("lines") or []
        if not isinstance(lines_raw, list):
            raise RecognitionPayloadError("Block.lines must be a list")
        return Block(lines=[Line.from_dict(l) for l in lines_raw])

    def to_dict(self) -> dict[str, Any]:
        return {"lines": [l.to_dict() for l in self.lines]}


@dataclass(frozen=True, slots=True)
class Page:
    blocks: list[Block]
    text: str = ""  # recognizer's own full text, used only as a last-resort fallback
    engine: str | None = None

    def iter_lines(self) -> Iterable[Line]:
        for b in self.blocks:
            yield from b.lines

    def element_count(self) -> int:
        return sum(len(l.elements) for l in self.iter_lines())

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Page":
        if not isinstance(d, dict):
            raise RecognitionPayloadError("Page payload must be a JSON object")
        blocks_raw = d.get("blocks") or []
        if not isinstance(blocks_raw, list):
            raise RecognitionPayloadError("Page.blocks must be a list")
        return Page(
            blocks=[Block.from_dict(b) for b in blocks_raw],
            text=str(d.get("text") or ""),
            engine=(None if d.get("engine") is None else str(d["engine"])),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"blocks": [b.to_dict() for b in self.blocks], "text": self.text}
        if self.engine is not None:
            out["engine"] = self.engine
        return out
