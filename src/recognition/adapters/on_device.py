from __future__ import annotations

import logging
from typing import Any

from contracts.recognition import (
    BBox,
    Block,
    Element,
    Line,
    Page,
    RecognitionFlavor,
    RecognitionPayloadError,
    bbox_union_many,
)

from .base import RecognitionAdapter, optional_confidence, require_list, require_object

logger = logging.getLogger(__name__)


def _bbox(raw: Any, what: str) -> BBox:
    if raw is None:
        raise RecognitionPayloadError(f"{what} is missing 'boundingBox'")
    return BBox.from_dict(require_object(raw, f"{what}.boundingBox"))


class OnDeviceAdapter(RecognitionAdapter):
    """
    On-device structured engine payload:

        {"text": "...", "blocks": [{"lines": [{"text": "...",
            "boundingBox": {...}, "elements": [{"text": "...",
            "boundingBox": {"left", "top", "right", "bottom"},
            "confidence": 0.9}]}]}]}

    Line and block boxes are optional; element boxes are required.
    """

    flavor = RecognitionFlavor.ON_DEVICE

    def to_page(self, payload: Any) -> Page:
        root = require_object(payload, "on-device payload")
        blocks: list[Block] = []

        for bi, raw_block in enumerate(require_list(root.get("blocks"), "blocks")):
            raw_block = require_object(raw_block, f"blocks[{bi}]")
            lines: list[Line] = []
            for li, raw_line in enumerate(require_list(raw_block.get("lines"), f"blocks[{bi}].lines")):
                raw_line = require_object(raw_line, f"blocks[{bi}].lines[{li}]")
                where = f"blocks[{bi}].lines[{li}]"

                elements: list[Element] = []
                for ei, raw_el in enumerate(require_list(raw_line.get("elements"), f"{where}.elements")):
                    raw_el = require_object(raw_el, f"{where}.elements[{ei}]")
                    elements.append(
                        Element(
                            text=str(raw_el.get("text") or ""),
                            bbox=_bbox(raw_el.get("boundingBox"), f"{where}.elements[{ei}]"),
                            confidence=optional_confidence(raw_el.get("confidence")),
                        )
                    )

                text = raw_line.get("text")
                line_text = " ".join(e.text for e in elements) if text is None else str(text)
                if raw_line.get("boundingBox") is not None:
                    line_bbox = _bbox(raw_line["boundingBox"], where)
                elif elements:
                    line_bbox = bbox_union_many(e.bbox for e in elements)
                else:
                    logger.debug("Dropping %s: no elements and no bounding box", where)
                    continue
                lines.append(Line(elements=elements, text=line_text, bbox=line_bbox))

            blocks.append(Block(lines=lines))

        return Page(blocks=blocks, text=str(root.get("text") or ""), engine=self.flavor.value)
