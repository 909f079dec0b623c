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

# A paragraph's words stay on one line while their top is within this many
# pixels of the line's first word.
LINE_TOP_TOLERANCE_PX = 10.0


def _vertices_bbox(raw: Any) -> BBox | None:
    """
    Axis-aligned box from `boundingBox.vertices`. The engine omits zero
    coordinates, so a missing x/y is read as 0.
    """

    if not isinstance(raw, dict):
        return None
    vertices = raw.get("vertices")
    if not isinstance(vertices, list) or not vertices:
        return None
    xs: list[float] = []
    ys: list[float] = []
    for v in vertices:
        if not isinstance(v, dict):
            raise RecognitionPayloadError(f"Invalid vertex: {v!r}")
        try:
            xs.append(float(v.get("x") or 0))
            ys.append(float(v.get("y") or 0))
        except (TypeError, ValueError) as e:
            raise RecognitionPayloadError(f"Invalid vertex: {v!r}") from e
    return BBox(left=min(xs), top=min(ys), right=max(xs), bottom=max(ys))


def _word_element(raw_word: dict[str, Any], where: str) -> Element | None:
    symbols = require_list(raw_word.get("symbols"), f"{where}.symbols")
    text = "".join(str(require_object(s, f"{where}.symbols[]").get("text") or "") for s in symbols)

    bbox = _vertices_bbox(raw_word.get("boundingBox"))
    if bbox is None:
        symbol_boxes = [b for b in (_vertices_bbox(s.get("boundingBox")) for s in symbols) if b is not None]
        if not symbol_boxes:
            logger.debug("Dropping %s (%r): no geometry", where, text)
            return None
        bbox = bbox_union_many(symbol_boxes)

    return Element(text=text, bbox=bbox, confidence=optional_confidence(raw_word.get("confidence")))


def _split_paragraph_lines(words: list[Element]) -> list[list[Element]]:
    lines: list[list[Element]] = []
    current: list[Element] = []
    line_top: float | None = None
    for w in words:
        if line_top is None or abs(w.bbox.top - line_top) < LINE_TOP_TOLERANCE_PX:
            current.append(w)
            if line_top is None:
                line_top = w.bbox.top
            continue
        lines.append(current)
        current = [w]
        line_top = w.bbox.top
    if current:
        lines.append(current)
    return lines


class CloudDocumentAdapter(RecognitionAdapter):
    """
    Cloud document-OCR response:

        {"responses": [{"fullTextAnnotation": {"text": "...", "pages": [
            {"blocks": [{"paragraphs": [{"words": [{"symbols": [{"text": "H"}],
             "boundingBox": {"vertices": [{"x": 1, "y": 2}, ...]}}]}]}]}]}}]}

    A bare response object (without the `responses` wrapper) is accepted too.
    Each word becomes one Element; each paragraph is split into Lines by the
    top of its words.
    """

    flavor = RecognitionFlavor.CLOUD_DOCUMENT

    def to_page(self, payload: Any) -> Page:
        root = require_object(payload, "cloud document payload")
        if "responses" in root:
            responses = require_list(root.get("responses"), "responses")
            if not responses:
                return Page(blocks=[], text="", engine=self.flavor.value)
            root = require_object(responses[0], "responses[0]")

        if root.get("error"):
            raise RecognitionPayloadError(f"Recognition engine reported an error: {root['error']!r}")

        annotation = root.get("fullTextAnnotation")
        if annotation is None:
            return Page(blocks=[], text="", engine=self.flavor.value)
        annotation = require_object(annotation, "fullTextAnnotation")

        blocks: list[Block] = []
        for pi, raw_page in enumerate(require_list(annotation.get("pages"), "pages")):
            raw_page = require_object(raw_page, f"pages[{pi}]")
            for bi, raw_block in enumerate(require_list(raw_page.get("blocks"), f"pages[{pi}].blocks")):
                raw_block = require_object(raw_block, f"pages[{pi}].blocks[{bi}]")
                lines: list[Line] = []
                for gi, raw_par in enumerate(require_list(raw_block.get("paragraphs"), "paragraphs")):
                    where = f"pages[{pi}].blocks[{bi}].paragraphs[{gi}]"
                    raw_par = require_object(raw_par, where)
                    words: list[Element] = []
                    for wi, raw_word in enumerate(require_list(raw_par.get("words"), f"{where}.words")):
                        el = _word_element(require_object(raw_word, f"{where}.words[{wi}]"), f"{where}.words[{wi}]")
                        if el is not None:
                            words.append(el)
                    lines.extend(Line.from_elements(ws) for ws in _split_paragraph_lines(words))
                blocks.append(Block(lines=lines))

        return Page(blocks=blocks, text=str(annotation.get("text") or ""), engine=self.flavor.value)
