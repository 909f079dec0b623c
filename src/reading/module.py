from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Sequence

from contracts.fallback import keep_nonempty
from contracts.reading import ReadingError, ReadingResult
from contracts.recognition import Line, Page, RecognitionFlavor, RecognitionPayloadError
from frames.aggregate import aggregate_frames_detailed
from layout.order_rows import PositionedText, order_positioned
from layout.words import fuse_letter_runs, reconstruct_line_text
from normalize_text.module import normalize_for_speech, normalize_row_structure
from normalize_text.tables import LexiconTables, load_lexicon
from recognition.module import load_page, load_page_file
from structure.classify import fold_rows
from structure.segment import segment_questions

from .config import ReadingConfig

logger = logging.getLogger(__name__)

STAGE = "reading_v1"


def _warning(code: str, message: str, detail: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"code": code, "message": message, "detail": detail or {}}


def _canonicalize_meta(meta: dict[str, Any]) -> None:
    """
    Emit list-accumulated meta fields in a deterministic order.
    """

    warnings = meta.get("warnings")
    if isinstance(warnings, list):
        meta["warnings"] = sorted(
            warnings,
            key=lambda w: (
                str(w.get("code", "")),
                json.dumps(w.get("detail") or {}, sort_keys=True, separators=(",", ":"), ensure_ascii=False),
            ),
        )


def _base_meta(cfg: ReadingConfig, source: str) -> dict[str, Any]:
    return {
        "stage": STAGE,
        "source": source,
        "params": cfg.to_dict(),
        "counts": {},
        "warnings": [],
    }


def _failed(cfg: ReadingConfig, source: str, error: ReadingError) -> ReadingResult:
    meta = _base_meta(cfg, source)
    meta["counts"] = {"rows": 0, "questions": 0}
    return ReadingResult(ok=False, errors=[error], meta=meta, rows=[], structured_text="", text="", questions=None)


def _line_above_floor(line: Line, floor: float) -> tuple[Line | None, int]:
    """
    Drop elements whose confidence is present and below `floor`.
    Confidence is a threshold only, never a weight.
    """

    if floor <= 0.0 or not line.elements:
        return line, 0
    kept = [e for e in line.elements if e.confidence is None or e.confidence >= floor]
    dropped = len(line.elements) - len(kept)
    if dropped == 0:
        return line, 0
    if not kept:
        return None, dropped
    return Line(elements=kept, text=" ".join(e.text for e in kept), bbox=line.bbox), dropped


def _finish(
    rows: list[str], cfg: ReadingConfig, tables: LexiconTables, meta: dict[str, Any]
) -> ReadingResult:
    structural_rows: list[str] = []
    for row in rows:
        structured = normalize_row_structure(row, tables, cfg.normalize)
        # Specimen labels can open a new line inside a row.
        structural_rows.extend(part.strip() for part in structured.split("\n") if part.strip())

    structured_text, classified = fold_rows(structural_rows)
    text = normalize_for_speech(structured_text, tables, cfg.normalize)
    text = keep_nonempty(text, structured_text, stage="normalize_for_speech")

    questions = segment_questions(structured_text, tables) if cfg.segment_questions else None

    if not text.strip():
        meta["warnings"].append(_warning("READ_NO_TEXT_DETECTED", "No readable text in the input"))

    meta["counts"].update(
        {
            "rows": len(classified),
            "questions": 0 if questions is None else len(questions),
            "chars": len(text),
        }
    )
    _canonicalize_meta(meta)
    logger.debug("reading: %d rows -> %d chars", len(classified), len(text))
    return ReadingResult(
        ok=True,
        errors=[],
        meta=meta,
        rows=classified,
        structured_text=structured_text,
        text=text,
        questions=questions,
    )


def _page_rows(page: Page, cfg: ReadingConfig, tables: LexiconTables, meta: dict[str, Any]) -> list[str]:
    positioned: list[PositionedText] = []
    dropped_elements = 0
    dropped_lines = 0
    lines_in = 0
    for line in page.iter_lines():
        lines_in += 1
        kept, dropped = _line_above_floor(line, cfg.layout.confidence_floor)
        dropped_elements += dropped
        if kept is None:
            dropped_lines += 1
            continue
        text = reconstruct_line_text(kept, cfg.layout, common_words=tables.common_short_words)
        positioned.append(PositionedText(text=text, bbox=kept.bbox))

    rows = order_positioned(positioned, row_threshold_px=cfg.layout.row_threshold_px)
    meta["counts"].update(
        {
            "lines_in": lines_in,
            "dropped_elements": dropped_elements,
            "dropped_lines": dropped_lines,
        }
    )
    if not rows and lines_in == 0 and page.text.strip():
        meta["warnings"].append(
            _warning("READ_USED_ENGINE_TEXT", "Page has no line geometry; using the engine's full text")
        )
        rows = [l for l in page.text.splitlines() if l.strip()]
    return rows


def run_reading_on_page(page: Page, config: ReadingConfig | None = None) -> ReadingResult:
    """
    Page -> ordered, normalized ReadingStream (+ rows and optional questions).
    """

    cfg = config or ReadingConfig()
    tables = load_lexicon(cfg.normalize.lexicon_path)
    meta = _base_meta(cfg, "page")
    if page.engine is not None:
        meta["engine"] = page.engine
    rows = _page_rows(page, cfg, tables, meta)
    return _finish(rows, cfg, tables, meta)


def run_reading_on_text(raw_text: str, config: ReadingConfig | None = None) -> ReadingResult:
    """
    Plain text without geometry: each line is one row, already in reading order.
    """

    cfg = config or ReadingConfig()
    tables = load_lexicon(cfg.normalize.lexicon_path)
    meta = _base_meta(cfg, "text")
    rows = [l.strip() for l in raw_text.splitlines() if l.strip()]
    if cfg.layout.fuse_letter_runs:
        rows = [
            fuse_letter_runs(r, tables.common_short_words, max_letters=cfg.layout.max_fused_letters)
            for r in rows
        ]
    meta["counts"]["lines_in"] = len(rows)
    return _finish(rows, cfg, tables, meta)


def run_reading_on_payload(
    payload: Any,
    flavor: RecognitionFlavor | str = RecognitionFlavor.CANONICAL,
    config: ReadingConfig | None = None,
) -> ReadingResult:
    cfg = config or ReadingConfig()
    flavor = RecognitionFlavor(flavor)
    try:
        page = load_page(payload, flavor)
    except RecognitionPayloadError as e:
        return _failed(
            cfg,
            "page",
            ReadingError(code="READ_PAYLOAD_INVALID", message=str(e), detail={"flavor": flavor.value}),
        )
    return run_reading_on_page(page, cfg)


def run_reading_on_payload_file(
    path: Path,
    flavor: RecognitionFlavor | str = RecognitionFlavor.CANONICAL,
    config: ReadingConfig | None = None,
) -> ReadingResult:
    cfg = config or ReadingConfig()
    flavor = RecognitionFlavor(flavor)
    try:
        page = load_page_file(path, flavor)
    except RecognitionPayloadError as e:
        return _failed(
            cfg,
            "page",
            ReadingError(
                code="READ_PAYLOAD_INVALID",
                message=str(e),
                detail={"flavor": flavor.value, "input": str(path)},
            ),
        )
    return run_reading_on_page(page, cfg)


def run_reading_on_frames(
    frames: Sequence[Page | str], config: ReadingConfig | None = None
) -> ReadingResult:
    """
    Several captures of one page: order each capture, merge the captures,
    then run the text chain once on the composite.

    Raises EmptyFrameSetError when `frames` is empty.
    """

    cfg = config or ReadingConfig()
    tables = load_lexicon(cfg.normalize.lexicon_path)
    meta = _base_meta(cfg, "frames")

    frame_texts: list[str] = []
    for frame in frames:
        if isinstance(frame, Page):
            frame_meta = _base_meta(cfg, "page")
            frame_texts.append("\n".join(_page_rows(frame, cfg, tables, frame_meta)))
        else:
            frame_texts.append(str(frame))

    aggregated = aggregate_frames_detailed(frame_texts, cfg.aggregation)
    meta["aggregation"] = {k: v for k, v in aggregated.meta.items() if k != "params"}
    meta["aggregation"]["strategy"] = aggregated.strategy
    rows = [l.strip() for l in aggregated.text.splitlines() if l.strip()]
    meta["counts"]["lines_in"] = len(rows)
    return _finish(rows, cfg, tables, meta)
