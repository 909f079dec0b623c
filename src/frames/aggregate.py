from __future__ import annotations

import logging
import re
from typing import Iterable

from contracts.fallback import keep_nonempty
from contracts.reading import AggregationResult, EmptyFrameSetError

from .config import AggregationConfig
from .similarity import line_similarity

logger = logging.getLogger(__name__)

_SENTENCE_PUNCT_RE = re.compile(r"[.!?]")
_NON_WORD_RE = re.compile(r"[^\w]+")


def completeness_score(text: str) -> int:
    words = len(text.split())
    return words * 10 + (5 if _SENTENCE_PUNCT_RE.search(text) else 0) + len(text)


def _word_key(word: str) -> str:
    return _NON_WORD_RE.sub("", word.lower())


def _frame_lines(frame: str) -> list[str]:
    return [l.strip() for l in frame.splitlines() if l.strip()]


def _merge_lines(frames_lines: list[list[str]], cfg: AggregationConfig) -> tuple[list[str], int]:
    merged: list[str] = []
    duplicates = 0
    for lines in frames_lines:
        for line in lines:
            match_idx: int | None = None
            for i, kept in enumerate(merged):
                sim = line_similarity(
                    kept, line, containment_min_length_ratio=cfg.containment_min_length_ratio
                )
                if sim >= cfg.duplicate_threshold:
                    match_idx = i
                    break
            if match_idx is None:
                merged.append(line)
                continue
            duplicates += 1
            if len(line) > len(merged[match_idx]):
                merged[match_idx] = line
    return merged, duplicates


def _recover_words(frames: list[str], composite: str, min_frames: int) -> list[str]:
    present = {_word_key(w) for w in composite.split()}
    seen_in: dict[str, int] = {}
    surface: dict[str, str] = {}
    order: list[str] = []
    for frame in frames:
        for key in {_word_key(w) for w in frame.split()}:
            seen_in[key] = seen_in.get(key, 0) + 1
        for w in frame.split():
            key = _word_key(w)
            if key and key not in surface:
                surface[key] = w.strip(".,;:!?")
                order.append(key)
    return [
        surface[k]
        for k in order
        if k not in present and seen_in.get(k, 0) >= min_frames and surface[k]
    ]


def _word_union(frames: list[str]) -> str:
    best = frames[0]
    best_score = completeness_score(best)
    for f in frames[1:]:
        score = completeness_score(f)
        if score > best_score:
            best, best_score = f, score

    base = {w.lower() for w in best.split()}
    added: set[str] = set()
    extra: list[str] = []
    for f in frames:
        if f is best:
            continue
        for w in f.split():
            key = w.lower()
            if key not in base and key not in added:
                extra.append(w)
                added.add(key)
    merged = best.strip()
    if extra:
        merged = f"{merged} {' '.join(extra)}".strip()
    return merged


def aggregate_frames_detailed(
    frames: Iterable[str], config: AggregationConfig | None = None
) -> AggregationResult:
    """
    Merge several captures of the same page into one composite text.

    Raises EmptyFrameSetError when `frames` is empty.
    """

    cfg = config or AggregationConfig()
    frames = [str(f) for f in frames]
    if not frames:
        raise EmptyFrameSetError("Frame set must contain at least one frame")

    meta: dict[str, object] = {"frames": len(frames), "params": cfg.to_dict()}
    if len(frames) == 1:
        return AggregationResult(text=frames[0], strategy="single", meta=meta)

    frames_lines = [_frame_lines(f) for f in frames]
    merged, duplicates = _merge_lines(frames_lines, cfg)
    composite = "\n".join(merged)
    meta.update(
        {
            "lines_in": sum(len(ls) for ls in frames_lines),
            "lines_kept": len(merged),
            "duplicates_merged": duplicates,
        }
    )

    single_line_frames = all(len(ls) <= 1 for ls in frames_lines)
    if not composite.strip() or (single_line_frames and len(merged) > 1):
        text = _word_union(frames)
        logger.debug("Frame merge fell back to word union (%d frames)", len(frames))
        meta["recovered_words"] = 0
        return AggregationResult(
            text=keep_nonempty(text, composite, stage="word_union"), strategy="word_union", meta=meta
        )

    recovered: list[str] = []
    if len(composite) < cfg.recovery_max_chars:
        recovered = _recover_words(frames, composite, cfg.min_frames_for_recovery)
        if recovered:
            composite = f"{composite} {' '.join(recovered)}"
    meta["recovered_words"] = len(recovered)
    logger.debug(
        "Merged %d frames: %d lines kept, %d duplicates, %d words recovered",
        len(frames),
        len(merged),
        duplicates,
        len(recovered),
    )
    return AggregationResult(text=composite, strategy="line_merge", meta=meta)


def aggregate_frames(frames: Iterable[str], config: AggregationConfig | None = None) -> str:
    return aggregate_frames_detailed(frames, config).text
