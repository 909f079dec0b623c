from __future__ import annotations

import re
from typing import Sequence

from contracts.reading import ReadingRow, RowKind

_OPTION_ROW_RE = re.compile(r"^\([a-d]\)", re.IGNORECASE)
_OPTION_MARKER_RE = re.compile(r"\([a-d]\)", re.IGNORECASE)

# Evaluated top to bottom; the first match wins. Bracketed options are
# handled before this table because they depend on the previous row.
ROW_CLASSIFICATION_TABLE: tuple[tuple[re.Pattern[str], RowKind], ...] = (
    (re.compile(r"^specimen\s*[a-z]", re.IGNORECASE), RowKind.NEW_QUESTION),
    (re.compile(r"^(?:\d+[a-z]?[.):]|question\s*\d+|section\b)", re.IGNORECASE), RowKind.NEW_QUESTION),
    (re.compile(r"^[a-c][.):]", re.IGNORECASE), RowKind.NEW_QUESTION),
    (re.compile(r"^[ivx]+[.):]", re.IGNORECASE), RowKind.SUB_QUESTION),
    (re.compile(r"^\([ivxlcdm]+\)", re.IGNORECASE), RowKind.SUB_QUESTION),
    (re.compile(r"^[d-z][.)]", re.IGNORECASE), RowKind.SUB_QUESTION),
)

_BOUNDARY_PUNCT = ".!?:;,"
_TERMINAL_PUNCT = ".!?"


def classify_row(row: str, previous: str | None = None) -> RowKind:
    """
    Classify one ordered row using at most one row of lookback.
    """

    text = row.strip()
    prev = (previous or "").strip()

    if _OPTION_ROW_RE.match(text):
        return RowKind.SUB_QUESTION if _OPTION_MARKER_RE.search(prev) else RowKind.SEGMENT_START

    for pattern, kind in ROW_CLASSIFICATION_TABLE:
        if pattern.match(text):
            return kind

    if prev.endswith(":"):
        return RowKind.SEGMENT_START
    return RowKind.CONTINUATION


def classify_rows(rows: Sequence[str]) -> list[ReadingRow]:
    out: list[ReadingRow] = []
    previous: str | None = None
    for row in rows:
        text = row.strip()
        if not text:
            continue
        out.append(ReadingRow(text=text, kind=classify_row(text, previous)))
        previous = text
    return out


def _ensure_terminal(text: str) -> str:
    text = text.rstrip().rstrip(",;:").rstrip()
    if not text:
        return ""
    return text if text[-1] in _TERMINAL_PUNCT else text + "."


def fold_rows(rows: Sequence[str]) -> tuple[str, list[ReadingRow]]:
    """
    Fold classified rows into one structural stream.

    Boundary punctuation is only added when the stream does not already end
    in punctuation: "." before a new question or segment, "," before a
    sub-question, nothing before a continuation.
    """

    classified = classify_rows(rows)
    stream = ""
    for i, row in enumerate(classified):
        if i == 0:
            stream = row.text
            continue
        needs_mark = stream[-1] not in _BOUNDARY_PUNCT
        if row.kind in (RowKind.NEW_QUESTION, RowKind.SEGMENT_START) and needs_mark:
            stream += "."
        elif row.kind == RowKind.SUB_QUESTION and needs_mark:
            stream += ","
        stream += " " + row.text
    return _ensure_terminal(stream), classified
