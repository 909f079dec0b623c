from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from contracts.recognition import BBox, Block, Line, Page

from .config import LayoutConfig

logger = logging.getLogger(__name__)

_OPENING = "([{"
_CLOSING = ")]}"


@dataclass(frozen=True, slots=True)
class PositionedText:
    text: str
    bbox: BBox


def _join_row(parts: list[str]) -> str:
    out = ""
    for part in parts:
        if not out:
            out = part
        elif out[-1] in _OPENING or part[0] in _CLOSING:
            out += part
        else:
            out += " " + part
    return out


def _flatten(source: Page | Sequence[Block] | Sequence[Line]) -> list[Line]:
    if isinstance(source, Page):
        return list(source.iter_lines())
    lines: list[Line] = []
    for item in source:
        if isinstance(item, Block):
            lines.extend(item.lines)
        elif isinstance(item, Line):
            lines.append(item)
        else:
            raise TypeError(f"Expected Block or Line, got {type(item).__name__}")
    return lines


def order_positioned(items: Iterable[PositionedText], *, row_threshold_px: float = 15.0) -> list[str]:
    """
    Merge positioned texts into visual rows, top-to-bottom, each row left-to-right.

    A new row starts when an item's top differs from the row's first top by
    at least `row_threshold_px`. Blank texts are skipped.
    """

    # Deterministic sweep: top asc, tie left asc, tie text
    sweep = sorted(
        (PositionedText(text=it.text.strip(), bbox=it.bbox) for it in items if it.text.strip()),
        key=lambda it: (it.bbox.top, it.bbox.left, it.text),
    )

    rows: list[list[PositionedText]] = []
    row_top: float | None = None
    for it in sweep:
        if row_top is None or abs(it.bbox.top - row_top) >= row_threshold_px:
            rows.append([it])
            row_top = it.bbox.top
        else:
            rows[-1].append(it)

    out: list[str] = []
    for row in rows:
        row.sort(key=lambda it: (it.bbox.left, it.bbox.top))
        out.append(_join_row([it.text for it in row]))
    logger.debug("Ordered %d items into %d rows", len(sweep), len(out))
    return out


def order_rows(
    source: Page | Sequence[Block] | Sequence[Line], config: LayoutConfig | None = None
) -> list[str]:
    """
    Spatially order the recognizer's Lines into row strings using each
    Line's own text. Use `order_positioned` to order reconstructed texts.
    """

    cfg = config or LayoutConfig()
    return order_positioned(
        (PositionedText(text=l.text, bbox=l.bbox) for l in _flatten(source)),
        row_threshold_px=cfg.row_threshold_px,
    )
