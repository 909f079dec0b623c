"""
Geometry stage: deterministic word reconstruction and row ordering.

- per Line: character/fragment elements -> words (gap-based)
- per Page: Lines -> visual rows (top proximity), each row left-to-right

Block grouping reported by the recognizer is advisory only and ignored for
ordering. No lexical correction happens here beyond letter-run fusion.
"""

from .config import LayoutConfig
from .order_rows import PositionedText, order_positioned, order_rows
from .words import fuse_letter_runs, reconstruct_line_text

__all__ = [
    "LayoutConfig",
    "PositionedText",
    "order_positioned",
    "order_rows",
    "fuse_letter_runs",
    "reconstruct_line_text",
]
