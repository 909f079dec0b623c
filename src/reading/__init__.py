"""
Reading pipeline orchestration.

recognition payload -> words per line -> visual rows -> structural
normalization per row -> classified, folded structural stream -> full
lexical chain (ReadingStream) -> optional question segmentation.
"""

from .config import ReadingConfig, load_reading_config
from .module import (
    run_reading_on_frames,
    run_reading_on_page,
    run_reading_on_payload,
    run_reading_on_payload_file,
    run_reading_on_text,
)

__all__ = [
    "ReadingConfig",
    "load_reading_config",
    "run_reading_on_frames",
    "run_reading_on_page",
    "run_reading_on_payload",
    "run_reading_on_payload_file",
    "run_reading_on_text",
]
