"""
Recognition boundary (adapters only).

Contract:
- Input: a recognition engine's JSON payload (on-device structured engine,
  cloud document-OCR engine, or the canonical Page shape)
- Output: a `contracts.recognition.Page`
- Constraints: no correction, no reordering beyond what the payload states,
  no text normalization
"""

from .module import load_page, load_page_file

__all__ = ["load_page", "load_page_file"]
