"""
Lexical normalization: OCR-error correction and speech-oriented rewriting.

Table-driven (see data/lexicon.json); every step is a pure text -> text
function guarded by the never-regress rule.
"""

from .config import NormalizeConfig
from .module import NormalizationStep, build_chain, normalize_for_speech, normalize_row_structure
from .tables import LexiconTables, load_lexicon

__all__ = [
    "NormalizeConfig",
    "NormalizationStep",
    "LexiconTables",
    "build_chain",
    "load_lexicon",
    "normalize_for_speech",
    "normalize_row_structure",
]
