"""
Structural awareness: row classification, question/option segmentation and
question speech formatting.
"""

from .classify import ROW_CLASSIFICATION_TABLE, classify_row, classify_rows, fold_rows
from .segment import segment_questions
from .speech import format_question_for_speech, format_questions_for_speech, number_to_words

__all__ = [
    "ROW_CLASSIFICATION_TABLE",
    "classify_row",
    "classify_rows",
    "fold_rows",
    "segment_questions",
    "format_question_for_speech",
    "format_questions_for_speech",
    "number_to_words",
]
