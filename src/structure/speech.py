from __future__ import annotations

from typing import Iterable

from contracts.reading import Question
from normalize_text.tables import LexiconTables, load_lexicon


def number_to_words(n: int, tables: LexiconTables | None = None) -> str:
    word = (tables or load_lexicon()).number_word(n)
    return str(n) if word is None else word


def _sentence(s: str) -> str:
    s = s.replace("$", " ").strip()
    s = " ".join(s.split())
    if not s:
        return ""
    return s if s[-1] in ".!?" else s + "."


def format_question_for_speech(question: Question, tables: LexiconTables | None = None) -> str:
    """
    "Question one. Name the soil. Option a, sandy. Option b, clay."
    """

    parts = [f"Question {number_to_words(question.number, tables)}."]
    if question.text.strip():
        parts.append(_sentence(question.text))
    for label, option in question.labeled_options():
        parts.append(f"Option {label}, {_sentence(option)}")
    return " ".join(p for p in parts if p)


def format_questions_for_speech(questions: Iterable[Question], tables: LexiconTables | None = None) -> str:
    return " ".join(format_question_for_speech(q, tables) for q in questions)
