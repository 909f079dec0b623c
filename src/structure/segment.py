from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from contracts.reading import MAX_OPTIONS, OPTION_LABELS, Question
from normalize_text.rules import canonicalize_option_markers
from normalize_text.tables import LexiconTables, load_lexicon

logger = logging.getLogger(__name__)

_QUESTION_MARKER_RE = re.compile(
    r"(?:^|(?<=[.!?] ))"
    r"(?:(?i:question)[ \t]*)?"
    r"(?:(?P<num>\d{1,3})[.):]|\((?P<pnum>\d{1,3})\)|(?P<roman>[IVX]{1,4})[.):]|\((?P<proman>[IVX]{1,4})\))"
    r"(?=\s|$)",
    re.MULTILINE,
)

_PRIMARY_OPTION_RE = re.compile(r"\((?P<label>[a-d])\)")
_LOOSE_OPTION_RE = re.compile(
    r"\$(?P<dollar>[1-4a-d])\)?(?!\w|[.,]\d)"
    r"|\((?P<open>[a-d])(?=[ \t])"
    r"|(?<![\w(])(?P<bare>[a-d])\)"
)

_DOLLAR_MARKER_RE = re.compile(r"\$[1-4a-d]\)?(?!\w)")
_EDGE_REMNANT_RE = re.compile(r"^[)\]]+|[(\[]+$")
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class _Marker:
    start: int
    end: int
    number: int


@dataclass(frozen=True, slots=True)
class _OptionMarker:
    start: int
    end: int
    label: str


def _find_question_markers(text: str, tables: LexiconTables) -> list[_Marker]:
    markers: list[_Marker] = []
    for m in _QUESTION_MARKER_RE.finditer(text):
        digits = m.group("num") or m.group("pnum")
        if digits is not None:
            number = int(digits)
        else:
            value = tables.roman_value(m.group("roman") or m.group("proman"))
            if value is None:
                continue
            number = value
        markers.append(_Marker(start=m.start(), end=m.end(), number=number))
    return markers


def _find_option_markers(body: str, tables: LexiconTables) -> list[_OptionMarker]:
    primary = [_OptionMarker(m.start(), m.end(), m.group("label")) for m in _PRIMARY_OPTION_RE.finditer(body)]
    if primary:
        return primary

    loose: list[_OptionMarker] = []
    for m in _LOOSE_OPTION_RE.finditer(body):
        raw = m.group("dollar") or m.group("open") or m.group("bare")
        label = tables.option_digit_letters.get(raw) if raw.isdigit() else raw
        if label in OPTION_LABELS:
            loose.append(_OptionMarker(m.start(), m.end(), label))
    return loose


def _collapse(s: str) -> str:
    return _WS_RE.sub(" ", s).strip()


def clean_option_text(s: str) -> str:
    s = _DOLLAR_MARKER_RE.sub(" ", s).replace("$", " ")
    s = _collapse(s)
    s = _EDGE_REMNANT_RE.sub("", s).strip()
    return s.rstrip(".,;:").strip()


def clean_question_text(s: str) -> str:
    s = _DOLLAR_MARKER_RE.sub(" ", s).replace("$", " ")
    return _collapse(s).rstrip(".,;:").strip()


def _parse_body(number: int, body: str, tables: LexiconTables) -> Question | None:
    markers = _find_option_markers(body, tables)
    if not markers:
        text = clean_question_text(body)
        return Question(number=number, text=text, options=[]) if text else None

    options: list[str] = []
    seen: set[str] = set()
    for i, om in enumerate(markers):
        end = markers[i + 1].start if i + 1 < len(markers) else len(body)
        if om.label in seen:
            continue
        content = clean_option_text(body[om.end:end])
        if not content:
            continue
        seen.add(om.label)
        options.append(content)
        if len(options) == MAX_OPTIONS:
            break

    text = clean_question_text(body[: markers[0].start])
    if not text and not options:
        return None
    return Question(number=number, text=text, options=options)


def segment_questions(text: str, tables: LexiconTables | None = None) -> list[Question]:
    """
    Split text into numbered questions with up to four options each.

    Option markers are canonicalized first, so "$2" and mid-line "b)" count
    as "(b)" when the text reads like an option list.
    """

    if not text.strip():
        return []
    tbl = tables or load_lexicon()
    text = canonicalize_option_markers(text, tbl)

    markers = _find_question_markers(text, tbl)
    if not markers:
        q = _parse_body(1, text, tbl)
        return [] if q is None else [q]

    if text[: markers[0].start].strip():
        logger.debug("Ignoring %d chars before the first question marker", markers[0].start)

    questions: list[Question] = []
    for i, marker in enumerate(markers):
        end = markers[i + 1].start if i + 1 < len(markers) else len(text)
        q = _parse_body(marker.number, text[marker.end:end], tbl)
        if q is not None:
            questions.append(q)
    return questions
