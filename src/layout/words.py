from __future__ import annotations

import re
from typing import AbstractSet

from contracts.fallback import keep_nonempty
from contracts.recognition import Element, Line
from normalize_text.tables import load_lexicon

from .config import LayoutConfig

_CLOSING_PUNCT_RE = re.compile(r"^[.,!?;:)\]}]+$")
_OPENING_PUNCT_RE = re.compile(r"^[(\[{]+$")
_SPACE_BEFORE_CLOSING_RE = re.compile(r"\s+([.,!?;:)\]}])")
_SPACE_AFTER_OPENING_RE = re.compile(r"([(\[{])\s+")
_WS_RE = re.compile(r"\s+")
_EDGE_PUNCT = "([{.,!?;:)]}"


def _is_single_letter(token: str) -> bool:
    return len(token) == 1 and token.isascii() and token.isalpha()


def _mean_char_width(elements: list[Element], default: float) -> float:
    per_char = [e.bbox.width() / len(e.text.strip()) for e in elements if e.text.strip()]
    return sum(per_char) / len(per_char) if per_char else default


def fuse_letter_runs(
    text: str, common_words: AbstractSet[str] | None = None, *, max_letters: int = 5
) -> str:
    """
    Fuse runs of 2+ single-letter tokens: "A R E" -> "are".

    A run spelling a known short word always fuses (lower-cased); any other
    run fuses only when it is at most `max_letters` long.
    """

    if common_words is None:
        common_words = load_lexicon().common_short_words

    tokens = text.split()
    out: list[str] = []
    i = 0
    while i < len(tokens):
        if not _is_single_letter(tokens[i]):
            out.append(tokens[i])
            i += 1
            continue
        j = i
        while j < len(tokens) and _is_single_letter(tokens[j]):
            j += 1
        run = tokens[i:j]
        combined = "".join(run).lower()
        if len(run) >= 2 and (combined in common_words or len(run) <= max_letters):
            out.append(combined)
        else:
            out.extend(run)
        i = j
    return " ".join(out)


def _clean(text: str) -> str:
    cleaned = _WS_RE.sub(" ", text)
    cleaned = _SPACE_BEFORE_CLOSING_RE.sub(r"\1", cleaned)
    cleaned = _SPACE_AFTER_OPENING_RE.sub(r"\1", cleaned)
    return cleaned.strip()


def _join_word(pieces: list[str], common_words: AbstractSet[str] | None) -> str:
    """
    Join the elements of one gap-delimited word.

    Adjacent single letters are concatenated since geometry already put them
    in one word; other pieces keep a separating space. A spelled-out capital
    run that is a known short word is lower-cased ("ARE" -> "are").
    """

    cores = [p.strip(_EDGE_PUNCT) for p in pieces]
    out = pieces[0]
    for i in range(1, len(pieces)):
        glue = _is_single_letter(cores[i - 1]) and _is_single_letter(cores[i])
        out += ("" if glue else " ") + pieces[i]

    if len(pieces) >= 2 and all(_is_single_letter(c) for c in cores):
        if common_words is None:
            common_words = load_lexicon().common_short_words
        spelled = "".join(cores)
        if spelled.isupper() and spelled.lower() in common_words:
            out = out.replace(spelled, spelled.lower())
    return out


def reconstruct_line_text(
    line: Line,
    config: LayoutConfig | None = None,
    *,
    common_words: AbstractSet[str] | None = None,
) -> str:
    """
    Regroup a Line's elements into words using horizontal gaps.

    Gaps wider than `word_break_k` x mean character width break words;
    closing punctuation attaches to the current word. Single letters inside
    one word are fused regardless of run length. Lines with fewer than two
    elements return the recognizer's own text.
    """

    cfg = config or LayoutConfig()
    if len(line.elements) <= 1:
        return line.text

    ordered = sorted(line.elements, key=lambda e: (e.bbox.left, e.bbox.top))
    threshold = _mean_char_width(ordered, cfg.default_char_width_px) * cfg.word_break_k

    words: list[list[str]] = []
    current: list[str] = []
    last_right: float | None = None
    for el in ordered:
        text = el.text.strip()
        if not text:
            continue
        gap = float("inf") if last_right is None else el.bbox.left - last_right

        if _CLOSING_PUNCT_RE.match(text) and current:
            current[-1] += text
        elif _OPENING_PUNCT_RE.match(text) and not current:
            current = [text]
        elif gap > threshold and current:
            words.append(current)
            current = [text]
        else:
            current.append(text)
        last_right = el.bbox.right
    if current:
        words.append(current)

    if cfg.fuse_letter_runs:
        joined = [_join_word(w, common_words) for w in words]
    else:
        joined = [" ".join(w) for w in words]
    return keep_nonempty(_clean(" ".join(joined)), line.text, stage="reconstruct_line_text")
