from __future__ import annotations

from rapidfuzz import fuzz


def normalize_line(s: str) -> str:
    return " ".join(s.lower().split())


def line_similarity(a: str, b: str, *, containment_min_length_ratio: float = 0.6) -> float:
    """
    Similarity of two captured lines in [0, 1].

    Maximum of the edit-distance ratio and, when the lengths are comparable,
    the best substring alignment (partial ratio).
    """

    na, nb = normalize_line(a), normalize_line(b)
    if not na and not nb:
        return 1.0
    if not na or not nb:
        return 0.0

    score = fuzz.ratio(na, nb) / 100.0
    shorter, longer = sorted((len(na), len(nb)))
    if shorter / longer >= containment_min_length_ratio:
        score = max(score, fuzz.partial_ratio(na, nb) / 100.0)
    return score
