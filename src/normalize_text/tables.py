from __future__ import annotations

import json
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_LEXICON_PATH = Path(__file__).resolve().parent / "data" / "lexicon.json"


def _word_alternation(words: list[str]) -> str:
    # Longest first so "farrners" wins over "farrner".
    return "|".join(re.escape(w) for w in sorted(words, key=lambda w: (-len(w), w)))


def _build_number_words(raw: dict[str, Any]) -> dict[int, str]:
    units = [str(w) for w in raw["units"]]
    if len(units) != 20:
        raise ValueError("number_words.units must list the words for 0..19")
    tens = {int(k): str(v) for k, v in raw["tens"].items()}

    out: dict[int, str] = dict(enumerate(units))
    for base in range(20, 100, 10):
        if base not in tens:
            raise ValueError(f"number_words.tens is missing {base}")
        out[base] = tens[base]
        for unit in range(1, 10):
            out[base + unit] = f"{tens[base]}-{units[unit]}"
    if raw.get("hundred"):
        out[100] = str(raw["hundred"])
    return out


@dataclass(frozen=True, slots=True, eq=False)
class LexiconTables:
    """
    Immutable lexical tables shared read-only by every normalization call.

    Patterns are compiled once here so the rule functions stay table-driven.
    """

    ocr_misreads: Mapping[str, str]
    inword_digit_letters: Mapping[str, str]
    spaced_words: tuple[str, ...]
    common_short_words: frozenset[str]
    roman_numerals: Mapping[str, int]
    number_words: Mapping[int, str]
    option_digit_letters: Mapping[str, str]
    symbol_words: Mapping[str, str]
    abbreviations: Mapping[str, str]

    misread_re: re.Pattern[str]
    inword_digit_re: re.Pattern[str]
    spaced_word_res: tuple[tuple[re.Pattern[str], str], ...]

    def number_word(self, n: int) -> str | None:
        return self.number_words.get(n)

    def roman_value(self, numeral: str) -> int | None:
        return self.roman_numerals.get(numeral.lower())

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "LexiconTables":
        try:
            misreads = {str(k).lower(): str(v) for k, v in d["ocr_misreads"].items()}
            digit_letters = {str(k): str(v) for k, v in d["inword_digit_letters"].items()}
            spaced = tuple(sorted({str(w).lower() for w in d["spaced_words"]}))
            common = frozenset(str(w).lower() for w in d["common_short_words"])
            roman = {str(k).lower(): int(v) for k, v in d["roman_numerals"].items()}
            numbers = _build_number_words(d["number_words"])
            option_letters = {str(k): str(v).lower() for k, v in d["option_digit_letters"].items()}
            symbols = {str(k): str(v) for k, v in d["symbol_words"].items()}
            abbreviations = {str(k).lower(): str(v) for k, v in (d.get("abbreviations") or {}).items()}
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid lexicon: {e}") from e

        for target in misreads.values():
            if target.lower() in misreads:
                raise ValueError(f"Lexicon misread target {target!r} is itself a misread key")

        misread_re = (
            re.compile(rf"\b(?:{_word_alternation(list(misreads))})\b", re.IGNORECASE)
            if misreads
            else re.compile(r"(?!)")
        )
        digits = "".join(re.escape(k) for k in sorted(digit_letters))
        inword_digit_re = re.compile(rf"(?<=[a-z])[{digits}](?=[a-z])") if digits else re.compile(r"(?!)")
        spaced_res = tuple(
            (re.compile(r"\b" + r"[ \t]+".join(re.escape(c) for c in w) + r"\b", re.IGNORECASE), w)
            for w in spaced
            if len(w) >= 2
        )

        return LexiconTables(
            ocr_misreads=MappingProxyType(misreads),
            inword_digit_letters=MappingProxyType(digit_letters),
            spaced_words=spaced,
            common_short_words=common,
            roman_numerals=MappingProxyType(roman),
            number_words=MappingProxyType(numbers),
            option_digit_letters=MappingProxyType(option_letters),
            symbol_words=MappingProxyType(symbols),
            abbreviations=MappingProxyType(abbreviations),
            misread_re=misread_re,
            inword_digit_re=inword_digit_re,
            spaced_word_res=spaced_res,
        )


def read_lexicon(path: Path) -> LexiconTables:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Lexicon must be a JSON object: {path}")
    return LexiconTables.from_dict(raw)


@lru_cache(maxsize=8)
def _load_cached(path_str: str) -> LexiconTables:
    return read_lexicon(Path(path_str))


def load_lexicon(path: Path | str | None = None) -> LexiconTables:
    """
    Load lexical tables; results are cached per resolved path for the process lifetime.
    """

    p = DEFAULT_LEXICON_PATH if path is None else Path(path).resolve()
    return _load_cached(str(p))
