from __future__ import annotations

import re
from functools import lru_cache

from .tables import LexiconTables

_HSPACE_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")

_SPACE_BEFORE_PUNCT_RE = re.compile(r"[ \t]+([.,!?;:])")
_DOUBLED_PUNCT_RE = re.compile(r"([.,!?;:])(?:[ \t]*[.,!?;:])+")
_MISSING_SPACE_RE = re.compile(r"([.!?,;:])([A-Za-z])")

_SPECIMEN_RE = re.compile(r"[ \t]*\bspecimen[ \t]+([a-z])(?![A-Za-z])[ \t]*[-:.]?[ \t]*", re.IGNORECASE)

_BLANK_RE = re.compile(r"_{2,}")
_MARKS_RE = re.compile(r"\((\d+)[ \t]*marks?\)(?:[ \t]*[.,;:])?", re.IGNORECASE)
# Question numbers only open at line start or after a sentence end.
_QUESTION_NUMBER_RE = re.compile(r"(?:^|(?<=[.!?] ))(\d{1,3})[.):](?=\s|$)", re.MULTILINE)
_QUESTION_WORD_RE = re.compile(r"\b(question)[ \t]+(\d{1,3})\b", re.IGNORECASE)
_NUMBER_BEFORE_PERIOD_RE = re.compile(r"(?<![$\d.,])(?<!\d, )\b(\d{1,3})\.(?=\s|$)")

_ROMAN_PAREN_RE = re.compile(r"\(([ivx]{1,4})\)", re.IGNORECASE)
_ROMAN_BARE_RE = re.compile(r"(?:^|(?<=[.!?;,] ))([ivx]{1,4})[.)](?=\s|$)", re.IGNORECASE | re.MULTILINE)
# After a colon only when a lower-case word follows, so "A: v." output is left alone.
_ROMAN_AFTER_COLON_RE = re.compile(r"(?<=: )([ivx]{1,4})[.)](?=[ \t]+(?-i:[a-z]))", re.IGNORECASE)

_UPPER_OPTION_RE = re.compile(r"\(([A-D])\)")
_UNCLOSED_OPTION_RE = re.compile(r"\(([a-d])(?=[ \t])")
_DOLLAR_OPTION_RE = re.compile(r"\$([1-4a-d])\)?(?!\w|[.,]\d)")
_BARE_OPTION_RE = re.compile(r"(?<![\w(])([a-d])\)")
_OPTION_TOKEN_RE = re.compile(r"\([a-dA-D]\)|\([a-d](?=[ \t])|\$[1-4a-d]\)?(?!\w|[.,]\d)|(?<![\w(])[a-d]\)")
_LINE_LEADING_DOLLAR_RE = re.compile(r"^[ \t]*\$[1-4a-d]\)?(?!\w|[.,]\d)", re.MULTILINE)
_CANONICAL_OPTION_RE = re.compile(r"\(([a-d])\)[ \t]*(.*?)(?=[ \t]*\([a-d]\)|$)", re.MULTILINE)

_SINGLE_UNDERSCORE_RE = re.compile(r"(?<!_)_(?!_)")
_SENTENCE_START_RE = re.compile(r"(^[ \t]*|[.!?][ \t]+|\n[ \t]*)([a-z])")


def _match_case(source: str, target: str) -> str:
    if source[:1].isupper():
        return target[:1].upper() + target[1:]
    return target


def correct_misreads(text: str, tables: LexiconTables) -> str:
    text = tables.misread_re.sub(lambda m: _match_case(m.group(0), tables.ocr_misreads[m.group(0).lower()]), text)
    return tables.inword_digit_re.sub(lambda m: tables.inword_digit_letters[m.group(0)], text)


def despace_words(text: str, tables: LexiconTables) -> str:
    for pattern, word in tables.spaced_word_res:
        text = pattern.sub(lambda m, w=word: _match_case(m.group(0), w), text)
    return text


def normalize_whitespace(text: str, tables: LexiconTables | None = None) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _HSPACE_RE.sub(" ", text)
    text = "\n".join(line.rstrip() for line in text.split("\n"))
    return _BLANK_LINES_RE.sub("\n\n", text).strip()


def repair_punctuation(text: str, tables: LexiconTables | None = None) -> str:
    text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
    text = _DOUBLED_PUNCT_RE.sub(r"\1", text)
    return _MISSING_SPACE_RE.sub(r"\1 \2", text)


def format_specimen_labels(text: str, tables: LexiconTables | None = None) -> str:
    """
    "soil specimen c - sandy" -> "soil\\nSpecimen C: sandy".
    """

    def _label(m: re.Match[str]) -> str:
        label = f"Specimen {m.group(1).upper()}: "
        if m.start() == 0 or text[m.start() - 1] == "\n":
            return label
        return "\n" + label

    return _SPECIMEN_RE.sub(_label, text)


def spell_numbers(text: str, tables: LexiconTables) -> str:
    """
    Spell out question numbers, "Question N" and numbers closing a sentence.

    Only values present in the number-word table are spelled; the rest stay digits.
    """

    def _marker(m: re.Match[str]) -> str:
        word = tables.number_word(int(m.group(1)))
        return m.group(0) if word is None else f"{word}."

    def _question(m: re.Match[str]) -> str:
        word = tables.number_word(int(m.group(2)))
        return m.group(0) if word is None else f"{m.group(1)} {word}"

    text = _QUESTION_NUMBER_RE.sub(_marker, text)
    text = _QUESTION_WORD_RE.sub(_question, text)
    return _NUMBER_BEFORE_PERIOD_RE.sub(_marker, text)


@lru_cache(maxsize=64)
def _abbreviation_patterns(abbr: str) -> tuple[re.Pattern[str], re.Pattern[str]]:
    body = re.escape(abbr)
    tail = "" if abbr.endswith(".") else r"\b"
    at_sentence_end = re.compile(rf"\b{body}{tail}(?=[ \t]*(?:\n|$)|[ \t]+(?-i:[A-Z]))", re.IGNORECASE)
    anywhere = re.compile(rf"\b{body}{tail}", re.IGNORECASE)
    return at_sentence_end, anywhere


def expand_symbols_and_numbers(text: str, tables: LexiconTables, *, spell: bool = True) -> str:
    for symbol, words in tables.symbol_words.items():
        text = text.replace(symbol, words)
    text = _BLANK_RE.sub(" blank ", text)

    def _marks(m: re.Match[str]) -> str:
        n = int(m.group(1))
        return f"{m.group(1)} {'mark' if n == 1 else 'marks'}. "

    text = _MARKS_RE.sub(_marks, text)

    for abbr, expansion in tables.abbreviations.items():
        at_sentence_end, anywhere = _abbreviation_patterns(abbr)
        if abbr.endswith("."):
            text = at_sentence_end.sub(expansion + ".", text)
        text = anywhere.sub(expansion, text)

    return spell_numbers(text, tables) if spell else text


def expand_roman_numerals(text: str, tables: LexiconTables) -> str:
    """
    Roman list markers "(ii)", "ii)" and "ii." become "(2)"; unmapped numerals pass through.
    """

    def _paren(m: re.Match[str]) -> str:
        value = tables.roman_value(m.group(1))
        return m.group(0) if value is None else f"({value})"

    text = _ROMAN_PAREN_RE.sub(_paren, text)
    text = _ROMAN_BARE_RE.sub(_paren, text)
    return _ROMAN_AFTER_COLON_RE.sub(_paren, text)


def in_option_context(text: str) -> bool:
    if _LINE_LEADING_DOLLAR_RE.search(text):
        return True
    return len(_OPTION_TOKEN_RE.findall(text)) >= 2


def canonicalize_option_markers(text: str, tables: LexiconTables) -> str:
    """
    Rewrite option markers to "(a)".."(d)".

    "(A)" is always lower-cased. "(a", "$1", "$a" and a mid-line "a)" are only
    rewritten in option context; outside it a line-leading "a)" stays a
    lettered section.
    """

    text = _UPPER_OPTION_RE.sub(lambda m: f"({m.group(1).lower()})", text)
    if not in_option_context(text):
        return text

    def _dollar(m: re.Match[str]) -> str:
        key = m.group(1)
        letter = tables.option_digit_letters.get(key) if key.isdigit() else key
        return m.group(0) if letter is None else f"({letter})"

    text = _UNCLOSED_OPTION_RE.sub(r"(\1)", text)
    text = _DOLLAR_OPTION_RE.sub(_dollar, text)
    return _BARE_OPTION_RE.sub(r"(\1)", text)


def format_options_for_speech(text: str, tables: LexiconTables | None = None) -> str:
    """
    "(a) sandy, (b) clay" -> "A: sandy. B: clay."
    """

    def _fmt(m: re.Match[str]) -> str:
        label = m.group(1).upper()
        content = m.group(2).strip().rstrip(",;:").rstrip()
        if not content:
            return f"{label}. "
        end = "" if content[-1] in ".!?" else "."
        return f"{label}: {content}{end} "

    return _CANONICAL_OPTION_RE.sub(_fmt, text)


def suppress_currency_glyphs(text: str, tables: LexiconTables, *, spell: bool = True) -> str:
    text = _DOLLAR_OPTION_RE.sub("", text)
    text = text.replace("$", " ")
    text = _SINGLE_UNDERSCORE_RE.sub(" ", text)
    # Removing "$" can expose "5." style numbers; spell them by the same rules.
    return spell_numbers(text, tables) if spell else text


def capitalize_sentences(text: str, tables: LexiconTables | None = None) -> str:
    return _SENTENCE_START_RE.sub(lambda m: m.group(1) + m.group(2).upper(), text)


def tidy(text: str, tables: LexiconTables | None = None) -> str:
    text = _HSPACE_RE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
    text = _DOUBLED_PUNCT_RE.sub(r"\1", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    return _BLANK_LINES_RE.sub("\n\n", text).strip()
