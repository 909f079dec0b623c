from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache, partial
from typing import Callable

from contracts.fallback import never_regress

from . import rules
from .config import NormalizeConfig
from .tables import LexiconTables, load_lexicon

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NormalizationStep:
    name: str
    fn: Callable[[str], str]
    structural: bool  # part of the per-row structural phase


def _step(name: str, fn: Callable[[str], str], *, structural: bool) -> NormalizationStep:
    return NormalizationStep(name=name, fn=never_regress(fn, name=name), structural=structural)


@lru_cache(maxsize=16)
def build_chain(tables: LexiconTables, config: NormalizeConfig) -> tuple[NormalizationStep, ...]:
    """
    Ordered normalization chain. Every step is wrapped so that it can never
    turn non-empty text into empty text.

    Structural steps never touch line-leading markers; they are safe to run
    per row before classification.
    """

    steps = [
        _step("correct_misreads", partial(rules.correct_misreads, tables=tables), structural=True),
        _step("despace_words", partial(rules.despace_words, tables=tables), structural=True),
        _step("normalize_whitespace", rules.normalize_whitespace, structural=True),
        _step("repair_punctuation", rules.repair_punctuation, structural=True),
        _step("format_specimen_labels", rules.format_specimen_labels, structural=True),
        _step(
            "expand_symbols_and_numbers",
            partial(rules.expand_symbols_and_numbers, tables=tables, spell=config.spell_numbers),
            structural=False,
        ),
    ]
    if config.expand_roman_numerals:
        steps.append(
            _step("expand_roman_numerals", partial(rules.expand_roman_numerals, tables=tables), structural=False)
        )
    steps.append(
        _step(
            "canonicalize_option_markers",
            partial(rules.canonicalize_option_markers, tables=tables),
            structural=True,
        )
    )
    if config.format_options_for_speech:
        steps.append(_step("format_options_for_speech", rules.format_options_for_speech, structural=False))
    steps.append(
        _step(
            "suppress_currency_glyphs",
            partial(rules.suppress_currency_glyphs, tables=tables, spell=config.spell_numbers),
            structural=False,
        )
    )
    if config.capitalize_sentences:
        steps.append(_step("capitalize_sentences", rules.capitalize_sentences, structural=False))
    steps.append(_step("tidy", rules.tidy, structural=True))
    return tuple(steps)


def _resolve(
    tables: LexiconTables | None, config: NormalizeConfig | None
) -> tuple[LexiconTables, NormalizeConfig]:
    cfg = config or NormalizeConfig()
    return (tables or load_lexicon(cfg.lexicon_path)), cfg


def _run(steps: tuple[NormalizationStep, ...], text: str) -> str:
    for step in steps:
        before = text
        text = step.fn(text)
        if text != before:
            logger.debug("normalize step %s changed %d -> %d chars", step.name, len(before), len(text))
    return text


def normalize_for_speech(
    text: str, tables: LexiconTables | None = None, config: NormalizeConfig | None = None
) -> str:
    """
    Full chain: raw ordered text -> speech-ready text.

    Idempotent on its own output; never empty for non-empty input.
    """

    if not text.strip():
        return ""
    tbl, cfg = _resolve(tables, config)
    return _run(build_chain(tbl, cfg), text)


def normalize_row_structure(
    text: str, tables: LexiconTables | None = None, config: NormalizeConfig | None = None
) -> str:
    """
    Structural phase only: fixes misreads, spacing and punctuation and
    canonicalizes option markers while keeping question numbers as digits.
    """

    if not text.strip():
        return ""
    tbl, cfg = _resolve(tables, config)
    return _run(tuple(s for s in build_chain(tbl, cfg) if s.structural), text)
