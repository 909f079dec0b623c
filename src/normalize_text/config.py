from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NormalizeConfig:
    """
    Lexical normalization switches.

    The structural phase (misreads, de-spacing, whitespace, punctuation,
    specimen labels, option canonicalization, tidy) always runs; these
    flags only affect the speech-oriented steps of the full chain.
    """

    spell_numbers: bool = True
    expand_roman_numerals: bool = True
    format_options_for_speech: bool = True
    capitalize_sentences: bool = True

    # Alternate lexicon JSON (localization); None uses the packaged tables.
    lexicon_path: str | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.lexicon_path is not None and not str(self.lexicon_path).strip():
            raise ValueError("lexicon_path must be a non-empty path or None")

    def to_dict(self) -> dict[str, object]:
        return {
            "spell_numbers": self.spell_numbers,
            "expand_roman_numerals": self.expand_roman_numerals,
            "format_options_for_speech": self.format_options_for_speech,
            "capitalize_sentences": self.capitalize_sentences,
            "lexicon_path": self.lexicon_path,
        }
