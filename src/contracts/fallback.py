from __future__ import annotations

import functools
import logging
from typing import Callable

logger = logging.getLogger(__name__)

TextStage = Callable[[str], str]


def keep_nonempty(candidate: str, fallback: str, *, stage: str = "stage") -> str:
    """
    Never-regress rule: a stage may not turn non-empty input into empty output.

    Returns `candidate` unless it is blank while `fallback` is not.
    """

    if fallback.strip() and not candidate.strip():
        logger.debug("%s degenerated to empty output; keeping its input", stage)
        return fallback
    return candidate


def never_regress(stage: TextStage, *, name: str | None = None) -> TextStage:
    """
    Wrap a text -> text stage so an empty result falls back to the stage input.
    """

    label = name or getattr(stage, "__name__", "stage")

    @functools.wraps(stage)
    def guarded(text: str) -> str:
        return keep_nonempty(stage(text), text, stage=label)

    return guarded
