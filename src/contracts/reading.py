from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

MAX_OPTIONS = 4
OPTION_LABELS = ("a", "b", "c", "d")


class RowKind(str, Enum):
    NEW_QUESTION = "NEW_QUESTION"
    SUB_QUESTION = "SUB_QUESTION"
    SEGMENT_START = "SEGMENT_START"  # option list opener, or row after a list-introducing colon
    CONTINUATION = "CONTINUATION"


class EmptyFrameSetError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class ReadingError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class ReadingRow:
    text: str
    kind: RowKind

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "kind": self.kind.value}

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "ReadingRow":
        return ReadingRow(text=str(d["text"]), kind=RowKind(str(d["kind"])))


@dataclass(frozen=True, slots=True)
class Question:
    number: int
    text: str
    options: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.options) > MAX_OPTIONS:
            raise ValueError(f"Question {self.number} has {len(self.options)} options; at most {MAX_OPTIONS} allowed")

    @property
    def has_options(self) -> bool:
        return bool(self.options)

    def labeled_options(self) -> list[tuple[str, str]]:
        return list(zip(OPTION_LABELS, self.options))

    def to_dict(self) -> dict[str, Any]:
        return {"number": self.number, "text": self.text, "options": list(self.options)}

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Question":
        return Question(
            number=int(d["number"]),
            text=str(d.get("text", "")),
            options=[str(x) for x in (d.get("options") or [])],
        )


@dataclass(frozen=True, slots=True)
class ReadingResult:
    """
    Output of one pipeline run over one capture (or one aggregated frame set).

    `structured_text` keeps canonical option markers and question numbers for
    segmentation; `text` is the speech-ready ReadingStream.
    """

    ok: bool
    errors: list[ReadingError]
    meta: dict[str, Any]
    rows: list[ReadingRow]
    structured_text: str
    text: str
    questions: list[Question] | None = None

    @property
    def is_empty(self) -> bool:
        return self.text.strip() == ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "ok": self.ok,
            "errors": [asdict(e) for e in self.errors],
            "meta": dict(self.meta),
            "rows": [r.to_dict() for r in self.rows],
            "structured_text": self.structured_text,
            "text": self.text,
        }
        out["questions"] = None if self.questions is None else [q.to_dict() for q in self.questions]
        return out

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "ReadingResult":
        questions_raw = d.get("questions")
        return ReadingResult(
            ok=bool(d.get("ok", False)),
            errors=[ReadingError(**e) for e in (d.get("errors") or [])],
            meta=dict(d.get("meta") or {}),
            rows=[ReadingRow.from_dict(r) for r in (d.get("rows") or [])],
            structured_text=str(d.get("structured_text", "")),
            text=str(d.get("text", "")),
            questions=(None if questions_raw is None else [Question.from_dict(q) for q in questions_raw]),
        )


@dataclass(frozen=True, slots=True)
class AggregationResult:
    text: str
    strategy: str  # "single" | "line_merge" | "word_union"
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "strategy": self.strategy, "meta": dict(self.meta)}
