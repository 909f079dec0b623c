from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.reading import ReadingResult


def serialize_reading_result(result: ReadingResult) -> str:
    payload: dict[str, Any] = result.to_dict()
    return (
        json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"), indent=2)
        + "\n"
    )


def write_reading_json_artifact(*, result: ReadingResult, out_file: Path) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_reading_result(result), encoding="utf-8")


def read_reading_json_artifact(path: Path) -> ReadingResult:
    return ReadingResult.from_dict(json.loads(path.read_text(encoding="utf-8")))


def summarize(result: ReadingResult) -> dict[str, Any]:
    return {
        "ok": result.ok,
        "rows": len(result.rows),
        "questions": 0 if result.questions is None else len(result.questions),
        "chars": len(result.text),
        "errors": [e.code for e in result.errors],
    }
