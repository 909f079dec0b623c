#!/usr/bin/env python3
"""
debug_print_reading.py

Purpose
- Inspect reading artifacts (written by `readaloud-read` / `readaloud-frames`) in the terminal.

Features
- Prints a compact summary (ok, errors, counts, warnings, aggregation meta).
- Lists the ordered rows with their structural kind.
- Prints the structural stream and the speech-ready ReadingStream.
- Prints segmented questions, both as data and as they would be spoken.

Usage examples
  python3 tools/debug_print_reading.py artifacts/reading/page_001.reading.json
  python3 tools/debug_print_reading.py out.json --no-rows --max-snippet 80

Options
  --no-rows             Do not list rows
  --no-questions        Do not list questions
  --max-snippet 120     Max characters per row/option snippet

Report writer (optional)
  --write-report        Write the same output to a text file
  --report-dir DIR      Output directory for report (default: artifacts/reading_reports)
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from contracts.reading import Question, ReadingResult
from structure.speech import format_question_for_speech


# ----------------------------
# Utilities
# ----------------------------

def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1].resolve()


def _read_json(p: Path) -> Any:
    return json.loads(p.read_text(encoding="utf-8"))


def _truncate(s: str, n: int) -> str:
    if len(s) <= n:
        return s
    return s[: max(0, n - 3)] + "..."


def _one_line(s: str) -> str:
    return s.replace("\n", " / ")


def _is_reading_artifact(payload: Any) -> bool:
    return isinstance(payload, dict) and "meta" in payload and "text" in payload and "rows" in payload


# ----------------------------
# Rendering
# ----------------------------

def render_summary(result: ReadingResult) -> List[str]:
    out: List[str] = []
    meta = result.meta
    out.append(f"=== Reading ===  ok={result.ok}  stage={meta.get('stage')}  source={meta.get('source')}")
    if result.errors:
        out.append("Errors:")
        for e in result.errors:
            out.append(f"  - {e.code}: {e.message}")

    counts: Dict[str, Any] = meta.get("counts") or {}
    if counts:
        out.append("Counts:")
        for k in sorted(counts):
            out.append(f"  {k}: {counts[k]}")

    aggregation = meta.get("aggregation")
    if isinstance(aggregation, dict) and aggregation:
        out.append("Aggregation:")
        for k in sorted(aggregation):
            out.append(f"  {k}: {aggregation[k]}")

    warnings = meta.get("warnings") or []
    if warnings:
        out.append(f"Warnings ({len(warnings)}):")
        for w in warnings[:15]:
            out.append(f"  - {w.get('code')}: {w.get('message')}")
        if len(warnings) > 15:
            out.append(f"  ... ({len(warnings) - 15} more)")
    return out


def render_rows(result: ReadingResult, *, max_snippet: int) -> List[str]:
    if not result.rows:
        return ["Rows: <none>"]
    width = max(len(r.kind.value) for r in result.rows)
    out = [f"Rows ({len(result.rows)}):"]
    for i, row in enumerate(result.rows, start=1):
        out.append(f"  {i:03d} {row.kind.value:<{width}}  {_truncate(_one_line(row.text), max_snippet)}")
    return out


def render_questions(questions: Optional[List[Question]], *, max_snippet: int) -> List[str]:
    if questions is None:
        return ["Questions: <not segmented>"]
    if not questions:
        return ["Questions: <none>"]
    out = [f"Questions ({len(questions)}):"]
    for q in questions:
        out.append(f"  [{q.number}] {_truncate(q.text, max_snippet) or '<no text>'}")
        for label, option in q.labeled_options():
            out.append(f"      ({label}) {_truncate(option, max_snippet)}")
        out.append(f"      spoken: {format_question_for_speech(q)}")
    return out


def build_report_text(result: ReadingResult, *, show_rows: bool, show_questions: bool, max_snippet: int) -> str:
    lines = render_summary(result)
    if show_rows:
        lines.append("")
        lines.extend(render_rows(result, max_snippet=max_snippet))
    lines.append("")
    lines.append("Structural stream:")
    lines.append(f"  {result.structured_text or '<empty>'}")
    lines.append("Reading stream:")
    lines.append(f"  {result.text or '<empty>'}")
    if show_questions:
        lines.append("")
        lines.extend(render_questions(result.questions, max_snippet=max_snippet))
    return "\n".join(lines).rstrip() + "\n"


def write_report_file(*, report_dir: Path, report_name: str, text: str) -> Path:
    report_dir.mkdir(parents=True, exist_ok=True)
    out_path = report_dir / report_name
    out_path.write_text(text, encoding="utf-8")
    return out_path


def _default_report_name(input_path: Path) -> str:
    name = input_path.name
    if name.endswith(".reading.json"):
        base = name[: -len(".reading.json")]
    elif name.endswith(".json"):
        base = name[: -len(".json")]
    else:
        base = input_path.stem
    return f"{base}_reading_report.txt"


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Terminal view of reading artifacts.")
    ap.add_argument("input", type=str, help="Path to a reading JSON artifact.")
    ap.add_argument("--no-rows", action="store_true", default=False, help="Do not list rows.")
    ap.add_argument("--no-questions", action="store_true", default=False, help="Do not list questions.")
    ap.add_argument("--max-snippet", type=int, default=120, help="Max characters per snippet.")
    ap.add_argument("--write-report", action="store_true", default=False, help="Write the report to a file.")
    ap.add_argument(
        "--report-dir",
        type=str,
        default="artifacts/reading_reports",
        help="Directory to write report into (repo-root-relative by default).",
    )
    args = ap.parse_args(argv)

    input_path = Path(args.input)
    payload = _read_json(input_path)
    if not _is_reading_artifact(payload):
        print(f"Not a reading artifact: {input_path}")
        return 2

    result = ReadingResult.from_dict(payload)
    text = build_report_text(
        result,
        show_rows=not args.no_rows,
        show_questions=not args.no_questions,
        max_snippet=max(10, int(args.max_snippet)),
    )

    print(f"Input: {input_path}")
    print(text, end="")

    if args.write_report:
        report_dir = Path(args.report_dir)
        if not report_dir.is_absolute():
            report_dir = _repo_root() / report_dir
        out_path = write_report_file(report_dir=report_dir, report_name=_default_report_name(input_path), text=text)
        print(f"Wrote report: {out_path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
