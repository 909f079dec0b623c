from __future__ import annotations

import argparse
import dataclasses
import json
import logging
from pathlib import Path

from contracts.recognition import RecognitionFlavor

from .artifacts import summarize, write_reading_json_artifact
from .config import ReadingConfig, load_reading_config
from .module import run_reading_on_payload_file, run_reading_on_text

logger = logging.getLogger(__name__)


def add_common_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--output", required=True, type=Path, help="Path to write the reading JSON artifact.")
    p.add_argument("--config", type=Path, default=None, help="Optional reading config JSON.")
    p.add_argument("--row-threshold-px", type=float, default=None)
    p.add_argument("--confidence-floor", type=float, default=None)
    p.add_argument("--lexicon", type=str, default=None, help="Alternate lexicon JSON.")
    p.add_argument("--no-questions", action="store_false", dest="segment_questions", default=None)
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])


def build_config(args: argparse.Namespace) -> ReadingConfig:
    cfg = load_reading_config(args.config) if args.config is not None else ReadingConfig()

    layout_overrides = {}
    if args.row_threshold_px is not None:
        layout_overrides["row_threshold_px"] = args.row_threshold_px
    if args.confidence_floor is not None:
        layout_overrides["confidence_floor"] = args.confidence_floor
    if layout_overrides:
        cfg = dataclasses.replace(cfg, layout=dataclasses.replace(cfg.layout, **layout_overrides))
    if args.lexicon is not None:
        cfg = dataclasses.replace(cfg, normalize=dataclasses.replace(cfg.normalize, lexicon_path=args.lexicon))
    if args.segment_questions is not None:
        cfg = dataclasses.replace(cfg, segment_questions=args.segment_questions)
    return cfg


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="readaloud-read",
        description="Recognition output -> ordered, normalized, speech-ready reading stream.",
    )
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", type=Path, help="Recognition payload JSON.")
    src.add_argument("--text", type=Path, help="Plain-text recognition output (one line per row).")
    p.add_argument(
        "--flavor",
        default=RecognitionFlavor.CANONICAL.value,
        choices=[f.value for f in RecognitionFlavor],
        help="Payload shape of --input.",
    )
    add_common_arguments(p)
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    cfg = build_config(args)
    if args.input is not None:
        logger.info("Reading %s payload %s", args.flavor, args.input)
        result = run_reading_on_payload_file(args.input, args.flavor, cfg)
    else:
        logger.info("Reading plain text %s", args.text)
        result = run_reading_on_text(args.text.read_text(encoding="utf-8"), cfg)

    write_reading_json_artifact(result=result, out_file=args.output)
    print(json.dumps(summarize(result), sort_keys=True, separators=(",", ":"), ensure_ascii=False))

    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
