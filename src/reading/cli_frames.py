from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from contracts.reading import ReadingError, ReadingResult
from contracts.recognition import Page, RecognitionFlavor, RecognitionPayloadError
from recognition.module import load_page_file

from .artifacts import summarize, write_reading_json_artifact
from .cli import add_common_arguments, build_config
from .module import STAGE, run_reading_on_frames

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="readaloud-frames",
        description="Several captures of one page -> one merged, speech-ready reading stream.",
    )
    p.add_argument(
        "--frame",
        action="append",
        required=True,
        type=Path,
        help="One capture; repeat for each frame. JSON payloads use --flavor; other files are read as text.",
    )
    p.add_argument(
        "--flavor",
        default=RecognitionFlavor.CANONICAL.value,
        choices=[f.value for f in RecognitionFlavor],
    )
    add_common_arguments(p)
    return p


def _load_frame(path: Path, flavor: str) -> Page | str:
    if path.suffix.lower() == ".json":
        return load_page_file(path, flavor)
    return path.read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    cfg = build_config(args)
    try:
        frames = [_load_frame(f, args.flavor) for f in args.frame]
    except RecognitionPayloadError as e:
        result = ReadingResult(
            ok=False,
            errors=[ReadingError(code="READ_PAYLOAD_INVALID", message=str(e), detail={"flavor": args.flavor})],
            meta={"stage": STAGE, "source": "frames", "params": cfg.to_dict(), "counts": {}, "warnings": []},
            rows=[],
            structured_text="",
            text="",
        )
    else:
        logger.info("Merging %d frames", len(frames))
        result = run_reading_on_frames(frames, cfg)

    write_reading_json_artifact(result=result, out_file=args.output)
    print(json.dumps(summarize(result), sort_keys=True, separators=(",", ":"), ensure_ascii=False))

    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
