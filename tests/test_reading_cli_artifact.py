from __future__ import annotations

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from reading import cli, cli_frames
from reading.artifacts import read_reading_json_artifact


def _run(main, argv: list[str]) -> tuple[int, dict]:
    buf = io.StringIO()
    with redirect_stdout(buf):
        rc = main(argv)
    return rc, json.loads(buf.getvalue().strip().splitlines()[-1])


def _exam_payload() -> dict:
    def el(text: str, left: float, right: float, top: float) -> dict:
        return {"text": text, "boundingBox": {"left": left, "top": top, "right": right, "bottom": top + 20}}

    return {
        "blocks": [
            {
                "lines": [
                    {"elements": [el("27.", 10, 40, 10), el("Explain", 50, 120, 10), el("soil", 130, 170, 10)]},
                    {"elements": [el("(a)", 10, 40, 40), el("sandy", 50, 100, 40)]},
                    {"elements": [el("(b)", 10, 40, 70), el("clay", 50, 90, 70)]},
                ]
            }
        ]
    }


class TestReadingCli(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_payload_to_artifact(self) -> None:
        payload_path = self.tmp / "page.json"
        payload_path.write_text(json.dumps(_exam_payload()), encoding="utf-8")
        out1 = self.tmp / "out1.reading.json"
        out2 = self.tmp / "out2.reading.json"

        rc, summary = _run(cli.main, ["--input", str(payload_path), "--flavor", "on_device", "--output", str(out1)])
        self.assertEqual(rc, 0)
        self.assertEqual(summary["ok"], True)
        self.assertEqual(summary["rows"], 3)
        self.assertEqual(summary["questions"], 1)
        self.assertEqual(summary["errors"], [])

        result = read_reading_json_artifact(out1)
        self.assertEqual(result.text, "Twenty-seven. Explain soil. A: sandy. B: clay.")

        _run(cli.main, ["--input", str(payload_path), "--flavor", "on_device", "--output", str(out2)])
        self.assertEqual(out1.read_bytes(), out2.read_bytes())
        self.assertTrue(out1.read_text(encoding="utf-8").endswith("\n"))

    def test_invalid_payload_exits_2(self) -> None:
        bad = self.tmp / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        out = self.tmp / "bad.reading.json"

        rc, summary = _run(cli.main, ["--input", str(bad), "--output", str(out)])
        self.assertEqual(rc, 2)
        self.assertEqual(summary["errors"], ["READ_PAYLOAD_INVALID"])
        self.assertFalse(read_reading_json_artifact(out).ok)

    def test_text_input_and_overrides(self) -> None:
        text_path = self.tmp / "page.txt"
        text_path.write_text("27. Explain soil types\n(a) sandy\n(b) clay\n", encoding="utf-8")
        config_path = self.tmp / "config.json"
        config_path.write_text(json.dumps({"layout": {"row_threshold_px": 12}}), encoding="utf-8")
        out = self.tmp / "text.reading.json"

        rc, summary = _run(
            cli.main,
            [
                "--text",
                str(text_path),
                "--config",
                str(config_path),
                "--confidence-floor",
                "0.3",
                "--no-questions",
                "--output",
                str(out),
            ],
        )
        self.assertEqual(rc, 0)
        self.assertEqual(summary["questions"], 0)

        result = read_reading_json_artifact(out)
        self.assertIsNone(result.questions)
        self.assertEqual(result.meta["params"]["layout"]["row_threshold_px"], 12)
        self.assertEqual(result.meta["params"]["layout"]["confidence_floor"], 0.3)
        self.assertEqual(result.meta["params"]["segment_questions"], False)


class TestFramesCli(unittest.TestCase):
    def test_text_frames_are_merged(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td)
            (tmp / "f1.txt").write_text("Hello world.", encoding="utf-8")
            (tmp / "f2.txt").write_text("Hello world", encoding="utf-8")
            out = tmp / "frames.reading.json"

            rc, summary = _run(
                cli_frames.main,
                ["--frame", str(tmp / "f1.txt"), "--frame", str(tmp / "f2.txt"), "--output", str(out)],
            )
            self.assertEqual(rc, 0)
            self.assertEqual(summary["ok"], True)
            result = read_reading_json_artifact(out)
            self.assertEqual(result.text, "Hello world.")
            self.assertEqual(result.meta["aggregation"]["strategy"], "line_merge")

    def test_invalid_json_frame_exits_2(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td)
            (tmp / "f1.json").write_text("[", encoding="utf-8")
            out = tmp / "frames.reading.json"

            rc, summary = _run(cli_frames.main, ["--frame", str(tmp / "f1.json"), "--output", str(out)])
            self.assertEqual(rc, 2)
            self.assertEqual(summary["errors"], ["READ_PAYLOAD_INVALID"])


if __name__ == "__main__":
    unittest.main()
