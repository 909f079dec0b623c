from __future__ import annotations

import unittest
from typing import Any

from contracts.reading import EmptyFrameSetError, Question, RowKind
from contracts.recognition import Page
from layout.config import LayoutConfig
from reading.artifacts import serialize_reading_result
from reading.config import ReadingConfig
from reading.module import (
    run_reading_on_frames,
    run_reading_on_page,
    run_reading_on_payload,
    run_reading_on_text,
)
from recognition.module import load_page


def _box(left: float, top: float, right: float, bottom: float) -> dict[str, float]:
    return {"left": left, "top": top, "right": right, "bottom": bottom}


def _el(text: str, left: float, right: float, top: float, confidence: float | None = None) -> dict[str, Any]:
    out: dict[str, Any] = {"text": text, "boundingBox": _box(left, top, right, top + 20)}
    if confidence is not None:
        out["confidence"] = confidence
    return out


def _canonical_el(text: str, left: float, right: float, top: float, confidence: float | None = None) -> dict[str, Any]:
    return {"text": text, "bbox": _box(left, top, right, top + 20), "confidence": confidence}


def _exam_payload() -> dict[str, Any]:
    # Options sit in a separate block listed before the stem; reading order
    # must come from geometry only.
    return {
        "text": "(b) clay\n(a) sandy\n27. Explain soil types",
        "blocks": [
            {
                "lines": [
                    {"elements": [_el("(b)", 10, 40, 70), _el("clay", 50, 90, 70)]},
                    {"elements": [_el("(a)", 10, 40, 40), _el("sandy", 50, 100, 40)]},
                ]
            },
            {
                "lines": [
                    {
                        "elements": [
                            _el("27.", 10, 40, 10),
                            _el("Explain", 50, 120, 10),
                            _el("soil", 130, 170, 10),
                            _el("types", 180, 230, 10),
                        ]
                    }
                ]
            },
        ],
    }


def _line_page(*lines: tuple[str, float, float]) -> Page:
    return load_page(
        {
            "blocks": [
                {"lines": [{"text": t, "bbox": _box(left, top, left + 80, top + 12), "elements": []} for t, left, top in lines]}
            ]
        }
    )


class TestReadingPipelineEndToEnd(unittest.TestCase):
    def test_exam_page(self) -> None:
        result = run_reading_on_payload(_exam_payload(), "on_device")
        self.assertTrue(result.ok)
        self.assertEqual(result.structured_text, "27. Explain soil types. (a) sandy, (b) clay.")
        self.assertEqual(result.text, "Twenty-seven. Explain soil types. A: sandy. B: clay.")
        self.assertEqual(
            [r.kind for r in result.rows],
            [RowKind.NEW_QUESTION, RowKind.SEGMENT_START, RowKind.SUB_QUESTION],
        )
        self.assertEqual(result.questions, [Question(number=27, text="Explain soil types", options=["sandy", "clay"])])
        self.assertEqual(result.meta["engine"], "on_device")
        self.assertEqual(result.meta["counts"]["rows"], 3)
        self.assertEqual(result.meta["counts"]["questions"], 1)
        self.assertEqual(result.meta["counts"]["lines_in"], 3)
        self.assertEqual(result.meta["warnings"], [])

    def test_run_is_deterministic(self) -> None:
        a = serialize_reading_result(run_reading_on_payload(_exam_payload(), "on_device"))
        b = serialize_reading_result(run_reading_on_payload(_exam_payload(), "on_device"))
        self.assertEqual(a, b)

    def test_lines_on_one_visual_row_are_joined(self) -> None:
        page = _line_page(("parts", 200, 14), ("Name the", 10, 10))
        self.assertEqual(run_reading_on_page(page).text, "Name the parts.")

    def test_spelled_letters_are_fused(self) -> None:
        page = load_page(
            {
                "blocks": [
                    {
                        "lines": [
                            {
                                "elements": [
                                    _canonical_el("We", 10, 30, 10),
                                    _canonical_el("A", 60, 70, 10),
                                    _canonical_el("R", 72, 82, 10),
                                    _canonical_el("E", 84, 94, 10),
                                    _canonical_el("here", 124, 164, 10),
                                ]
                            }
                        ]
                    }
                ]
            }
        )
        self.assertEqual(run_reading_on_page(page).text, "We are here.")

    def test_confidence_floor_drops_low_confidence_elements(self) -> None:
        page = load_page(
            {
                "blocks": [
                    {
                        "lines": [
                            {
                                "elements": [
                                    _canonical_el("Keep", 10, 50, 10),
                                    _canonical_el("noise", 60, 110, 10, confidence=0.1),
                                    _canonical_el("this", 120, 160, 10, confidence=0.9),
                                ]
                            }
                        ]
                    }
                ]
            }
        )
        floored = run_reading_on_page(page, ReadingConfig(layout=LayoutConfig(confidence_floor=0.5)))
        self.assertEqual(floored.text, "Keep this.")
        self.assertEqual(floored.meta["counts"]["dropped_elements"], 1)
        self.assertEqual(run_reading_on_page(page).text, "Keep noise this.")

    def test_empty_page_is_ok_with_warning(self) -> None:
        result = run_reading_on_page(Page(blocks=[]))
        self.assertTrue(result.ok)
        self.assertEqual(result.text, "")
        self.assertTrue(result.is_empty)
        self.assertEqual(result.questions, [])
        self.assertEqual([w["code"] for w in result.meta["warnings"]], ["READ_NO_TEXT_DETECTED"])

    def test_engine_text_is_used_without_geometry(self) -> None:
        result = run_reading_on_page(Page(blocks=[], text="1. Define soil."))
        self.assertEqual(result.text, "One. Define soil.")
        self.assertEqual([w["code"] for w in result.meta["warnings"]], ["READ_USED_ENGINE_TEXT"])
        self.assertEqual(result.questions, [Question(number=1, text="Define soil", options=[])])

    def test_invalid_payload_is_reported(self) -> None:
        result = run_reading_on_payload({"blocks": "nope"}, "on_device")
        self.assertFalse(result.ok)
        self.assertEqual([e.code for e in result.errors], ["READ_PAYLOAD_INVALID"])
        self.assertEqual(result.text, "")
        self.assertIsNone(result.questions)

        element = _canonical_el("Hi", 0, 20, 10)
        element["confidence"] = "high"
        bad_confidence = {"blocks": [{"lines": [{"elements": [element]}]}]}
        result = run_reading_on_payload(bad_confidence)
        self.assertFalse(result.ok)
        self.assertEqual([e.code for e in result.errors], ["READ_PAYLOAD_INVALID"])

    def test_plain_text_input(self) -> None:
        result = run_reading_on_text("27. Explain soil types\n(a) sandy\n\n(b) clay\n")
        self.assertEqual(result.text, "Twenty-seven. Explain soil types. A: sandy. B: clay.")
        self.assertEqual(result.meta["source"], "text")

        unsegmented = run_reading_on_text("27. Explain soil types", ReadingConfig(segment_questions=False))
        self.assertIsNone(unsegmented.questions)

    def test_roman_sub_items_after_a_colon(self) -> None:
        result = run_reading_on_text("1. Name the parts:\ni) roots\nii) stems")
        self.assertEqual(result.text, "One. Name the parts: (1) roots, (2) stems.")

    def test_specimen_label_opens_a_new_row(self) -> None:
        result = run_reading_on_text("Look at specimen c - it is sandy")
        self.assertEqual([r.text for r in result.rows], ["Look at", "Specimen C: it is sandy"])
        self.assertEqual([r.kind for r in result.rows], [RowKind.CONTINUATION, RowKind.NEW_QUESTION])
        self.assertEqual(result.text, "Look at.\nSpecimen C: it is sandy.")

    def test_frames(self) -> None:
        result = run_reading_on_frames(["Hello world.", "Hello world"])
        self.assertEqual(result.text, "Hello world.")
        self.assertEqual(result.meta["aggregation"]["strategy"], "line_merge")
        self.assertEqual(result.meta["aggregation"]["frames"], 2)

        page = _line_page(("Name the parts", 10, 10))
        self.assertEqual(run_reading_on_frames([page, page]).text, "Name the parts.")

        with self.assertRaises(EmptyFrameSetError):
            run_reading_on_frames([])

    def test_result_round_trips_through_dict(self) -> None:
        result = run_reading_on_payload(_exam_payload(), "on_device")
        self.assertEqual(type(result).from_dict(result.to_dict()).to_dict(), result.to_dict())


class TestReadingConfig(unittest.TestCase):
    def test_from_dict(self) -> None:
        cfg = ReadingConfig.from_dict({"layout": {"row_threshold_px": 20}, "segment_questions": False})
        self.assertEqual(cfg.layout.row_threshold_px, 20)
        self.assertFalse(cfg.segment_questions)

    def test_unknown_keys_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ReadingConfig.from_dict({"bogus": 1})
        with self.assertRaises(ValueError):
            ReadingConfig.from_dict({"layout": {"nope": 1}})

    def test_direct_construction_is_validated(self) -> None:
        with self.assertRaises(ValueError):
            ReadingConfig(segment_questions="yes")  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
