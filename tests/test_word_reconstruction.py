from __future__ import annotations

import unittest

from contracts.recognition import BBox, Element, Line
from layout.config import LayoutConfig
from layout.words import fuse_letter_runs, reconstruct_line_text


def _el(text: str, left: float, right: float, confidence: float | None = None) -> Element:
    return Element(text=text, bbox=BBox(left, 0, right, 20), confidence=confidence)


class TestWordReconstruction(unittest.TestCase):
    def test_spelled_letters_become_a_word(self) -> None:
        line = Line.from_elements([_el("A", 10, 20), _el("R", 22, 32), _el("E", 34, 44)])
        self.assertEqual(reconstruct_line_text(line), "are")

    def test_wide_gap_breaks_words(self) -> None:
        line = Line.from_elements([_el("Hello", 0, 50), _el("world", 80, 130)])
        self.assertEqual(reconstruct_line_text(line), "Hello world")

    def test_character_level_elements_keep_word_gaps(self) -> None:
        hello = [_el(c, 12 * i, 12 * i + 10) for i, c in enumerate("Hello")]
        world = [_el(c, 90 + 12 * i, 100 + 12 * i) for i, c in enumerate("world")]
        self.assertEqual(reconstruct_line_text(Line.from_elements(hello + world)), "Hello world")

        the = [_el(c, 12 * i, 12 * i + 10) for i, c in enumerate("The")]
        soil = [_el(c, 90 + 12 * i, 100 + 12 * i) for i, c in enumerate("soil")]
        self.assertEqual(reconstruct_line_text(Line.from_elements(the + soil)), "The soil")

    def test_closing_punctuation_attaches_to_word(self) -> None:
        line = Line.from_elements([_el("Hello", 0, 50), _el(",", 51, 54), _el("world", 80, 130)])
        self.assertEqual(reconstruct_line_text(line), "Hello, world")

    def test_opening_bracket_starts_word(self) -> None:
        line = Line.from_elements([_el("(", 0, 5), _el("a", 6, 14), _el(")", 15, 20)])
        self.assertEqual(reconstruct_line_text(line), "(a)")

    def test_element_order_is_not_trusted(self) -> None:
        elements = [_el("E", 34, 44), _el("A", 10, 20), _el("R", 22, 32)]
        line = Line(elements=elements, text="E A R", bbox=BBox(10, 0, 44, 20))
        self.assertEqual(reconstruct_line_text(line), "are")

    def test_lines_with_at_most_one_element_keep_recognizer_text(self) -> None:
        single = Line(elements=[_el("Hi  there", 0, 90)], text="Hi  there", bbox=BBox(0, 0, 90, 20))
        empty = Line(elements=[], text="raw line", bbox=BBox(0, 0, 90, 20))
        self.assertEqual(reconstruct_line_text(single), "Hi  there")
        self.assertEqual(reconstruct_line_text(empty), "raw line")

    def test_blank_result_falls_back_to_line_text(self) -> None:
        line = Line(elements=[_el(" ", 0, 10), _el("  ", 20, 30)], text="abc", bbox=BBox(0, 0, 30, 20))
        self.assertEqual(reconstruct_line_text(line), "abc")

    def test_fusion_can_be_disabled(self) -> None:
        line = Line.from_elements([_el("A", 10, 20), _el("R", 22, 32), _el("E", 34, 44)])
        self.assertEqual(reconstruct_line_text(line, LayoutConfig(fuse_letter_runs=False)), "A R E")

    def test_fuse_letter_runs_on_plain_text(self) -> None:
        self.assertEqual(fuse_letter_runs("T H E soil"), "the soil")
        self.assertEqual(fuse_letter_runs("c l a y is wet", common_words=frozenset()), "clay is wet")
        # Longer unknown runs stay spaced.
        self.assertEqual(fuse_letter_runs("x y z w v q", common_words=frozenset()), "x y z w v q")
        # Single letters are left alone.
        self.assertEqual(fuse_letter_runs("Specimen C is sandy"), "Specimen C is sandy")

    def test_dictionary_hit_wins_over_length_limit(self) -> None:
        self.assertEqual(
            fuse_letter_runs("y o u", common_words=frozenset({"you"}), max_letters=2),
            "you",
        )


if __name__ == "__main__":
    unittest.main()
