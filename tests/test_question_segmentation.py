from __future__ import annotations

import unittest

from contracts.reading import Question
from structure.segment import segment_questions
from structure.speech import format_question_for_speech, format_questions_for_speech, number_to_words


class TestQuestionSegmentation(unittest.TestCase):
    def test_numbered_question_with_options(self) -> None:
        questions = segment_questions("27. Explain soil types. (a) sandy, (b) clay.")
        self.assertEqual(questions, [Question(number=27, text="Explain soil types", options=["sandy", "clay"])])

    def test_numbers_inside_options_stay_option_text(self) -> None:
        questions = segment_questions("1. Which are odd? (a) 1, 3, 5. (b) 2, 4, 6.")
        self.assertEqual(
            questions, [Question(number=1, text="Which are odd?", options=["1, 3, 5", "2, 4, 6"])]
        )

    def test_unnumbered_options_become_question_one(self) -> None:
        questions = segment_questions("(a) cat $2 dog (c) bird")
        self.assertEqual(questions, [Question(number=1, text="", options=["cat", "dog", "bird"])])

    def test_several_questions(self) -> None:
        questions = segment_questions("1. What is soil? (a) rock (b) earth\n2. Name a crop.")
        self.assertEqual(
            questions,
            [
                Question(number=1, text="What is soil?", options=["rock", "earth"]),
                Question(number=2, text="Name a crop", options=[]),
            ],
        )

    def test_marker_styles(self) -> None:
        self.assertEqual(
            segment_questions("Question 3: Define pore spaces."),
            [Question(number=3, text="Define pore spaces", options=[])],
        )
        self.assertEqual(
            [(q.number, q.text) for q in segment_questions("I. Soils\nII. Crops")],
            [(1, "Soils"), (2, "Crops")],
        )
        self.assertEqual(
            [(q.number, q.text) for q in segment_questions("(1) first. (2) second.")],
            [(1, "first"), (2, "second")],
        )

    def test_duplicate_labels_are_skipped(self) -> None:
        questions = segment_questions("5. Pick (a) w (b) x (a) dup (c) y (d) z")
        self.assertEqual(questions[0].options, ["w", "x", "y", "z"])

    def test_loose_option_markers(self) -> None:
        self.assertEqual(segment_questions("Pick $1 red"), [Question(number=1, text="Pick", options=["red"])])

    def test_preamble_and_empty_bodies_are_ignored(self) -> None:
        self.assertEqual(
            segment_questions("SECTION A\n1. Define soil."),
            [Question(number=1, text="Define soil", options=[])],
        )
        self.assertEqual(
            segment_questions("1. 2. Define soil."),
            [Question(number=2, text="Define soil", options=[])],
        )
        self.assertEqual(segment_questions("   "), [])

    def test_question_rejects_more_than_four_options(self) -> None:
        with self.assertRaises(ValueError):
            Question(number=1, text="x", options=["a", "b", "c", "d", "e"])

    def test_round_trip_dict(self) -> None:
        q = Question(number=4, text="Name it", options=["a", "b"])
        self.assertEqual(Question.from_dict(q.to_dict()), q)


class TestQuestionSpeech(unittest.TestCase):
    def test_format_question(self) -> None:
        q = Question(number=1, text="Another name for white blood cell is", options=["Erythrocyte", "Leucocyte"])
        self.assertEqual(
            format_question_for_speech(q),
            "Question one. Another name for white blood cell is. Option a, Erythrocyte. Option b, Leucocyte.",
        )

    def test_numbers_outside_the_table_stay_digits(self) -> None:
        self.assertEqual(number_to_words(42), "forty-two")
        self.assertEqual(format_question_for_speech(Question(number=150, text="", options=[])), "Question 150.")

    def test_format_several(self) -> None:
        qs = [Question(number=1, text="Why?", options=[]), Question(number=2, text="How", options=["so"])]
        self.assertEqual(
            format_questions_for_speech(qs),
            "Question one. Why? Question two. How. Option a, so.",
        )


if __name__ == "__main__":
    unittest.main()
