from __future__ import annotations

import random

import pytest

from app.quiz.errors import EmptyQuizError, InvalidAnswerLabelError, QuizNotSubmittedError
from app.quiz.session import QuizSessionController
from tests.quiz.quiz_fixtures import make_questions


def _controller(*answers: str, seed: int = 7) -> QuizSessionController:
    return QuizSessionController(make_questions(*answers), rng=random.Random(seed))


def _assert_initial_state(controller: QuizSessionController) -> None:
    state = controller.state
    assert state.current_index == 0
    assert state.submitted is False
    assert state.score is None
    assert state.answers == [None] * controller.total_questions


def test_new_session_starts_unanswered() -> None:
    controller = _controller("A", "B", "C")

    _assert_initial_state(controller)
    assert controller.state.shuffled is False
    assert controller.progress_percent == 0
    assert controller.can_advance is False


def test_empty_quiz_is_rejected() -> None:
    with pytest.raises(EmptyQuizError):
        QuizSessionController([])


def test_select_answer_overwrites_current_question_only() -> None:
    controller = _controller("A", "B", "C")

    controller.select_answer("B")
    controller.select_answer("D")

    assert controller.state.answers == ["D", None, None]
    assert controller.can_advance is True


def test_select_answer_rejects_unknown_label() -> None:
    controller = _controller("A", "B")

    with pytest.raises(InvalidAnswerLabelError):
        controller.select_answer("E")

    assert controller.state.answers == [None, None]


def test_advance_and_retreat_stay_in_bounds() -> None:
    controller = _controller("A", "B", "C")

    controller.retreat()
    assert controller.state.current_index == 0

    controller.advance()
    controller.advance()
    assert controller.state.current_index == 2
    assert controller.is_last_question is True
    assert controller.progress_percent == pytest.approx(200 / 3)

    controller.retreat()
    assert controller.state.current_index == 1


def test_advance_on_last_question_submits() -> None:
    controller = _controller("A", "B")

    controller.select_answer("A")
    controller.advance()
    controller.select_answer("C")
    controller.advance()

    assert controller.state.submitted is True
    assert controller.state.score == 1
    assert controller.state.current_index == 1
    assert controller.progress_percent is None


def test_submit_is_idempotent() -> None:
    controller = _controller("A", "B")
    controller.select_answer("A")

    first = controller.submit()
    second = controller.submit()

    assert first == second == 1
    assert controller.state.score == 1


def test_select_answer_after_submit_has_no_effect() -> None:
    controller = _controller("A", "B")
    controller.select_answer("B")
    controller.submit()

    controller.select_answer("A")

    assert controller.state.answers == ["B", None]
    assert controller.state.score == 0


def test_reset_clears_progress_but_keeps_shuffle() -> None:
    controller = _controller("A", "B", "C", "D")
    controller.shuffle()
    permutations = [display.permutation for display in controller.display_questions]
    controller.select_answer("A")
    controller.advance()
    controller.submit()

    controller.reset()

    _assert_initial_state(controller)
    assert controller.state.shuffled is True
    assert [display.permutation for display in controller.display_questions] == permutations


@pytest.mark.parametrize("toggle", ["shuffle", "unshuffle"])
def test_shuffle_toggles_reset_session(toggle: str) -> None:
    controller = _controller("A", "B", "C")
    controller.select_answer("A")
    controller.advance()
    controller.select_answer("B")
    controller.submit()

    getattr(controller, toggle)()

    _assert_initial_state(controller)
    assert controller.state.shuffled is (toggle == "shuffle")


def test_unshuffle_restores_identity_order() -> None:
    controller = _controller("A", "B", "C")
    controller.shuffle()

    controller.unshuffle()

    assert all(display.permutation == (0, 1, 2, 3) for display in controller.display_questions)


def test_display_order_is_fixed_between_reads() -> None:
    controller = _controller("A", "B", "C")
    controller.shuffle()

    first_read = [display.permutation for display in controller.display_questions]
    second_read = [display.permutation for display in controller.display_questions]

    assert first_read == second_read
    assert controller.current_question.permutation == first_read[0]


def test_shuffled_answer_scores_against_original_key() -> None:
    class _MoveLastToFront(random.Random):
        # j == 0 at every step turns (0, 1, 2, 3) into (1, 2, 3, 0)
        def randint(self, a: int, b: int) -> int:
            del b
            return a

    controller = QuizSessionController(make_questions("B"), rng=_MoveLastToFront())
    controller.shuffle()

    first_shown = controller.current_question.options[0]
    assert first_shown.display_label == "A"
    assert first_shown.original_label == "B"
    assert first_shown.text == "Option 1-B"

    controller.select_answer(first_shown.original_label)
    controller.submit()

    assert controller.state.answers == ["B"]
    assert controller.state.score == 1


def test_answers_stay_aligned_with_questions_through_lifecycle() -> None:
    controller = _controller("A", "B", "C", "D", seed=3)
    total = controller.total_questions
    steps = [
        lambda: controller.select_answer("C"),
        controller.advance,
        controller.shuffle,
        lambda: controller.select_answer("A"),
        controller.advance,
        controller.advance,
        controller.retreat,
        controller.submit,
        lambda: controller.select_answer("B"),
        controller.reset,
        controller.unshuffle,
        controller.advance,
    ]

    for step in steps:
        step()
        assert len(controller.state.answers) == total
        assert (controller.state.score is not None) == controller.state.submitted
        assert 0 <= controller.state.current_index < total


def test_summary_and_review_after_submit() -> None:
    controller = _controller("A", "B")
    controller.select_answer("A")
    controller.advance()
    controller.select_answer("D")
    controller.advance()

    summary = controller.summary()
    review = controller.review()

    assert (summary.correct, summary.total, summary.percent) == (1, 2, 50)
    assert [item.is_correct for item in review] == [True, False]
    assert review[1].selected == "D"
    assert review[1].answer == "B"


def test_summary_and_review_require_submission() -> None:
    controller = _controller("A")

    with pytest.raises(QuizNotSubmittedError):
        controller.summary()
    with pytest.raises(QuizNotSubmittedError):
        controller.review()
