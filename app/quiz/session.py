from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from app.quiz.errors import EmptyQuizError, InvalidAnswerLabelError, QuizNotSubmittedError
from app.quiz.scoring import score_answers, summarize_score
from app.quiz.shuffle import build_display_questions
from app.quiz.types import ANSWER_LABELS, DisplayQuestion, Question, ReviewItem, ScoreSummary


@dataclass(slots=True)
class QuizSession:
    questions: tuple[Question, ...]
    answers: list[str | None] = field(default_factory=list)
    current_index: int = 0
    submitted: bool = False
    score: int | None = None
    shuffled: bool = False

    def __post_init__(self) -> None:
        if not self.answers:
            self.answers = [None] * len(self.questions)


class QuizSessionController:
    """Drives one quiz attempt: answering, navigation, scoring and shuffling.

    Stored answers are always original option labels, so scoring and review
    are unaffected by the order in which options are displayed.
    """

    def __init__(
        self,
        questions: Sequence[Question],
        *,
        rng: random.Random | None = None,
    ) -> None:
        if not questions:
            raise EmptyQuizError("quiz must contain at least one question")
        self._rng = rng
        self.state = QuizSession(questions=tuple(questions))
        self._display = build_display_questions(self.state.questions, shuffled=False)

    @property
    def total_questions(self) -> int:
        return len(self.state.questions)

    @property
    def is_last_question(self) -> bool:
        return self.state.current_index == self.total_questions - 1

    @property
    def current_question(self) -> DisplayQuestion:
        return self._display[self.state.current_index]

    @property
    def current_answer(self) -> str | None:
        return self.state.answers[self.state.current_index]

    @property
    def display_questions(self) -> tuple[DisplayQuestion, ...]:
        return self._display

    @property
    def can_advance(self) -> bool:
        return not self.state.submitted and self.current_answer is not None

    @property
    def progress_percent(self) -> float | None:
        if self.state.submitted:
            return None
        return (self.state.current_index / self.total_questions) * 100

    def select_answer(self, label: str) -> None:
        if label not in ANSWER_LABELS:
            raise InvalidAnswerLabelError(f"unknown answer label: {label!r}")
        if self.state.submitted:
            return
        self.state.answers[self.state.current_index] = label

    def advance(self) -> None:
        if self.state.submitted:
            return
        if self.state.current_index < self.total_questions - 1:
            self.state.current_index += 1
        else:
            self.submit()

    def retreat(self) -> None:
        if self.state.current_index > 0:
            self.state.current_index -= 1

    def submit(self) -> int:
        if self.state.submitted and self.state.score is not None:
            return self.state.score
        score = score_answers(self.state.questions, self.state.answers)
        self.state.score = score
        self.state.submitted = True
        return score

    def reset(self) -> None:
        self.state.answers = [None] * self.total_questions
        self.state.submitted = False
        self.state.score = None
        self.state.current_index = 0

    def shuffle(self) -> None:
        self.state.shuffled = True
        self._display = build_display_questions(
            self.state.questions,
            shuffled=True,
            rng=self._rng,
        )
        self.reset()

    def unshuffle(self) -> None:
        self.state.shuffled = False
        self._display = build_display_questions(self.state.questions, shuffled=False)
        self.reset()

    def summary(self) -> ScoreSummary:
        if not self.state.submitted or self.state.score is None:
            raise QuizNotSubmittedError("quiz has not been submitted")
        return summarize_score(correct=self.state.score, total=self.total_questions)

    def review(self) -> list[ReviewItem]:
        if not self.state.submitted:
            raise QuizNotSubmittedError("quiz has not been submitted")
        return [
            ReviewItem(
                question=question.question,
                options=question.options,
                selected=selected,
                answer=question.answer,
                is_correct=selected == question.answer,
            )
            for question, selected in zip(self.state.questions, self.state.answers)
        ]
