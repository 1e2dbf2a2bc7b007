from __future__ import annotations

from collections.abc import Sequence

from app.quiz.types import Question, ScoreSummary

# (minimum percent, message), checked top-down
SCORE_MESSAGES: tuple[tuple[int, str], ...] = (
    (100, "Perfect score! Congratulations!"),
    (80, "Excellent work! You did really well!"),
    (60, "Good effort! You're on the right track."),
    (40, "Not bad, but there's room for improvement."),
    (0, "Keep practicing, you'll get better!"),
)


def score_answers(questions: Sequence[Question], answers: Sequence[str | None]) -> int:
    if len(questions) != len(answers):
        raise ValueError(
            f"answers length {len(answers)} does not match questions length {len(questions)}"
        )
    return sum(
        1 for question, answer in zip(questions, answers) if answer == question.answer
    )


def score_message(percent: float) -> str:
    for threshold, message in SCORE_MESSAGES:
        if percent >= threshold:
            return message
    return SCORE_MESSAGES[-1][1]


def summarize_score(*, correct: int, total: int) -> ScoreSummary:
    percent = (correct / total) * 100 if total > 0 else 0.0
    return ScoreSummary(
        correct=correct,
        total=total,
        percent=int(percent + 0.5),
        message=score_message(percent),
    )
