from __future__ import annotations

import random
from collections.abc import Sequence

from app.quiz.types import OPTIONS_PER_QUESTION, DisplayQuestion, Question


def identity_permutation(size: int = OPTIONS_PER_QUESTION) -> tuple[int, ...]:
    return tuple(range(size))


def fisher_yates_permutation(
    size: int = OPTIONS_PER_QUESTION,
    *,
    rng: random.Random | None = None,
) -> tuple[int, ...]:
    source = rng if rng is not None else random
    order = list(range(size))
    for i in range(size - 1, 0, -1):
        j = source.randint(0, i)
        order[i], order[j] = order[j], order[i]
    return tuple(order)


def build_display_questions(
    questions: Sequence[Question],
    *,
    shuffled: bool,
    rng: random.Random | None = None,
) -> tuple[DisplayQuestion, ...]:
    return tuple(
        DisplayQuestion(
            question=question,
            permutation=(
                fisher_yates_permutation(len(question.options), rng=rng)
                if shuffled
                else identity_permutation(len(question.options))
            ),
        )
        for question in questions
    )
