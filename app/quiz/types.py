from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, StringConstraints

ANSWER_LABELS: tuple[str, str, str, str] = ("A", "B", "C", "D")
OPTIONS_PER_QUESTION = len(ANSWER_LABELS)

AnswerLabel = Literal["A", "B", "C", "D"]
NonBlankText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class Question(BaseModel):
    """One multiple-choice question as produced by the model.

    ``answer`` names the correct option by its original position and stays
    valid however the options are later displayed.
    """

    model_config = ConfigDict(frozen=True)

    question: NonBlankText
    options: tuple[NonBlankText, NonBlankText, NonBlankText, NonBlankText]
    answer: AnswerLabel


@dataclass(slots=True, frozen=True)
class DisplayOption:
    display_label: str
    original_label: str
    text: str


@dataclass(slots=True, frozen=True)
class DisplayQuestion:
    question: Question
    permutation: tuple[int, ...]

    @property
    def options(self) -> tuple[DisplayOption, ...]:
        return tuple(
            DisplayOption(
                display_label=ANSWER_LABELS[display_index],
                original_label=ANSWER_LABELS[original_index],
                text=self.question.options[original_index],
            )
            for display_index, original_index in enumerate(self.permutation)
        )


@dataclass(slots=True, frozen=True)
class ScoreSummary:
    correct: int
    total: int
    percent: int
    message: str


@dataclass(slots=True, frozen=True)
class ReviewItem:
    question: str
    options: tuple[str, ...]
    selected: str | None
    answer: str
    is_correct: bool
