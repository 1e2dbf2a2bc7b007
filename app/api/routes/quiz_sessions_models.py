from __future__ import annotations

from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.quiz.types import Question


class CreateQuizSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    questions: list[Question] = Field(min_length=1)
    title: str | None = Field(default=None, max_length=256)
    file_name: str | None = Field(
        default=None,
        max_length=512,
        validation_alias=AliasChoices("fileName", "file_name"),
    )


class SelectAnswerRequest(BaseModel):
    label: str = Field(min_length=1, max_length=8)


class DisplayOptionResponse(BaseModel):
    display_label: str
    original_label: str
    text: str


class CurrentQuestionResponse(BaseModel):
    question: str
    options: list[DisplayOptionResponse]
    selected: str | None = None


class ScoreSummaryResponse(BaseModel):
    correct: int = Field(ge=0)
    total: int = Field(ge=1)
    percent: int = Field(ge=0, le=100)
    message: str


class ReviewItemResponse(BaseModel):
    question: str
    options: list[str]
    selected: str | None = None
    answer: str
    is_correct: bool


class QuizSessionResponse(BaseModel):
    session_id: UUID
    title: str
    total_questions: int = Field(ge=1)
    current_index: int = Field(ge=0)
    progress_percent: float | None = Field(default=None, ge=0.0, le=100.0)
    shuffled: bool
    submitted: bool
    can_advance: bool
    is_last_question: bool
    answers: list[str | None]
    current_question: CurrentQuestionResponse
    score: ScoreSummaryResponse | None = None
    review: list[ReviewItemResponse] | None = None
