from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.quiz.types import Question


class UploadedFilePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="document.pdf", max_length=512)
    mime_type: str | None = Field(
        default=None,
        max_length=255,
        validation_alias=AliasChoices("type", "mimeType", "mime_type"),
    )
    data: str = Field(validation_alias=AliasChoices("data", "base64Data"))


class GenerateQuizRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    files: list[UploadedFilePayload] | None = None
    number_of_questions: int | None = Field(
        default=None,
        validation_alias=AliasChoices("numberOfQuestions", "number_of_questions"),
    )


class GeneratedQuizResponse(BaseModel):
    title: str
    questions: list[Question]
