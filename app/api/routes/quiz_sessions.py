from __future__ import annotations

from collections.abc import Callable
from uuid import UUID

import structlog
from fastapi import APIRouter, HTTPException, Response, status

from app.quiz.errors import InvalidAnswerLabelError, QuizSessionNotFoundError
from app.quiz.registry import RegisteredQuiz, get_quiz_registry
from app.quiz.session import QuizSessionController
from app.quiz.titles import DEFAULT_QUIZ_TITLE, build_quiz_title

from .quiz_sessions_models import (
    CreateQuizSessionRequest,
    CurrentQuestionResponse,
    DisplayOptionResponse,
    QuizSessionResponse,
    ReviewItemResponse,
    ScoreSummaryResponse,
    SelectAnswerRequest,
)

router = APIRouter(prefix="/api/quiz-sessions", tags=["quiz-sessions"])
logger = structlog.get_logger(__name__)


def _as_response(entry: RegisteredQuiz) -> QuizSessionResponse:
    controller = entry.controller
    state = controller.state
    current = controller.current_question

    score: ScoreSummaryResponse | None = None
    review: list[ReviewItemResponse] | None = None
    if state.submitted:
        summary = controller.summary()
        score = ScoreSummaryResponse(
            correct=summary.correct,
            total=summary.total,
            percent=summary.percent,
            message=summary.message,
        )
        review = [
            ReviewItemResponse(
                question=item.question,
                options=list(item.options),
                selected=item.selected,
                answer=item.answer,
                is_correct=item.is_correct,
            )
            for item in controller.review()
        ]

    return QuizSessionResponse(
        session_id=entry.session_id,
        title=entry.title,
        total_questions=controller.total_questions,
        current_index=state.current_index,
        progress_percent=controller.progress_percent,
        shuffled=state.shuffled,
        submitted=state.submitted,
        can_advance=controller.can_advance,
        is_last_question=controller.is_last_question,
        answers=list(state.answers),
        current_question=CurrentQuestionResponse(
            question=current.question.question,
            options=[
                DisplayOptionResponse(
                    display_label=option.display_label,
                    original_label=option.original_label,
                    text=option.text,
                )
                for option in current.options
            ],
            selected=controller.current_answer,
        ),
        score=score,
        review=review,
    )


def _get_entry(session_id: UUID) -> RegisteredQuiz:
    try:
        return get_quiz_registry().get(session_id)
    except QuizSessionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "E_QUIZ_SESSION_NOT_FOUND"},
        ) from exc


def _apply(
    session_id: UUID,
    action: Callable[[QuizSessionController], object],
    *,
    event: str,
) -> QuizSessionResponse:
    entry = _get_entry(session_id)
    action(entry.controller)
    logger.info(
        event,
        session_id=str(session_id),
        current_index=entry.controller.state.current_index,
        submitted=entry.controller.state.submitted,
    )
    return _as_response(entry)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_quiz_session(payload: CreateQuizSessionRequest) -> QuizSessionResponse:
    title = payload.title or (
        build_quiz_title(payload.file_name) if payload.file_name else DEFAULT_QUIZ_TITLE
    )
    entry = get_quiz_registry().create(payload.questions, title=title)
    logger.info(
        "quiz_session_created",
        session_id=str(entry.session_id),
        question_count=entry.controller.total_questions,
    )
    return _as_response(entry)


@router.get("/{session_id}")
async def get_quiz_session(session_id: UUID) -> QuizSessionResponse:
    return _as_response(_get_entry(session_id))


@router.post("/{session_id}/answer")
async def select_answer(session_id: UUID, payload: SelectAnswerRequest) -> QuizSessionResponse:
    entry = _get_entry(session_id)
    try:
        entry.controller.select_answer(payload.label)
    except InvalidAnswerLabelError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"code": "E_INVALID_ANSWER_LABEL"},
        ) from exc
    return _as_response(entry)


@router.post("/{session_id}/next")
async def next_question(session_id: UUID) -> QuizSessionResponse:
    return _apply(session_id, QuizSessionController.advance, event="quiz_session_advanced")


@router.post("/{session_id}/previous")
async def previous_question(session_id: UUID) -> QuizSessionResponse:
    return _apply(session_id, QuizSessionController.retreat, event="quiz_session_retreated")


@router.post("/{session_id}/submit")
async def submit_quiz(session_id: UUID) -> QuizSessionResponse:
    return _apply(session_id, QuizSessionController.submit, event="quiz_session_submitted")


@router.post("/{session_id}/reset")
async def reset_quiz(session_id: UUID) -> QuizSessionResponse:
    return _apply(session_id, QuizSessionController.reset, event="quiz_session_reset")


@router.post("/{session_id}/shuffle")
async def shuffle_quiz(session_id: UUID) -> QuizSessionResponse:
    return _apply(session_id, QuizSessionController.shuffle, event="quiz_session_shuffled")


@router.post("/{session_id}/unshuffle")
async def unshuffle_quiz(session_id: UUID) -> QuizSessionResponse:
    return _apply(session_id, QuizSessionController.unshuffle, event="quiz_session_unshuffled")


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quiz_session(session_id: UUID) -> Response:
    try:
        get_quiz_registry().discard(session_id)
    except QuizSessionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "E_QUIZ_SESSION_NOT_FOUND"},
        ) from exc
    logger.info("quiz_session_deleted", session_id=str(session_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
