from app.quiz.session import QuizSession, QuizSessionController
from app.quiz.types import ANSWER_LABELS, Question

__all__ = ["ANSWER_LABELS", "Question", "QuizSession", "QuizSessionController"]
