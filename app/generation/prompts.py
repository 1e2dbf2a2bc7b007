from __future__ import annotations

from app.quiz.types import ANSWER_LABELS

QUESTION_JSON_SHAPE = (
    '{"question": "<question text>", '
    '"options": ["<option A>", "<option B>", "<option C>", "<option D>"], '
    '"answer": "<A|B|C|D>"}'
)


def build_system_prompt(*, number_of_questions: int, language: str) -> str:
    return (
        "You are a teacher. Your job is to analyze a document and create a "
        f"multiple choice test with {number_of_questions} questions based on the "
        f"content of the document. All questions and options must be written in "
        f"{language}. Each question has exactly {len(ANSWER_LABELS)} options and each "
        "option should be roughly equal in length. Questions must be clear and objective."
    )


def build_user_prompt(*, number_of_questions: int, language: str) -> str:
    labels = ", ".join(ANSWER_LABELS)
    return (
        f"Analyze this document and create a multiple choice test in {language}, "
        "regardless of the language of the original document. "
        f"Respond with a JSON array of exactly {number_of_questions} objects shaped as "
        f"{QUESTION_JSON_SHAPE}. The answer field is one of {labels} and names the "
        "correct option by its position in the options list. Return only the JSON array."
    )
