from __future__ import annotations

import re

DEFAULT_QUIZ_TITLE = "Quiz"
TITLE_MAX_WORDS = 3
TITLE_MIN_LENGTH = 3

_PDF_SUFFIX_RE = re.compile(r"\.pdf$", re.IGNORECASE)
_WORD_SEPARATOR_RE = re.compile(r"[\s\-_]+")


def build_quiz_title(file_name: str | None) -> str:
    if not file_name:
        return DEFAULT_QUIZ_TITLE

    clean_name = _PDF_SUFFIX_RE.sub("", file_name).strip()
    if len(clean_name) < TITLE_MIN_LENGTH or clean_name.isdigit():
        return DEFAULT_QUIZ_TITLE

    words = [word for word in _WORD_SEPARATOR_RE.split(clean_name) if word]
    capitalized = [word[:1].upper() + word[1:].lower() for word in words]
    return " ".join(capitalized[:TITLE_MAX_WORDS]) + f" - {DEFAULT_QUIZ_TITLE}"
