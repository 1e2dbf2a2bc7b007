from __future__ import annotations

import json
from collections.abc import AsyncGenerator, AsyncIterable, AsyncIterator
from contextlib import aclosing
from typing import Any

from pydantic import ValidationError

from app.generation.errors import IncompleteQuizError, InvalidModelOutputError
from app.quiz.types import Question

_WHITESPACE = " \t\r\n"
_CODE_FENCE = "```"


class JsonArrayItemParser:
    """Pulls complete items out of a JSON array that arrives in text fragments.

    Each call to ``feed`` returns the items completed by that fragment. An
    item split across fragments is returned once it is whole.
    """

    def __init__(self) -> None:
        self._decoder = json.JSONDecoder()
        self._buffer = ""
        self._started = False
        self._closed = False
        self._after_item = False

    @property
    def closed(self) -> bool:
        return self._closed

    def feed(self, text: str) -> list[Any]:
        self._buffer += text
        items: list[Any] = []
        pos = 0

        while True:
            pos = self._skip_whitespace(pos)
            if pos >= len(self._buffer):
                break

            if not self._started:
                if self._buffer.startswith(_CODE_FENCE, pos):
                    newline = self._buffer.find("\n", pos)
                    if newline == -1:
                        break
                    pos = newline + 1
                    continue
                if self._buffer[pos] != "[":
                    raise InvalidModelOutputError("model output is not a JSON array")
                self._started = True
                pos += 1
                continue

            if self._closed:
                if self._buffer.startswith(_CODE_FENCE, pos):
                    pos += len(_CODE_FENCE)
                    continue
                raise InvalidModelOutputError("unexpected content after the JSON array")

            char = self._buffer[pos]
            if char == "]":
                self._closed = True
                pos += 1
                continue
            if char == ",":
                if not self._after_item:
                    raise InvalidModelOutputError("malformed JSON array in model output")
                self._after_item = False
                pos += 1
                continue
            if self._after_item:
                raise InvalidModelOutputError("missing separator between array items")

            try:
                item, end = self._decoder.raw_decode(self._buffer, pos)
            except json.JSONDecodeError:
                # item is not complete yet
                break
            if end >= len(self._buffer) and not isinstance(item, (dict, list)):
                # a bare scalar at the buffer edge may still be growing
                break
            items.append(item)
            self._after_item = True
            pos = end

        self._buffer = self._buffer[pos:]
        return items

    def close(self) -> None:
        if self._buffer.strip():
            raise InvalidModelOutputError("model output ended inside an incomplete item")
        if not self._started:
            raise InvalidModelOutputError("model output did not contain a JSON array")

    def _skip_whitespace(self, pos: int) -> int:
        while pos < len(self._buffer) and self._buffer[pos] in _WHITESPACE:
            pos += 1
        return pos


def validate_question(raw: Any, *, position: int) -> Question:
    try:
        return Question.model_validate(raw)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'item'}: {error['msg']}"
            for error in exc.errors()
        )
        raise InvalidModelOutputError(
            f"question {position + 1} failed validation: {problems}"
        ) from exc


async def stream_validated_questions(
    chunks: AsyncGenerator[str, None],
    *,
    expected_count: int,
) -> AsyncIterator[Question]:
    parser = JsonArrayItemParser()
    received = 0

    async with aclosing(chunks):
        async for chunk in chunks:
            for raw_item in parser.feed(chunk):
                question = validate_question(raw_item, position=received)
                received += 1
                yield question
                if received >= expected_count:
                    return

    parser.close()
    if received < expected_count:
        raise IncompleteQuizError(
            f"model returned {received} of {expected_count} requested questions"
        )


async def stream_quiz_snapshots(
    questions: AsyncIterable[Question],
) -> AsyncIterator[tuple[Question, ...]]:
    received: list[Question] = []
    async for question in questions:
        received.append(question)
        yield tuple(received)
