from __future__ import annotations

import json

import pytest

from app.generation.errors import IncompleteQuizError, InvalidModelOutputError
from app.generation.streaming import (
    JsonArrayItemParser,
    stream_quiz_snapshots,
    stream_validated_questions,
)
from tests.generation.generation_fixtures import quiz_json, split_text
from tests.quiz.quiz_fixtures import question_payload


async def _chunks(*parts: str):
    for part in parts:
        yield part


async def _collect(iterator) -> list:
    return [item async for item in iterator]


@pytest.mark.parametrize("chunk_size", [1, 3, 17, 10_000])
def test_parser_emits_each_item_once_across_chunk_boundaries(chunk_size: int) -> None:
    payloads = [question_payload(1), question_payload(2, answer="C"), question_payload(3)]
    text = json.dumps(payloads, indent=2)
    parser = JsonArrayItemParser()

    items: list = []
    for chunk in split_text(text, chunk_size):
        items.extend(parser.feed(chunk))
    parser.close()

    assert items == payloads
    assert parser.closed is True


def test_parser_returns_items_as_soon_as_they_complete() -> None:
    parser = JsonArrayItemParser()

    assert parser.feed('[{"a": 1}, {"b"') == [{"a": 1}]
    assert parser.feed(': 2}') == [{"b": 2}]
    assert parser.feed("]") == []


def test_parser_tolerates_markdown_fence() -> None:
    parser = JsonArrayItemParser()

    items = parser.feed('```json\n[{"a": 1}]\n```')
    parser.close()

    assert items == [{"a": 1}]


def test_parser_rejects_non_array_output() -> None:
    with pytest.raises(InvalidModelOutputError):
        JsonArrayItemParser().feed('{"questions": []}')


def test_parser_rejects_missing_separator() -> None:
    with pytest.raises(InvalidModelOutputError):
        JsonArrayItemParser().feed('[{"a": 1} {"b": 2}]')


def test_parser_close_rejects_truncated_item() -> None:
    parser = JsonArrayItemParser()
    parser.feed('[{"a": 1}, {"b": ')

    with pytest.raises(InvalidModelOutputError):
        parser.close()


@pytest.mark.asyncio
async def test_stream_validated_questions_yields_in_order() -> None:
    text = quiz_json(question_payload(1, answer="B"), question_payload(2, answer="D"))

    questions = await _collect(
        stream_validated_questions(_chunks(*split_text(text, 7)), expected_count=2)
    )

    assert [question.answer for question in questions] == ["B", "D"]
    assert questions[0].options[1] == "Option 1-B"


@pytest.mark.asyncio
async def test_stream_stops_at_requested_count() -> None:
    text = quiz_json(question_payload(1), question_payload(2), question_payload(3))

    questions = await _collect(stream_validated_questions(_chunks(text), expected_count=2))

    assert len(questions) == 2


@pytest.mark.asyncio
async def test_stream_closes_model_chunks_at_requested_count() -> None:
    text = quiz_json(question_payload(1), question_payload(2), question_payload(3))
    events: list[str] = []

    async def tracked_chunks():
        try:
            for chunk in split_text(text, 5):
                yield chunk
            events.append("exhausted")
        finally:
            events.append("closed")

    questions = await _collect(stream_validated_questions(tracked_chunks(), expected_count=1))

    assert len(questions) == 1
    assert events == ["closed"]


@pytest.mark.asyncio
async def test_invalid_intermediate_item_aborts_stream() -> None:
    bad_item = {"question": "Q?", "options": ["a", "b", "c"], "answer": "A"}
    text = quiz_json(question_payload(1), bad_item, question_payload(3))
    received: list = []

    with pytest.raises(InvalidModelOutputError, match="question 2"):
        async for question in stream_validated_questions(_chunks(text), expected_count=3):
            received.append(question)

    assert len(received) == 1


@pytest.mark.asyncio
async def test_answer_outside_label_set_is_invalid() -> None:
    bad_item = {"question": "Q?", "options": ["a", "b", "c", "d"], "answer": "E"}

    with pytest.raises(InvalidModelOutputError):
        await _collect(stream_validated_questions(_chunks(quiz_json(bad_item)), expected_count=1))


@pytest.mark.asyncio
async def test_blank_option_is_invalid() -> None:
    bad_item = {"question": "Q?", "options": ["a", " ", "c", "d"], "answer": "A"}

    with pytest.raises(InvalidModelOutputError):
        await _collect(stream_validated_questions(_chunks(quiz_json(bad_item)), expected_count=1))


@pytest.mark.asyncio
async def test_short_stream_raises_incomplete() -> None:
    text = quiz_json(question_payload(1), question_payload(2), question_payload(3))

    with pytest.raises(IncompleteQuizError):
        await _collect(stream_validated_questions(_chunks(text), expected_count=4))


@pytest.mark.asyncio
async def test_snapshots_grow_monotonically() -> None:
    text = quiz_json(question_payload(1), question_payload(2), question_payload(3))

    snapshots = await _collect(
        stream_quiz_snapshots(stream_validated_questions(_chunks(text), expected_count=3))
    )

    assert [len(snapshot) for snapshot in snapshots] == [1, 2, 3]
    assert snapshots[1][:1] == snapshots[0]
