"""Flatten provider transcript payloads into the stored result shape."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from scribeline.schemas.transcription import (
    EntityResult,
    HighlightResult,
    HighlightTimestamp,
    SentimentResult,
    SpeakerUtterance,
    TranscriptionResult,
    Word,
)


def normalize_transcript(payload: Mapping[str, Any]) -> TranscriptionResult:
    """Build a ``TranscriptionResult`` from a completed provider transcript.

    Every optional section may be missing or null upstream; each one
    normalizes to an empty list or empty string so readers never need a
    null check.
    """
    return TranscriptionResult(
        transcript_text=_as_str(payload.get("text")),
        speakers=[_utterance(item) for item in _as_list(payload.get("utterances"))],
        sentiment=[_sentiment(item) for item in _as_list(payload.get("sentiment_analysis_results"))],
        topics=_topics(payload.get("iab_categories_result")),
        summary=_as_str(payload.get("summary")),
        entities=[_entity(item) for item in _as_list(payload.get("entities"))],
        highlights=_highlights(payload.get("auto_highlights_result")),
        words=[_word(item) for item in _as_list(payload.get("words"))],
        duration_seconds=_as_float(payload.get("audio_duration")),
        language_code=_as_str(payload.get("language_code")) or None,
    )


def _utterance(item: Mapping[str, Any]) -> SpeakerUtterance:
    return SpeakerUtterance(
        speaker=_optional_str(item.get("speaker")),
        text=_as_str(item.get("text")),
        start=_as_int(item.get("start")),
        end=_as_int(item.get("end")),
        confidence=_as_float(item.get("confidence")),
        words=[_word(word) for word in _as_list(item.get("words"))],
    )


def _word(item: Mapping[str, Any]) -> Word:
    return Word(
        text=_as_str(item.get("text")),
        start=_as_int(item.get("start")),
        end=_as_int(item.get("end")),
        confidence=_as_float(item.get("confidence")),
        speaker=_optional_str(item.get("speaker")),
    )


def _sentiment(item: Mapping[str, Any]) -> SentimentResult:
    return SentimentResult(
        text=_as_str(item.get("text")),
        sentiment=_optional_str(item.get("sentiment")),
        confidence=_as_float(item.get("confidence")),
        start=_as_int(item.get("start")),
        end=_as_int(item.get("end")),
    )


def _entity(item: Mapping[str, Any]) -> EntityResult:
    return EntityResult(
        type=_optional_str(item.get("entity_type")),
        text=_as_str(item.get("text")),
        start=_as_int(item.get("start")),
        end=_as_int(item.get("end")),
    )


def _topics(section: Any) -> list[str]:
    # First label of each result entry; entries without labels fall back to their text.
    topics: list[str] = []
    for entry in _as_list(_section_results(section)):
        labels = _as_list(entry.get("labels"))
        label = labels[0].get("label") if labels else None
        value = _as_str(label) or _as_str(entry.get("text"))
        if value:
            topics.append(value)
    return topics


def _highlights(section: Any) -> list[HighlightResult]:
    highlights: list[HighlightResult] = []
    for entry in _as_list(_section_results(section)):
        highlights.append(
            HighlightResult(
                text=_as_str(entry.get("text")),
                count=_as_int(entry.get("count")),
                rank=_as_float(entry.get("rank")),
                timestamps=[
                    HighlightTimestamp(start=_as_int(span.get("start")), end=_as_int(span.get("end")))
                    for span in _as_list(entry.get("timestamps"))
                ],
            )
        )
    return highlights


def _section_results(section: Any) -> Any:
    if isinstance(section, Mapping):
        return section.get("results")
    return None


def _as_list(value: Any) -> list[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
