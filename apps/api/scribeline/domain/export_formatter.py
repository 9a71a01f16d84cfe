"""Render completed transcriptions as downloadable text."""

from __future__ import annotations

from scribeline.schemas.transcription import ExportFormat, Transcription, Word

WORDS_PER_CUE = 10
VTT_HEADER = "WEBVTT"

_MEDIA_TYPES: dict[ExportFormat, str] = {
    ExportFormat.TXT: "text/plain",
    ExportFormat.JSON: "application/json",
    ExportFormat.SRT: "application/x-subrip",
    ExportFormat.VTT: "text/vtt",
}


def media_type_for(kind: ExportFormat) -> str:
    return _MEDIA_TYPES[kind]


def format_transcription(job: Transcription, kind: ExportFormat) -> str:
    """Render ``job`` in the requested export format.

    Subtitle formats need word timings; a result without words falls back to
    the plain transcript text.
    """
    if kind is ExportFormat.JSON:
        return job.model_dump_json(indent=2)

    result = job.result
    text = result.transcript_text if result is not None else ""
    if kind is ExportFormat.TXT:
        return text

    words = result.words if result is not None else []
    if not words:
        return text
    return render_subtitles(words, kind)


def render_subtitles(words: list[Word], kind: ExportFormat) -> str:
    lines: list[str] = []
    if kind is ExportFormat.VTT:
        lines.append(VTT_HEADER)
        lines.append("")

    for index, start in enumerate(range(0, len(words), WORDS_PER_CUE), start=1):
        chunk = words[start : start + WORDS_PER_CUE]
        cue_text = " ".join(word.text for word in chunk)
        cue_start = chunk[0].start
        cue_end = chunk[-1].end
        if kind is ExportFormat.SRT:
            lines.append(str(index))
            lines.append(f"{format_timestamp(cue_start, ',')} --> {format_timestamp(cue_end, ',')}")
        else:
            lines.append(f"{format_timestamp(cue_start, '.')} --> {format_timestamp(cue_end, '.')}")
        lines.append(cue_text)
        lines.append("")

    return "\n".join(lines)


def format_timestamp(offset_ms: int, decimal_separator: str) -> str:
    """``HH:MM:SS<sep>mmm`` for a non-negative millisecond offset."""
    ms = max(0, int(offset_ms))
    hours = ms // 3_600_000
    minutes = (ms % 3_600_000) // 60_000
    seconds = (ms % 60_000) // 1000
    millis = ms % 1000
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}{decimal_separator}{millis:03d}"
