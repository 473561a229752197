"""JSON timeline formatter.

WHY: A player other than ours (a web page, a video overlay generator) needs
the chunks with absolute start times, not just per-chunk durations.

HOW: Walk the chunks accumulating predelay + duration + postdelay to get
each chunk's start offset. Keys are camelCase to match the host's JSON
conventions. The document is validated with jsonschema against the bundled
schemas/timeline.schema.json before it is serialized.

RULES:
- startMs is the start of the chunk's slot (its predelay begins there)
- totalMs equals the sum of every chunk's slot
- Validate output against the schema before returning; raise on failure
- Output suffix: "-timeline.json"
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import jsonschema

from rsvp_reader.core.types import WordItem
from rsvp_reader.formatters.base import BaseFormatter, FormatterOutput, iter_timeline

TIMELINE_VERSION = "1.0.0"

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "timeline.schema.json"

_CACHED_SCHEMA: Optional[Dict[str, Any]] = None


def _get_schema() -> Dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def _round(value: float) -> float:
    return round(value, 3)


def build_timeline(word_items: Sequence[WordItem]) -> Dict[str, Any]:
    """Build the timeline document (unvalidated)."""
    chunks: List[Dict[str, Any]] = []
    total = 0.0
    for index, (item, start) in enumerate(iter_timeline(word_items)):
        chunks.append({
            "index": index,
            "text": item.text,
            "startMs": _round(start),
            "predelay": _round(item.predelay),
            "duration": _round(item.duration),
            "postdelay": _round(item.postdelay),
            "optimalLetterPosition": item.optimal_letter_position,
            "wordsInChunk": item.words_in_chunk,
            "isGrouped": item.is_grouped,
            "isBold": item.is_bold,
            "frequency": item.frequency,
        })
        total = start + item.total_ms

    return {
        "version": TIMELINE_VERSION,
        "chunkCount": len(chunks),
        "totalMs": _round(total),
        "chunks": chunks,
    }


class JSONTimelineFormatter(BaseFormatter):
    """Exports chunks as a schema-validated JSON timeline."""

    @property
    def name(self) -> str:
        return "JSON timeline"

    def format(self, word_items: Sequence[WordItem]) -> List[FormatterOutput]:
        """Raises jsonschema.ValidationError if the document is malformed."""
        document = build_timeline(word_items)
        jsonschema.validate(instance=document, schema=_get_schema())

        return [
            FormatterOutput(
                suffix="-timeline.json",
                content=json.dumps(document, indent=2, ensure_ascii=False),
                media_type="application/json",
            )
        ]
