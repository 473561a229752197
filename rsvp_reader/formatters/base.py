"""Abstract base formatter and output container.

WHY: A chunk list can be exported in several shapes (a JSON timeline for a
player, a readable cue sheet for proofreading). This base class keeps every
exporter behind one interface so the CLI can treat them generically.

HOW: BaseFormatter is an ABC with two requirements, a ``name`` property and
a ``format()`` method. FormatterOutput is a plain dataclass that bundles a
file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; every current formatter returns one item
- ``suffix`` starts with a hyphen, e.g. ``"-timeline.json"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from rsvp_reader.core.types import WordItem


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-timeline.json"`` → ``"article-timeline.json"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all chunk exporters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'JSON timeline'."""

    @abstractmethod
    def format(self, word_items: Sequence[WordItem]) -> List[FormatterOutput]:
        """Convert timed chunks into one or more output files.

        Args:
            word_items: Chunks in display order, as produced by create_chunks().

        Returns:
            List of FormatterOutput objects.
        """


def iter_timeline(word_items: Sequence[WordItem]) -> Iterator[Tuple[WordItem, float]]:
    """Yield ``(item, start_ms)`` where start_ms is when the chunk's slot begins."""
    elapsed = 0.0
    for item in word_items:
        yield item, elapsed
        elapsed += item.total_ms
