"""Output formatter registry.

WHY: The CLI needs a single lookup to find the right exporter by name. A
central dict makes adding a format one import and one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["json_timeline"]()``.
get_formatter() does the lookup with a readable error.

RULES:
- Keys are snake_case identifiers (used as CLI --format values)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rsvp_reader.formatters.json_timeline import JSONTimelineFormatter
from rsvp_reader.formatters.plain_text import PlainTextFormatter

if TYPE_CHECKING:
    from rsvp_reader.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "json_timeline": JSONTimelineFormatter,
    "plain_text": PlainTextFormatter,
}


def get_formatter(name: str) -> BaseFormatter:
    """Instantiate the formatter registered under ``name``.

    Raises:
        ValueError: If no formatter is registered under that name.
    """
    try:
        formatter_cls = FORMATTERS[name]
    except KeyError:
        raise ValueError(
            "Unknown format '{}'. Available: {}".format(name, ", ".join(sorted(FORMATTERS)))
        ) from None
    return formatter_cls()
