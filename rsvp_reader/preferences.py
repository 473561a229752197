"""Reader preferences as supplied by the host application.

WHY: The host (an extension popup, a settings file, environment variables)
hands us plain preference data in its own shape, usually camelCase JSON.
The timing core only understands an immutable TimingSettings value. This
module validates the former and converts it into the latter.

HOW: ReaderPreferences is a pydantic model with camelCase aliases and
range checks. from_env() builds one from RSVP_* environment variables
(falling back to the config defaults); load() validates an arbitrary
mapping; merged() layers a partial mapping over existing preferences.
All three wrap pydantic's ValidationError in PreferencesError so callers
catch one exception type.

RULES:
- Field names are snake_case; camelCase aliases are accepted and emitted
- words_per_minute in [50, 2000]; chunk_size in [1, 10]
- to_timing_settings() is the only bridge into the core
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from rsvp_reader.config import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_PAUSE_AFTER_COMMA,
    DEFAULT_PAUSE_AFTER_PARAGRAPH,
    DEFAULT_PAUSE_AFTER_PERIOD,
    DEFAULT_WORDS_PER_MINUTE,
)
from rsvp_reader.core.types import TimingSettings

_ENV_FIELDS = {
    "RSVP_WORDS_PER_MINUTE": "words_per_minute",
    "RSVP_CHUNK_SIZE": "chunk_size",
    "RSVP_PAUSE_AFTER_COMMA": "pause_after_comma",
    "RSVP_PAUSE_AFTER_PERIOD": "pause_after_period",
    "RSVP_PAUSE_AFTER_PARAGRAPH": "pause_after_paragraph",
}


class PreferencesError(ValueError):
    """Raised when reader preferences fail validation.

    RULES:
    - Message lists every offending field
    - The underlying pydantic ValidationError is chained as __cause__
    """


class ReaderPreferences(BaseModel):
    """Validated reader preferences.

    RULES:
    - Unknown keys are ignored so hosts can store extra UI state alongside
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    words_per_minute: int = Field(
        default=DEFAULT_WORDS_PER_MINUTE,
        ge=50,
        le=2000,
        description="Target reading speed.",
    )
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        ge=1,
        le=10,
        description="Maximum number of short words shown together.",
    )
    pause_after_comma: bool = Field(default=DEFAULT_PAUSE_AFTER_COMMA)
    pause_after_period: bool = Field(default=DEFAULT_PAUSE_AFTER_PERIOD)
    pause_after_paragraph: bool = Field(default=DEFAULT_PAUSE_AFTER_PARAGRAPH)

    @classmethod
    def load(cls, data: Mapping[str, Any]) -> "ReaderPreferences":
        """Validate ``data`` (snake_case or camelCase keys)."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise PreferencesError(_describe(exc)) from exc

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ReaderPreferences":
        """Read RSVP_* variables from ``environ`` (default: os.environ)."""
        environ = os.environ if environ is None else environ
        data = {
            field_name: environ[var]
            for var, field_name in _ENV_FIELDS.items()
            if environ.get(var, "").strip()
        }
        return cls.load(data)

    def merged(self, overrides: Mapping[str, Any]) -> "ReaderPreferences":
        """Return a copy with the keys present in ``overrides`` replaced.

        ``overrides`` is validated on its own, so it may use either key style
        and may name only some fields.
        """
        layer = type(self).load(overrides)
        return self.model_copy(update=layer.model_dump(include=layer.model_fields_set))

    def to_timing_settings(self) -> TimingSettings:
        return TimingSettings(
            words_per_minute=self.words_per_minute,
            pause_after_comma=self.pause_after_comma,
            pause_after_period=self.pause_after_period,
            pause_after_paragraph=self.pause_after_paragraph,
            chunk_size=self.chunk_size,
        )


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "preferences"
        problems.append("{}: {}".format(location, error["msg"]))
    return "Invalid reader preferences: " + "; ".join(problems)
