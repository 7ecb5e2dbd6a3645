"""Data models for classified transcript lines and resolved timestamps."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TranscriptLine:
    """One well-formed transcript line split into its parts.

    ``keyword`` is the first space-delimited token of ``text``; ``argument``
    is everything after that first space, or ``None`` when there is none.
    """

    offset: str
    speaker: str
    text: str
    keyword: str
    argument: str | None = None


@dataclass(frozen=True)
class ResolvedTime:
    """An absolute timestamp for a transcript line.

    ``degraded`` is set when the time is a best-effort ``now + offset``
    placeholder rather than one anchored on the meeting start.
    """

    when: datetime
    degraded: bool = False
