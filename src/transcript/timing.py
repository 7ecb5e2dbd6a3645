"""Transcript offset parsing and absolute time resolution."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

from src.transcript.models import ResolvedTime

logger = logging.getLogger(__name__)

_OFFSET_COMPONENT_RE = re.compile(r"[0-9]+")

# Date-time part followed directly by an alphabetic zone abbreviation,
# e.g. ``2024-01-01T09:00UTC``.
_START_STAMP_RE = re.compile(r"^(?P<stamp>.+?)(?P<zone>[A-Za-z]+)$")

# Hours east of UTC for the abbreviations commonly seen in meeting stamps.
_ZONE_OFFSETS: dict[str, float] = {
    "UTC": 0,
    "GMT": 0,
    "Z": 0,
    "WET": 0,
    "WEST": 1,
    "BST": 1,
    "CET": 1,
    "CEST": 2,
    "EET": 2,
    "EEST": 3,
    "MSK": 3,
    "AWST": 8,
    "JST": 9,
    "KST": 9,
    "ACST": 9.5,
    "AEST": 10,
    "AEDT": 11,
    "NZST": 12,
    "NZDT": 13,
    "HST": -10,
    "AKST": -9,
    "AKDT": -8,
    "PST": -8,
    "PDT": -7,
    "MST": -7,
    "MDT": -6,
    "CST": -6,
    "CDT": -5,
    "EST": -5,
    "EDT": -4,
}


class TranscriptParseError(ValueError):
    """Base class for recoverable transcript parsing failures."""


class MalformedOffsetError(TranscriptParseError):
    """An offset token is not three colon-separated integers."""


class MalformedTimestampError(TranscriptParseError):
    """A meeting-start stamp does not match the expected format."""


def _now() -> datetime:
    return datetime.now().astimezone()


def parse_offset(token: str) -> timedelta:
    """Convert an ``H:M:S`` transcript offset into a :class:`timedelta`.

    Components are plain base-10 integers of any width (``0:00:05``,
    ``12:3:7``).

    Raises:
        MalformedOffsetError: If *token* does not have exactly three
            integer components.
    """
    parts = token.strip().split(":")
    if len(parts) != 3:
        msg = f"Offset {token!r} does not have three components"
        raise MalformedOffsetError(msg)
    if not all(_OFFSET_COMPONENT_RE.fullmatch(p) for p in parts):
        msg = f"Offset {token!r} has a non-numeric component"
        raise MalformedOffsetError(msg)
    hours, minutes, seconds = (int(p) for p in parts)
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


def parse_start_time(token: str, fmt: str = "%Y-%m-%dT%H:%M") -> datetime:
    """Parse a meeting-start stamp such as ``2024-01-01T09:00UTC``.

    The date-time part is parsed with *fmt*; the trailing abbreviation picks
    the UTC offset. Unlisted abbreviations are kept with a zero offset.

    Raises:
        MalformedTimestampError: If *token* has no zone abbreviation or the
            date-time part does not match *fmt*.
    """
    match = _START_STAMP_RE.match(token.strip())
    if match is None:
        msg = f"Start time {token!r} has no timezone abbreviation"
        raise MalformedTimestampError(msg)

    try:
        naive = datetime.strptime(match.group("stamp"), fmt)
    except ValueError as exc:
        msg = f"Start time {token!r} does not match {fmt!r}"
        raise MalformedTimestampError(msg) from exc

    zone = match.group("zone").upper()
    hours = _ZONE_OFFSETS.get(zone)
    if hours is None:
        logger.debug("Unlisted timezone %r, assuming UTC offset 0", zone)
        hours = 0
    return naive.replace(tzinfo=timezone(timedelta(hours=hours), zone))


def resolve_offset(
    anchor: datetime | None,
    correction: timedelta,
    raw_offset: str,
) -> ResolvedTime:
    """Resolve a transcript offset into an absolute timestamp.

    With a known meeting start the result is
    ``anchor + offset - correction``, where *correction* is the transcript
    offset at which the meeting-start command was seen. Without an anchor,
    or when *raw_offset* is malformed, fall back to ``now + offset`` (zero
    offset when malformed) and mark the result as degraded.
    """
    try:
        elapsed = parse_offset(raw_offset)
    except MalformedOffsetError as exc:
        logger.debug("Using current time for line: %s", exc)
        return ResolvedTime(when=_now(), degraded=True)

    if anchor is None:
        return ResolvedTime(when=_now() + elapsed, degraded=True)

    return ResolvedTime(when=anchor + elapsed - correction)
