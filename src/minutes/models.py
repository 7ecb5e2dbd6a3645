"""Data models for the meeting aggregate built from a transcript."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

NOT_SPECIFIED = "not specified"


@dataclass
class Attendee:
    name: str


@dataclass
class Item:
    """A note recorded under a topic."""

    text: str
    by: str = ""


@dataclass
class Decision(Item):
    """A decision recorded under a topic."""


@dataclass
class Action:
    """An action item; fields are filled left to right from the command."""

    who: str = ""
    due: str = ""
    text: str = ""


@dataclass
class Unknown:
    """A line that was not understood, kept for review."""

    when: datetime
    speaker: str
    text: str


@dataclass
class NonCommand:
    """Ordinary chatter attached to the topic it occurred in."""

    when: datetime
    speaker: str
    text: str


@dataclass
class Topic:
    name: str
    start_time: datetime
    end_time: datetime | None = None
    items: list[Item] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    decisions: list[Decision] = field(default_factory=list)
    non_commands: list[NonCommand] = field(default_factory=list)


@dataclass
class Meeting:
    """The meeting aggregate.

    ``chat_offset`` is the transcript offset at which the meeting-start
    command was seen. Transcript offsets count from the start of the
    transcript, so it is subtracted when resolving them against
    ``start_time``.
    """

    name: str = NOT_SPECIFIED
    start_time: datetime | None = None
    chat_offset: timedelta = field(default_factory=timedelta)
    end_time: datetime | None = None
    attendees: list[Attendee] = field(default_factory=list)
    topics: list[Topic] = field(default_factory=list)
    unknowns: list[Unknown] = field(default_factory=list)
