"""Command dispatch: fold classified transcript lines into a Meeting."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from enum import StrEnum

from src.config import settings
from src.minutes.models import (
    NOT_SPECIFIED,
    Action,
    Attendee,
    Decision,
    Item,
    Meeting,
    NonCommand,
    Topic,
    Unknown,
)
from src.pipeline_config import UnknownPolicy
from src.transcript.models import ResolvedTime, TranscriptLine
from src.transcript.parsers import classify_line
from src.transcript.timing import (
    MalformedOffsetError,
    MalformedTimestampError,
    parse_offset,
    parse_start_time,
    resolve_offset,
)

logger = logging.getLogger(__name__)

COMMAND_MARKER = "@"


class Command(StrEnum):
    """Recognised transcript commands."""

    HERE = "here"
    START_MEETING = "start_meeting"
    END_MEETING = "end_meeting"
    TOPIC = "topic"
    ITEM = "item"
    DECISION = "decision"
    ACTION = "action"


# Keyword tokens are case-sensitive. The unhyphenated meeting tokens are
# accepted for older transcripts.
COMMAND_KEYWORDS: dict[str, Command] = {
    "@here": Command.HERE,
    "@start-meeting": Command.START_MEETING,
    "@startmeeting": Command.START_MEETING,
    "@end-meeting": Command.END_MEETING,
    "@endmeeting": Command.END_MEETING,
    "@topic": Command.TOPIC,
    "@item": Command.ITEM,
    "@decision": Command.DECISION,
    "@action": Command.ACTION,
}


# Commands that move topic or meeting timing; ignored once the meeting ended.
_TIMING_COMMANDS = frozenset({Command.START_MEETING, Command.END_MEETING, Command.TOPIC})


class MeetingState(StrEnum):
    """Lifecycle of the meeting being built."""

    NOT_STARTED = "not_started"
    IN_MEETING = "in_meeting"
    ENDED = "ended"


def split_action(argument: str | None) -> Action:
    """Split an ``@action`` argument into who, due and text.

    At most three whitespace-separated fields are taken; the last keeps any
    remaining text. Missing trailing fields are left empty.
    """
    fields = (argument or "").split(maxsplit=2)
    who, due, text = (fields + ["", "", ""])[:3]
    return Action(who=who, due=due, text=text)


class MeetingBuilder:
    """Accumulates transcript lines into a :class:`Meeting`.

    The builder owns the meeting aggregate and the current-topic cursor.
    Lines are fed in transcript order with :meth:`feed` or
    :meth:`feed_raw`; :meth:`finish` returns the completed meeting and
    locks the builder.
    """

    def __init__(
        self,
        unknown_policy: UnknownPolicy = UnknownPolicy.MARKER,
        start_time_format: str | None = None,
    ) -> None:
        self.meeting = Meeting()
        self.current_topic: Topic | None = None
        self.state = MeetingState.NOT_STARTED
        self.unknown_policy = UnknownPolicy(unknown_policy)
        self.start_time_format = start_time_format or settings.start_time_format
        self._finished = False

        self._handlers: dict[Command, Callable[[TranscriptLine], None]] = {
            Command.HERE: self._on_here,
            Command.START_MEETING: self._on_start_meeting,
            Command.END_MEETING: self._on_end_meeting,
            Command.TOPIC: self._on_topic,
            Command.ITEM: self._on_item,
            Command.DECISION: self._on_decision,
            Command.ACTION: self._on_action,
        }

    # ------------------------------------------------------------------
    # Feeding
    # ------------------------------------------------------------------

    def feed_raw(self, raw: str) -> bool:
        """Classify and feed one raw line. Returns False if it was skipped."""
        line = classify_line(raw)
        if line is None:
            return False
        self.feed(line)
        return True

    def feed(self, line: TranscriptLine) -> None:
        """Apply one classified line to the meeting."""
        if self._finished:
            msg = "Cannot feed lines to a finished meeting"
            raise RuntimeError(msg)

        command = COMMAND_KEYWORDS.get(line.keyword)

        if self.state is MeetingState.ENDED and command in _TIMING_COMMANDS:
            logger.warning(
                "Command from %s after the meeting ended recorded as unknown: %r",
                line.speaker,
                line.text,
            )
            self._add_unknown(line)
            return

        if command is None:
            self._on_unrecognised(line)
        else:
            self._handlers[command](line)

    def feed_all(self, lines: Iterable[TranscriptLine]) -> None:
        for line in lines:
            self.feed(line)

    def finish(self) -> Meeting:
        """Return the completed meeting. No further lines are accepted."""
        self._finished = True
        logger.info(
            "Built meeting %r: %d attendees, %d topics, %d unknowns",
            self.meeting.name,
            len(self.meeting.attendees),
            len(self.meeting.topics),
            len(self.meeting.unknowns),
        )
        return self.meeting

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def resolve(self, line: TranscriptLine) -> ResolvedTime:
        """Resolve *line*'s offset against the meeting start."""
        return resolve_offset(self.meeting.start_time, self.meeting.chat_offset, line.offset)

    def _ensure_topic(self, when: datetime) -> Topic:
        if self.current_topic is None:
            if self.state is MeetingState.ENDED and self.meeting.end_time is not None:
                # A topic opened after the end is empty in time.
                topic = self._open_topic(NOT_SPECIFIED, self.meeting.end_time)
                topic.end_time = self.meeting.end_time
                return topic
            return self._open_topic(NOT_SPECIFIED, when)
        return self.current_topic

    def _open_topic(self, name: str, when: datetime) -> Topic:
        topic = Topic(name=name, start_time=when)
        self.meeting.topics.append(topic)
        self.current_topic = topic
        return topic

    def _add_unknown(self, line: TranscriptLine) -> None:
        self.meeting.unknowns.append(
            Unknown(when=self.resolve(line).when, speaker=line.speaker, text=line.text)
        )

    # ------------------------------------------------------------------
    # Command handlers
    # ------------------------------------------------------------------

    def _on_here(self, line: TranscriptLine) -> None:
        name = line.argument if line.argument and line.argument.strip() else line.speaker
        self.meeting.attendees.append(Attendee(name=name))

    def _on_start_meeting(self, line: TranscriptLine) -> None:
        argument = line.argument
        if argument:
            stamp, sep, name = argument.partition(" ")
            if not sep:
                self.meeting.name = argument
            else:
                try:
                    self.meeting.start_time = parse_start_time(stamp, self.start_time_format)
                    self.meeting.name = name
                except MalformedTimestampError as exc:
                    logger.warning("Meeting start time not recognised: %s", exc)
                    self.meeting.start_time = None
                    self.meeting.name = argument

        try:
            self.meeting.chat_offset = parse_offset(line.offset)
        except MalformedOffsetError as exc:
            logger.debug("Meeting start offset not recorded: %s", exc)

        self.state = MeetingState.IN_MEETING

    def _on_end_meeting(self, line: TranscriptLine) -> None:
        when = self.resolve(line).when
        if self.current_topic is not None:
            self.current_topic.end_time = when
        self.meeting.end_time = when
        self.state = MeetingState.ENDED

    def _on_topic(self, line: TranscriptLine) -> None:
        when = self.resolve(line).when
        if self.current_topic is not None:
            self.current_topic.end_time = when
        name = line.argument.strip() if line.argument else ""
        self._open_topic(name or NOT_SPECIFIED, when)

    def _on_item(self, line: TranscriptLine) -> None:
        topic = self._ensure_topic(self.resolve(line).when)
        topic.items.append(Item(text=line.argument or "", by=line.speaker))

    def _on_decision(self, line: TranscriptLine) -> None:
        topic = self._ensure_topic(self.resolve(line).when)
        topic.decisions.append(Decision(text=line.argument or "", by=line.speaker))

    def _on_action(self, line: TranscriptLine) -> None:
        topic = self._ensure_topic(self.resolve(line).when)
        topic.actions.append(split_action(line.argument))

    def _on_unrecognised(self, line: TranscriptLine) -> None:
        if self.unknown_policy is UnknownPolicy.STRICT or line.text.startswith(COMMAND_MARKER):
            self._add_unknown(line)
            return

        when = self.resolve(line).when
        topic = self._ensure_topic(when)
        topic.non_commands.append(NonCommand(when=when, speaker=line.speaker, text=line.text))


def build_meeting(
    lines: Iterable[TranscriptLine],
    unknown_policy: UnknownPolicy = UnknownPolicy.MARKER,
) -> Meeting:
    """Feed every line to a fresh :class:`MeetingBuilder` and finish it."""
    builder = MeetingBuilder(unknown_policy=unknown_policy)
    builder.feed_all(lines)
    return builder.finish()
