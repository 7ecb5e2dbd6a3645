"""Pydantic report schemas: a read-only snapshot of a finished meeting."""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict

from src.minutes.models import Meeting, Topic


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class NoteEntry(_Frozen):
    """An item or decision."""

    text: str
    by: str = ""


class ActionEntry(_Frozen):
    who: str = ""
    due: str = ""
    text: str = ""
    topic: str = ""


class UtteranceEntry(_Frozen):
    """An unknown line or a non-command, with its resolved time."""

    when: datetime
    speaker: str
    text: str


class TopicReport(_Frozen):
    name: str
    start_time: datetime
    end_time: datetime | None = None
    duration: timedelta | None = None
    items: tuple[NoteEntry, ...] = ()
    actions: tuple[ActionEntry, ...] = ()
    decisions: tuple[NoteEntry, ...] = ()
    non_commands: tuple[UtteranceEntry, ...] = ()


class MeetingReport(_Frozen):
    """Everything the renderer needs, in encounter order.

    ``all_actions``, ``all_decisions`` and ``all_non_commands`` flatten the
    per-topic entries across topics.
    """

    name: str
    start_time: datetime | None = None
    end_time: datetime | None = None
    attendees: tuple[str, ...] = ()
    topics: tuple[TopicReport, ...] = ()
    all_actions: tuple[ActionEntry, ...] = ()
    all_decisions: tuple[NoteEntry, ...] = ()
    all_non_commands: tuple[UtteranceEntry, ...] = ()
    unknowns: tuple[UtteranceEntry, ...] = ()


def _topic_report(topic: Topic) -> TopicReport:
    duration = topic.end_time - topic.start_time if topic.end_time is not None else None
    return TopicReport(
        name=topic.name,
        start_time=topic.start_time,
        end_time=topic.end_time,
        duration=duration,
        items=tuple(NoteEntry(text=i.text, by=i.by) for i in topic.items),
        actions=tuple(
            ActionEntry(who=a.who, due=a.due, text=a.text, topic=topic.name) for a in topic.actions
        ),
        decisions=tuple(NoteEntry(text=d.text, by=d.by) for d in topic.decisions),
        non_commands=tuple(
            UtteranceEntry(when=n.when, speaker=n.speaker, text=n.text) for n in topic.non_commands
        ),
    )


def build_report(meeting: Meeting, sort_attendees: bool = False) -> MeetingReport:
    """Snapshot *meeting* into a :class:`MeetingReport`.

    Args:
        meeting: The finished meeting aggregate. It is not modified.
        sort_attendees: Sort attendee names lexicographically instead of
            keeping the order they declared presence in.
    """
    attendees = [a.name for a in meeting.attendees]
    if sort_attendees:
        attendees.sort()

    topics = tuple(_topic_report(t) for t in meeting.topics)

    return MeetingReport(
        name=meeting.name,
        start_time=meeting.start_time,
        end_time=meeting.end_time,
        attendees=tuple(attendees),
        topics=topics,
        all_actions=tuple(a for t in topics for a in t.actions),
        all_decisions=tuple(d for t in topics for d in t.decisions),
        all_non_commands=tuple(n for t in topics for n in t.non_commands),
        unknowns=tuple(
            UtteranceEntry(when=u.when, speaker=u.speaker, text=u.text) for u in meeting.unknowns
        ),
    )
