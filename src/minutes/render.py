"""Markdown rendering of a meeting report."""

from __future__ import annotations

from datetime import datetime, timedelta

from src.minutes.models import NOT_SPECIFIED
from src.minutes.report import ActionEntry, MeetingReport, NoteEntry, UtteranceEntry


def format_duration(duration: timedelta) -> str:
    """Format *duration* compactly, e.g. ``1h2m3s``, ``4m0s`` or ``0s``."""
    total = int(duration.total_seconds())
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def _format_time(when: datetime | None) -> str:
    if when is None:
        return NOT_SPECIFIED
    return when.isoformat(sep=" ", timespec="seconds")


def _action_line(a: ActionEntry) -> str:
    return f"- {a.who}({a.due}): {a.text}"


def _note_line(n: NoteEntry) -> str:
    return f"- {n.text}"


def _utterance_line(u: UtteranceEntry) -> str:
    return f"- {u.speaker}({_format_time(u.when)}): {u.text}"


def render_markdown(report: MeetingReport, include_non_commands: bool = False) -> str:
    """Render *report* as markdown minutes.

    Sections without entries are left out. Non-commands are only rendered
    when *include_non_commands* is set.
    """
    out: list[str] = [f"# {report.name} started on {_format_time(report.start_time)}"]

    out += ["", "## Attendance"]
    out += [f"- {name}" for name in report.attendees]

    for topic in report.topics:
        duration = format_duration(topic.duration) if topic.duration is not None else "open"
        out += ["", f"## Topic: {topic.name} ({duration})"]
        out += [_note_line(i) for i in topic.items]
        if topic.actions:
            out += ["", "### Actions"]
            out += [_action_line(a) for a in topic.actions]
        if topic.decisions:
            out += ["", "### Decisions"]
            out += [_note_line(d) for d in topic.decisions]
        if include_non_commands and topic.non_commands:
            out += ["", "### Non Commands"]
            out += [_utterance_line(n) for n in topic.non_commands]

    if report.all_actions:
        out += ["", "# All Actions"]
        out += [_action_line(a) for a in report.all_actions]

    if report.all_decisions:
        out += ["", "# All Decisions"]
        out += [_note_line(d) for d in report.all_decisions]

    if report.unknowns:
        out += ["", "# Unknown Commands"]
        out += [_utterance_line(u) for u in report.unknowns]

    if include_non_commands and report.all_non_commands:
        out += ["", "# All Non Commands"]
        out += [_utterance_line(n) for n in report.all_non_commands]

    out += ["", f"# Meeting ended at {_format_time(report.end_time)}"]
    return "\n".join(out) + "\n"
