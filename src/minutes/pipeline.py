"""End-to-end minutes pipeline: classify -> build -> report."""

from __future__ import annotations

from collections.abc import Iterable

import src.config as app_config
from src.minutes.builder import MeetingBuilder
from src.minutes.render import render_markdown
from src.minutes.report import MeetingReport, build_report
from src.pipeline_config import OutputFormat, PipelineConfig
from src.transcript.parsers import classify_lines


def build_minutes(lines: Iterable[str], config: PipelineConfig | None = None) -> MeetingReport:
    """Full pipeline from raw transcript lines to a :class:`MeetingReport`.

    Args:
        lines: Raw transcript lines, in order. Lines that are not
            ``offset<TAB>speaker<TAB>text`` are skipped.
        config: Routing and report options. Defaults to the configured
            settings.

    Returns:
        The finished, read-only report.
    """
    config = config or app_config.settings.pipeline_config()

    builder = MeetingBuilder(unknown_policy=config.unknown_policy)
    builder.feed_all(classify_lines(lines))
    meeting = builder.finish()

    return build_report(meeting, sort_attendees=config.sort_attendees)


def render_minutes(
    report: MeetingReport,
    output_format: str | OutputFormat = OutputFormat.MARKDOWN,
    include_non_commands: bool = False,
) -> str:
    """Render *report* as markdown or JSON text."""
    # Normalise to enum
    output_format = OutputFormat(output_format)

    if output_format is OutputFormat.JSON:
        return report.model_dump_json(indent=2) + "\n"
    return render_markdown(report, include_non_commands=include_non_commands)
