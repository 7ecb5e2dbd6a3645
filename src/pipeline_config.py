"""Pipeline configuration: routing policy enum and PipelineConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UnknownPolicy(str, Enum):
    """How lines with an unrecognised keyword are filed."""

    MARKER = "marker"
    STRICT = "strict"


class OutputFormat(str, Enum):
    """Output formats supported by the CLI."""

    MARKDOWN = "markdown"
    JSON = "json"


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable per-run configuration for building minutes.

    ``unknown_policy`` is consumed by the builder; ``include_non_commands``
    and ``sort_attendees`` only affect the report and its rendering.
    """

    unknown_policy: UnknownPolicy = UnknownPolicy.MARKER
    include_non_commands: bool = False
    sort_attendees: bool = True
