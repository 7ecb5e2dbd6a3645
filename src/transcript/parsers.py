"""Parser for tab-separated chat transcripts."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from src.transcript.models import TranscriptLine

logger = logging.getLogger(__name__)

_TAB_RUN_RE = re.compile(r"\t+")


def classify_line(raw: str) -> TranscriptLine | None:
    """Split a raw ``<offset>\\t<speaker>[:]\\t<text>`` line into its parts.

    Runs of tabs separate the fields; only the first two runs split, so tabs
    inside the text are kept. A single trailing ``:`` is dropped from the
    speaker.

    Returns:
        The classified line, or ``None`` if the line has fewer than three
        fields.
    """
    parts = _TAB_RUN_RE.split(raw.strip(), maxsplit=2)
    if len(parts) != 3:
        return None

    offset, speaker, text = parts
    speaker = speaker.removesuffix(":")

    keyword, sep, argument = text.partition(" ")

    return TranscriptLine(
        offset=offset,
        speaker=speaker,
        text=text,
        keyword=keyword.strip(),
        argument=argument if sep else None,
    )


def classify_lines(lines: Iterable[str]) -> Iterator[TranscriptLine]:
    """Lazily classify *lines*, skipping the ones that are not well formed."""
    skipped = 0
    for raw in lines:
        line = classify_line(raw)
        if line is None:
            if raw.strip():
                skipped += 1
            continue
        yield line

    if skipped:
        logger.debug("Skipped %d malformed transcript lines", skipped)
