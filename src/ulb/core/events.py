"""Progress event protocol: one JSON record per backend stdout line.

The backend (run with --json-output) prints lines like::

    {"stage": "install_packages", "progress": 0.5}

decode_event() turns one line into a ProgressEvent; read_events() turns a
whole pipe into a lazy, finite sequence of them.
"""

import json
import logging
from dataclasses import dataclass
from typing import Iterator, TextIO

from .errors import StreamEndedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    """A progress update emitted by the backend."""
    stage: str
    progress: float  # nominally 0.0 to 1.0, not enforced by the backend


def decode_event(line: str) -> ProgressEvent:
    """Decode one protocol line.

    Raises StreamEndedError if the line is not a JSON object with a string
    ``stage`` and a numeric ``progress``. Both fields are produced together
    or not at all.
    """
    text = line.strip()
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise StreamEndedError(f"Unparsable progress line: {text[:80]!r}") from e

    if not isinstance(data, dict):
        raise StreamEndedError(f"Progress record is not an object: {text[:80]!r}")

    stage = data.get("stage")
    progress = data.get("progress")
    if not isinstance(stage, str):
        raise StreamEndedError(f"Missing or non-string 'stage': {text[:80]!r}")
    # bool is an int subclass; true/false are not progress values
    if isinstance(progress, bool) or not isinstance(progress, (int, float)):
        raise StreamEndedError(f"Missing or non-numeric 'progress': {text[:80]!r}")

    try:
        value = float(progress)
    except OverflowError as e:
        raise StreamEndedError(f"Progress out of float range: {text[:80]!r}") from e

    return ProgressEvent(stage=stage, progress=value)


def read_events(stream: TextIO) -> Iterator[ProgressEvent]:
    """Yield events from a text stream until it closes or goes bad.

    End of pipe, a read error, or a malformed line all end the sequence
    quietly. Nothing after a malformed line is ever yielded.
    """
    while True:
        try:
            line = stream.readline()
        except (OSError, ValueError) as e:
            logger.info("Progress stream read failed, ending: %s", e)
            return
        if not line:
            logger.debug("Progress stream closed")
            return
        try:
            event = decode_event(line)
        except StreamEndedError as e:
            logger.info("Progress stream ended: %s", e)
            return
        yield event
