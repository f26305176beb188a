"""
Diagnostic Trace Sinks

Calculation functions stay free of direct I/O. Where intermediate values
are worth inspecting (grid lookups, per-segment volumes) they report to an
optional sink passed in by the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


@dataclass
class TraceEvent:
    """Single diagnostic event."""
    event: str
    fields: Dict[str, Any] = field(default_factory=dict)


class TraceSink:
    """Discards every event. Subclasses decide where events go."""

    def record(self, event: str, **fields: Any) -> None:
        pass


class LoggingTraceSink(TraceSink):
    """Forwards events to the logging system at DEBUG level."""

    def __init__(self, log: logging.Logger = logger):
        self.log = log

    def record(self, event: str, **fields: Any) -> None:
        details = ", ".join(f"{k}={v!r}" for k, v in fields.items())
        self.log.debug(f"{event}: {details}")


class CollectingTraceSink(TraceSink):
    """Keeps events in memory, mostly for tests and interactive debugging."""

    def __init__(self):
        self.events: List[TraceEvent] = []

    def record(self, event: str, **fields: Any) -> None:
        self.events.append(TraceEvent(event=event, fields=dict(fields)))

    def named(self, event: str) -> List[TraceEvent]:
        return [e for e in self.events if e.event == event]


NULL_TRACE = TraceSink()
