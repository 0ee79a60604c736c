"""Event routers: where flattened events go"""

import json
import sys
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable, TextIO

from kubemetrics.errors import ConfigError
from kubemetrics.models.metric import MetricEvent


class EventRouter(ABC):
    """Destination accepting (tag, timestamp, fields) triples"""

    @abstractmethod
    def emit(self, tag: str, timestamp: datetime, fields: dict[str, Any]) -> None:
        ...

    def emit_event(self, event: MetricEvent) -> None:
        self.emit(event.tag, event.timestamp, event.fields)

    def emit_cycle(self, events: Iterable[MetricEvent]) -> None:
        """Route every event of one completed scrape cycle."""
        for event in events:
            self.emit_event(event)


class ExpositionRouter(EventRouter):
    """Keeps the latest event of every series for the ``/metrics`` endpoint

    A completed cycle replaces the exposed set, so series that vanished
    from the node (deleted pods, removed volumes) stop being exposed.
    """

    def __init__(self) -> None:
        self._series: dict[tuple, MetricEvent] = {}

    def emit(self, tag: str, timestamp: datetime, fields: dict[str, Any]) -> None:
        event = MetricEvent(tag, timestamp, dict(fields))
        self._series[event.series_key()] = event

    def emit_cycle(self, events: Iterable[MetricEvent]) -> None:
        self._series = {event.series_key(): event for event in events}

    def __len__(self) -> int:
        return len(self._series)

    def render(self) -> str:
        lines = [
            event.to_prometheus_line()
            for _, event in sorted(self._series.items(), key=lambda item: repr(item[0]))
        ]
        return "\n".join(lines) + "\n" if lines else ""


class StdoutRouter(EventRouter):
    """Writes one JSON object per event"""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream

    def emit(self, tag: str, timestamp: datetime, fields: dict[str, Any]) -> None:
        stream = self.stream or sys.stdout
        record = MetricEvent(tag, timestamp, fields).to_record()
        stream.write(json.dumps(record, default=str) + "\n")
        stream.flush()


ROUTERS = {
    "exposition": ExpositionRouter,
    "stdout": StdoutRouter,
}


def create_router(output: str) -> EventRouter:
    try:
        return ROUTERS[output]()
    except KeyError:
        raise ConfigError(
            f"Unknown output {output!r}, expected one of {', '.join(ROUTERS)}"
        ) from None
