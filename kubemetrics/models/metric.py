"""Flattened metric event model"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_:]")


def _sanitize(name: str) -> str:
    return _INVALID_NAME_CHARS.sub("_", name)


def _escape(value: Any) -> str:
    return str(value).replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


@dataclass(frozen=True)
class MetricEvent:
    """One tagged, timestamped measurement

    ``fields`` always carries ``value`` plus the identity labels of the
    entity the measurement belongs to.
    """

    tag: str
    timestamp: datetime
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def value(self) -> Any:
        return self.fields["value"]

    @property
    def labels(self) -> dict[str, Any]:
        return {k: v for k, v in self.fields.items() if k != "value"}

    @property
    def timestamp_ms(self) -> int:
        return int(self.timestamp.timestamp() * 1000)

    def series_key(self) -> tuple:
        return (self.tag, tuple(sorted(self.labels.items())))

    def to_prometheus_line(self) -> str:
        label_str = ",".join(
            f'{_sanitize(k)}="{_escape(v)}"' for k, v in sorted(self.labels.items())
        )
        return f"{_sanitize(self.tag)}{{{label_str}}} {self.value} {self.timestamp_ms}"

    def to_record(self) -> dict[str, Any]:
        return {
            "tag": self.tag,
            "time": self.timestamp.isoformat(),
            "record": dict(self.fields),
        }
