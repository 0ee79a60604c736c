"""Per-family metric extraction

Each function turns one statistics sub-object into zero or more
``MetricEvent``s carrying the *item* tag (e.g. ``node.cpu.usage_rate``);
the configured tag template is applied by the emitter. A missing
sub-object or a missing/null field yields nothing; zero is a value.
"""

from collections.abc import Iterator, Mapping
from datetime import datetime
from typing import Any

from kubemetrics.models.labels import Labels
from kubemetrics.models.metric import MetricEvent
from kubemetrics.models.summary import parse_time
from kubemetrics.tags import underscore

NANOCORES_PER_MILLICORE = 1_000_000

MEMORY_FIELDS = (
    "availableBytes",
    "usageBytes",
    "workingSetBytes",
    "rssBytes",
    "pageFaults",
    "majorPageFaults",
)
INTERFACE_FIELDS = ("rxBytes", "rxErrors", "txBytes", "txErrors")
FS_FIELDS = (
    "availableBytes",
    "capacityBytes",
    "usedBytes",
    "inodesFree",
    "inodes",
    "inodesUsed",
)
RLIMIT_FIELDS = ("maxpid", "curproc")
RLIMIT_TAG = "node.runtime.imagefs"


def _family_time(metrics: Mapping[str, Any], scraped_at: datetime) -> datetime:
    time = metrics.get("time")
    return parse_time(time) if time is not None else scraped_at


def _fields(
    tag: str,
    metrics: Mapping[str, Any],
    names: tuple[str, ...],
    time: datetime,
    labels: Labels,
    **extra: Any,
) -> Iterator[MetricEvent]:
    for name in names:
        value = metrics.get(name)
        if value is not None:
            yield MetricEvent(f"{tag}.{underscore(name)}", time, labels.with_value(value, **extra))


def uptime(
    tag: str, start_time: str | None, labels: Labels, scraped_at: datetime
) -> Iterator[MetricEvent]:
    """Seconds between ``start_time`` and the scrape, stamped with the scrape time."""
    if start_time is None:
        return
    seconds = (scraped_at - parse_time(start_time)).total_seconds()
    yield MetricEvent(f"{tag}.uptime", scraped_at, labels.with_value(seconds))


def cpu(
    tag: str, metrics: Mapping[str, Any] | None, labels: Labels, scraped_at: datetime
) -> Iterator[MetricEvent]:
    # usage_rate and usage both read usageNanoCores; the cumulative
    # usageCoreNanoSeconds counter is not exported.
    if metrics is None:
        return
    time = _family_time(metrics, scraped_at)
    nanocores = metrics.get("usageNanoCores")
    if nanocores is not None:
        yield MetricEvent(
            f"{tag}.cpu.usage_rate",
            time,
            labels.with_value(nanocores / NANOCORES_PER_MILLICORE),
        )
        yield MetricEvent(f"{tag}.cpu.usage", time, labels.with_value(nanocores))


def memory(
    tag: str, metrics: Mapping[str, Any] | None, labels: Labels, scraped_at: datetime
) -> Iterator[MetricEvent]:
    if metrics is None:
        return
    time = _family_time(metrics, scraped_at)
    yield from _fields(f"{tag}.memory", metrics, MEMORY_FIELDS, time, labels)


def network(
    tag: str, metrics: Mapping[str, Any] | None, labels: Labels, scraped_at: datetime
) -> Iterator[MetricEvent]:
    """One event set per entry of ``interfaces``, labelled with ``interface``."""
    if metrics is None:
        return
    time = _family_time(metrics, scraped_at)
    for interface in metrics.get("interfaces") or ():
        yield from _fields(
            f"{tag}.network",
            interface,
            INTERFACE_FIELDS,
            time,
            labels,
            interface=interface.get("name"),
        )


def fs(
    tag: str, metrics: Mapping[str, Any] | None, labels: Labels, scraped_at: datetime
) -> Iterator[MetricEvent]:
    """Filesystem usage; ``tag`` is the full family tag, e.g. ``pod.volume``."""
    if metrics is None:
        return
    time = _family_time(metrics, scraped_at)
    yield from _fields(tag, metrics, FS_FIELDS, time, labels)


def rlimit(
    node_name: str, metrics: Mapping[str, Any] | None, scraped_at: datetime
) -> Iterator[MetricEvent]:
    """Process limits of the node, under a fixed tag and only the ``node`` label."""
    if metrics is None:
        return
    time = _family_time(metrics, scraped_at)
    yield from _fields(RLIMIT_TAG, metrics, RLIMIT_FIELDS, time, Labels(node=node_name))
