"""Shape of the kubelet ``/stats/summary`` document

Every key is optional: the kubelet omits whatever it could not
collect, and consumers must read fields with ``.get``.
"""

from datetime import datetime, timezone
from typing import TypedDict


class CPUStats(TypedDict, total=False):
    time: str
    usageNanoCores: int
    usageCoreNanoSeconds: int


class MemoryStats(TypedDict, total=False):
    time: str
    availableBytes: int
    usageBytes: int
    workingSetBytes: int
    rssBytes: int
    pageFaults: int
    majorPageFaults: int


class InterfaceStats(TypedDict, total=False):
    name: str
    rxBytes: int
    rxErrors: int
    txBytes: int
    txErrors: int


class NetworkStats(InterfaceStats, total=False):
    time: str
    interfaces: list[InterfaceStats]


class FsStats(TypedDict, total=False):
    time: str
    availableBytes: int
    capacityBytes: int
    usedBytes: int
    inodesFree: int
    inodes: int
    inodesUsed: int


class VolumeStats(FsStats, total=False):
    name: str


class RlimitStats(TypedDict, total=False):
    time: str
    maxpid: int
    curproc: int


class RuntimeStats(TypedDict, total=False):
    imageFs: FsStats


class ContainerStats(TypedDict, total=False):
    name: str
    startTime: str
    cpu: CPUStats
    memory: MemoryStats
    rootfs: FsStats
    logs: FsStats


class NodeStats(TypedDict, total=False):
    nodeName: str
    startTime: str
    cpu: CPUStats
    memory: MemoryStats
    network: NetworkStats
    fs: FsStats
    runtime: RuntimeStats
    rlimit: RlimitStats
    systemContainers: list[ContainerStats]


class PodReference(TypedDict, total=False):
    name: str
    namespace: str
    uid: str


PodStats = TypedDict(
    "PodStats",
    {
        "podRef": PodReference,
        "startTime": str,
        "cpu": CPUStats,
        "memory": MemoryStats,
        "network": NetworkStats,
        "ephemeral-storage": FsStats,
        "volume": list[VolumeStats],
        "containers": list[ContainerStats],
    },
    total=False,
)


class Summary(TypedDict, total=False):
    node: NodeStats
    pods: list[PodStats]


def parse_time(value: str) -> datetime:
    """Parse an RFC 3339 timestamp as sent by the kubelet.

    Fractions are normalized to microseconds (nanoseconds truncated).
    Naive timestamps are taken as UTC.
    """
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    if "." in value:
        head, _, rest = value.partition(".")
        digits = len(rest) - len(rest.lstrip("0123456789"))
        fraction = rest[:digits][:6].ljust(6, "0")
        value = f"{head}.{fraction}{rest[digits:]}"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
