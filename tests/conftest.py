import base64
import copy
from datetime import datetime, timezone

import pytest
import yaml

SCRAPED_AT = datetime(2020, 1, 1, 0, 1, 0, tzinfo=timezone.utc)
STAT_TIME = "2020-01-01T00:00:10Z"

FULL_SUMMARY = {
    "node": {
        "nodeName": "n1",
        "startTime": "2020-01-01T00:00:00Z",
        "cpu": {"time": STAT_TIME, "usageNanoCores": 4_500_000, "usageCoreNanoSeconds": 9},
        "memory": {
            "time": STAT_TIME,
            "availableBytes": 100,
            "usageBytes": 200,
            "workingSetBytes": 150,
            "rssBytes": 120,
            "pageFaults": 10,
            "majorPageFaults": 1,
        },
        "network": {
            "time": STAT_TIME,
            "name": "eth0",
            "rxBytes": 1,
            "interfaces": [
                {"name": "eth0", "rxBytes": 1, "rxErrors": 0, "txBytes": 2, "txErrors": 0},
            ],
        },
        "fs": {
            "time": STAT_TIME,
            "availableBytes": 10,
            "capacityBytes": 20,
            "usedBytes": 10,
            "inodesFree": 5,
            "inodes": 8,
            "inodesUsed": 3,
        },
        "runtime": {"imageFs": {"time": STAT_TIME, "availableBytes": 7, "capacityBytes": 9}},
        "rlimit": {"time": STAT_TIME, "maxpid": 4194304, "curproc": 321},
        "systemContainers": [
            {
                "name": "kubelet",
                "startTime": "2020-01-01T00:00:30Z",
                "cpu": {"time": STAT_TIME, "usageNanoCores": 1_000_000},
                "memory": {"time": STAT_TIME, "usageBytes": 64},
            },
        ],
    },
    "pods": [
        {
            "podRef": {"name": "p1", "namespace": "ns", "uid": "u1"},
            "startTime": "2020-01-01T00:00:20Z",
            "cpu": {"time": STAT_TIME, "usageNanoCores": 3_000_000},
            "memory": {"time": STAT_TIME, "workingSetBytes": 11},
            "network": {
                "time": STAT_TIME,
                "interfaces": [{"name": "eth0", "rxBytes": 5, "txBytes": 6}],
            },
            "ephemeral-storage": {"time": STAT_TIME, "usedBytes": 12},
            "volume": [{"time": STAT_TIME, "name": "data", "usedBytes": 13, "inodes": 14}],
            "containers": [
                {
                    "name": "c1",
                    "startTime": "2020-01-01T00:00:40Z",
                    "cpu": {"time": STAT_TIME, "usageNanoCores": 2_000_000},
                    "memory": {"time": STAT_TIME, "rssBytes": 15},
                    "rootfs": {"time": STAT_TIME, "usedBytes": 16},
                    "logs": {"time": STAT_TIME, "usedBytes": 17},
                },
            ],
        },
    ],
}


@pytest.fixture
def scraped_at():
    return SCRAPED_AT


@pytest.fixture
def full_summary():
    return copy.deepcopy(FULL_SUMMARY)


def tags(events):
    return [event.tag for event in events]


def by_tag(events, tag):
    return [event for event in events if event.tag == tag]


def b64(text):
    return base64.b64encode(text.encode()).decode()


def write_kubeconfig(path, cluster=None, user=None, current="dev"):
    document = {
        "apiVersion": "v1",
        "kind": "Config",
        "current-context": current,
        "contexts": [
            {"name": "dev", "context": {"cluster": "c1", "user": "u1"}},
            {"name": "prod", "context": {"cluster": "c2", "user": "u2"}},
        ],
        "clusters": [
            {"name": "c1", "cluster": cluster or {"server": "https://dev.example:6443"}},
            {"name": "c2", "cluster": {"server": "https://prod.example:6443"}},
        ],
        "users": [
            {"name": "u1", "user": user or {}},
            {"name": "u2", "user": {"token": "prod-token"}},
        ],
    }
    path.write_text(yaml.safe_dump(document))
    return str(path)
