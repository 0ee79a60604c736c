"""The mock kubelet's documents flatten cleanly."""

import importlib.util
from datetime import datetime, timezone
from pathlib import Path

import pytest

from kubemetrics.emitter import SnapshotEmitter
from kubemetrics.tags import TagTemplate

SIMULATOR = Path(__file__).resolve().parent.parent / "mock" / "kubelet-simulator" / "main.py"


@pytest.fixture(scope="module")
def simulator():
    spec = importlib.util.spec_from_file_location("kubelet_simulator", SIMULATOR)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_generated_summary_flattens(simulator):
    summary = simulator.generate_summary()
    events = list(
        SnapshotEmitter(TagTemplate("*")).emit(summary, datetime.now(timezone.utc))
    )
    tags = {event.tag for event in events}

    assert "node.uptime" in tags
    assert "node.runtime.imagefs.curproc" in tags
    assert "sys-container.cpu.usage_rate" in tags
    assert "pod.volume.used_bytes" in tags
    assert "container.logs.inodes" in tags

    containers = {
        (e.fields["pod-name"], e.fields["container-name"])
        for e in events
        if e.tag == "container.uptime"
    }
    assert ("web-7d4b9c", "sidecar") in containers
    assert len(containers) == sum(len(pod["containers"]) for pod in simulator.PODS)


def test_node_interfaces(simulator):
    summary = simulator.generate_summary()
    events = SnapshotEmitter(TagTemplate("*")).emit(summary, datetime.now(timezone.utc))
    interfaces = {e.fields["interface"] for e in events if e.tag == "node.network.rx_bytes"}
    assert interfaces == {"eth0", "cni0"}
