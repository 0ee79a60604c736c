"""Snapshot traversal

Walks node -> system containers and node -> pods -> volumes/containers,
derives the label context of every level from its parent and hands
each statistics block to the matching extractor.
"""

import dataclasses
from collections.abc import Iterator, Mapping
from datetime import datetime
from typing import Any

from kubemetrics import extractors
from kubemetrics.models.labels import Labels
from kubemetrics.models.metric import MetricEvent
from kubemetrics.models.summary import ContainerStats, NodeStats, PodStats, Summary
from kubemetrics.tags import TagTemplate


def pod_labels(pod_ref: Mapping[str, Any] | None) -> dict[str, Any]:
    """podRef keys prefixed with ``pod-``: name -> pod-name."""
    return {f"pod-{key}": value for key, value in (pod_ref or {}).items()}


class SnapshotEmitter:
    """Flattens one summary document into tagged events.

    Stateless between calls; ``emit`` may be invoked concurrently.
    """

    def __init__(self, template: TagTemplate) -> None:
        self.template = template

    def emit(self, summary: Summary, scraped_at: datetime) -> Iterator[MetricEvent]:
        for event in self._walk(summary, scraped_at):
            yield dataclasses.replace(event, tag=self.template.generate(event.tag))

    def _walk(self, summary: Summary, scraped_at: datetime) -> Iterator[MetricEvent]:
        node = summary.get("node") or {}
        node_name = node.get("nodeName")
        yield from self._node(node, scraped_at)
        for pod in summary.get("pods") or ():
            yield from self._pod(node_name, pod, scraped_at)

    def _node(self, node: NodeStats, scraped_at: datetime) -> Iterator[MetricEvent]:
        tag = "node"
        node_name = node.get("nodeName")
        labels = Labels(node=node_name)

        yield from extractors.uptime(tag, node.get("startTime"), labels, scraped_at)
        yield from extractors.cpu(tag, node.get("cpu"), labels, scraped_at)
        yield from extractors.memory(tag, node.get("memory"), labels, scraped_at)
        yield from extractors.network(tag, node.get("network"), labels, scraped_at)
        yield from extractors.fs(f"{tag}.fs", node.get("fs"), labels, scraped_at)
        image_fs = (node.get("runtime") or {}).get("imageFs")
        yield from extractors.fs(f"{tag}.imagefs", image_fs, labels, scraped_at)
        yield from extractors.rlimit(node_name, node.get("rlimit"), scraped_at)
        for container in node.get("systemContainers") or ():
            yield from self._system_container(labels, container, scraped_at)

    def _system_container(
        self, node_labels: Labels, container: ContainerStats, scraped_at: datetime
    ) -> Iterator[MetricEvent]:
        tag = "sys-container"
        labels = node_labels.overlay(name=container.get("name"))

        yield from extractors.uptime(tag, container.get("startTime"), labels, scraped_at)
        yield from extractors.cpu(tag, container.get("cpu"), labels, scraped_at)
        yield from extractors.memory(tag, container.get("memory"), labels, scraped_at)

    def _pod(
        self, node_name: str | None, pod: PodStats, scraped_at: datetime
    ) -> Iterator[MetricEvent]:
        tag = "pod"
        labels = Labels(pod_labels(pod.get("podRef")), node=node_name)

        yield from extractors.uptime(tag, pod.get("startTime"), labels, scraped_at)
        yield from extractors.cpu(tag, pod.get("cpu"), labels, scraped_at)
        yield from extractors.memory(tag, pod.get("memory"), labels, scraped_at)
        yield from extractors.network(tag, pod.get("network"), labels, scraped_at)
        yield from extractors.fs(
            f"{tag}.ephemeral-storage", pod.get("ephemeral-storage"), labels, scraped_at
        )
        for volume in pod.get("volume") or ():
            volume_labels = labels
            if volume.get("name") is not None:
                volume_labels = labels.overlay(name=volume["name"])
            yield from extractors.fs(f"{tag}.volume", volume, volume_labels, scraped_at)
        for container in pod.get("containers") or ():
            yield from self._container(labels, container, scraped_at)

    def _container(
        self, parent: Labels, container: ContainerStats, scraped_at: datetime
    ) -> Iterator[MetricEvent]:
        tag = "container"
        labels = parent.overlay({"container-name": container.get("name")})

        yield from extractors.uptime(tag, container.get("startTime"), labels, scraped_at)
        yield from extractors.cpu(tag, container.get("cpu"), labels, scraped_at)
        yield from extractors.memory(tag, container.get("memory"), labels, scraped_at)
        yield from extractors.fs(f"{tag}.rootfs", container.get("rootfs"), labels, scraped_at)
        yield from extractors.fs(f"{tag}.logs", container.get("logs"), labels, scraped_at)
