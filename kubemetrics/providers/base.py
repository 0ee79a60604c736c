"""Metrics provider abstract base class"""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from kubemetrics.errors import ConfigError
from kubemetrics.models.metric import MetricEvent


class BaseProvider(ABC):
    """Base class for a source of flattened node metrics

    One provider instance serves exactly one node. Subclasses implement
    collect_metrics and health_check.
    """

    def __init__(self, node_name: str, config: dict) -> None:
        if not node_name:
            raise ConfigError("node_name is required")
        self.node_name = node_name
        self.config = config

    @abstractmethod
    async def collect_metrics(self) -> AsyncIterator[MetricEvent]:
        """Run one scrape and yield its events (fetch, decode, flatten)"""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Whether the upstream endpoint currently answers with 2xx"""
        ...

    async def close(self) -> None:
        """Release transport resources"""
