"""Collector exception hierarchy"""


class CollectorError(Exception):
    """Base class for every error raised by the collector."""


class ConfigError(CollectorError):
    """Invalid configuration. Fatal at startup, never raised per cycle."""


class ScrapeError(CollectorError):
    """A single scrape cycle failed. The next cycle is unaffected."""


class SummaryAPIError(ScrapeError):
    """The summary endpoint answered with a non-2xx status."""

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(
            f"Expected 2xx from summary API, but got {status}. Response body = {body}"
        )


class SnapshotDecodeError(ScrapeError):
    """The summary response is not a JSON object."""
