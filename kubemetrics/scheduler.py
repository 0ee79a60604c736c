"""Periodic scrape cycles

Cycles start on a fixed period measured from the start of the previous
cycle. They never overlap: a cycle that outlasts the period delays the
next one, and missed intervals are not made up.
"""

import asyncio
import logging

from kubemetrics.errors import SummaryAPIError
from kubemetrics.providers.base import BaseProvider
from kubemetrics.router import EventRouter

logger = logging.getLogger(__name__)


async def run_cycle(provider: BaseProvider, router: EventRouter) -> bool:
    """One scrape. Returns False on failure; never raises (except cancellation)."""
    try:
        # Materialize first so a failed cycle routes nothing
        events = [event async for event in provider.collect_metrics()]
    except SummaryAPIError as exc:
        logger.error(
            "Expected 2xx from summary API, but got %d. Response body = %s",
            exc.status,
            exc.body,
        )
        return False
    except Exception as exc:
        logger.exception("Failed to scrape metrics, error=%s", exc)
        return False

    router.emit_cycle(events)
    logger.debug("Routed %d events for node %s", len(events), provider.node_name)
    return True


async def scrape_loop(
    provider: BaseProvider, router: EventRouter, interval: float
) -> None:
    loop = asyncio.get_running_loop()
    while True:
        started = loop.time()
        await run_cycle(provider, router)
        await asyncio.sleep(max(0.0, interval - (loop.time() - started)))
