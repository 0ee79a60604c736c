"""Kubelet Metrics Collector - Entrypoint

Scrapes the kubelet summary of NODE_NAME every SCRAPE_INTERVAL seconds
and serves /healthz, /readyz (summary API reachable) and /metrics
(latest set of series).
"""

import asyncio
import logging
import sys

from aiohttp import web

from kubemetrics import config
from kubemetrics.errors import ConfigError
from kubemetrics.providers.base import BaseProvider
from kubemetrics.providers.kubelet import KubeletProvider
from kubemetrics.router import EventRouter, ExpositionRouter, create_router
from kubemetrics.scheduler import scrape_loop

logger = logging.getLogger(__name__)

ROUTER_KEY = web.AppKey("router", EventRouter)
PROVIDER_KEY = web.AppKey("provider", BaseProvider)


async def handle_healthz(request: web.Request) -> web.Response:
    return web.Response(text="ok")


async def handle_readyz(request: web.Request) -> web.Response:
    provider = request.app[PROVIDER_KEY]
    if await provider.health_check():
        return web.Response(text="ready")
    return web.Response(status=503, text="summary API unreachable")


async def handle_metrics(request: web.Request) -> web.Response:
    router = request.app[ROUTER_KEY]
    if not isinstance(router, ExpositionRouter):
        return web.Response(
            text=f"# events are written to {config.OUTPUT}\n",
            content_type="text/plain",
        )
    return web.Response(text=router.render(), content_type="text/plain")


def create_app(provider: BaseProvider, router: EventRouter, interval: float) -> web.Application:
    app = web.Application()
    app[PROVIDER_KEY] = provider
    app[ROUTER_KEY] = router
    app.router.add_get("/healthz", handle_healthz)
    app.router.add_get("/readyz", handle_readyz)
    app.router.add_get("/metrics", handle_metrics)

    async def scraper(app: web.Application):
        task = asyncio.create_task(scrape_loop(provider, router, interval))
        yield
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        await provider.close()

    app.cleanup_ctx.append(scraper)
    return app


async def main() -> None:
    provider = KubeletProvider(config.NODE_NAME, config.provider_config())
    router = create_router(config.OUTPUT)
    if config.VERIFY_ON_START:
        try:
            await provider.check_endpoint()
        except ConfigError:
            await provider.close()
            raise
    app = create_app(provider, router, config.SCRAPE_INTERVAL)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "0.0.0.0", config.METRICS_PORT)
    await site.start()

    logger.info(
        "Kubelet collector started on port %d (node=%s, interval=%ds)",
        config.METRICS_PORT,
        config.NODE_NAME,
        config.SCRAPE_INTERVAL,
    )
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


def run() -> None:
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    try:
        asyncio.run(main())
    except ConfigError as exc:
        logger.critical("Invalid configuration: %s", exc)
        sys.exit(2)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
