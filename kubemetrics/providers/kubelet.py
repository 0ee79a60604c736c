"""Kubelet summary API provider

Fetches ``/stats/summary`` for one node, either through the API
server's node proxy or directly from a kubelet URL, and flattens the
document with ``SnapshotEmitter``. With a kubeconfig file the API
server and credentials of its current context are used instead.
"""

import asyncio
import json
import logging
import os
import ssl
import tempfile
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import AsyncIterator

import aiohttp

from kubemetrics.emitter import SnapshotEmitter
from kubemetrics.errors import ConfigError, SnapshotDecodeError, SummaryAPIError
from kubemetrics.models.metric import MetricEvent
from kubemetrics.models.summary import Summary
from kubemetrics.providers.base import BaseProvider
from kubemetrics.providers.kubeconfig import load_kubeconfig
from kubemetrics.tags import TagTemplate

logger = logging.getLogger(__name__)

DEFAULT_TAG = "kubernetes.metrics.*"
DEFAULT_KUBELET_PORT = 10255
DEFAULT_TIMEOUT = 10.0


def apply_kubeconfig(config: dict) -> dict:
    """``config`` with endpoint and credentials taken from its kubeconfig, if any.

    The kubeconfig replaces the direct kubelet URL, the explicit TLS
    settings and the service account fallback.
    """
    path = config.get("kubeconfig")
    if not path:
        return config
    return {**config, **load_kubeconfig(path), "kubelet_url": None, "secret_dir": None}


def resolve_summary_url(
    node_name: str, config: dict, environ: Mapping[str, str]
) -> str:
    kubelet_url = config.get("kubelet_url")
    if kubelet_url:
        return f"{kubelet_url.rstrip('/')}/stats/summary"

    api_url = config.get("kubernetes_url")
    if not api_url:
        # In-cluster: the default service of the API server
        host = environ.get("KUBERNETES_SERVICE_HOST")
        port = environ.get("KUBERNETES_SERVICE_PORT")
        if host and port:
            if ":" in host:
                host = f"[{host}]"
            api_url = f"https://{host}:{port}"
    if not api_url:
        raise ConfigError("kubernetes url is not set")

    kubelet_port = config.get("kubelet_port") or DEFAULT_KUBELET_PORT
    return (
        f"{api_url.rstrip('/')}/api/v1/nodes/{node_name}:{kubelet_port}"
        "/proxy/stats/summary"
    )


def resolve_credentials(config: dict) -> dict:
    """Explicit TLS/auth material, falling back to the service account directory."""
    ca_file = config.get("ca_file")
    token_file = config.get("bearer_token_file")
    secret_dir = config.get("secret_dir")
    if secret_dir and os.path.isdir(secret_dir):
        secret_ca = os.path.join(secret_dir, "ca.crt")
        secret_token = os.path.join(secret_dir, "token")
        if ca_file is None and os.path.exists(secret_ca):
            ca_file = secret_ca
        if token_file is None and os.path.exists(secret_token):
            token_file = secret_token

    client_cert = config.get("client_cert")
    client_key = config.get("client_key")
    client_cert_data = config.get("client_cert_data")
    client_key_data = config.get("client_key_data")
    if bool(client_cert or client_cert_data) != bool(client_key or client_key_data):
        raise ConfigError("client_cert and client_key must be set together")

    return {
        "ca_file": ca_file,
        "ca_data": config.get("ca_data"),
        "client_cert": client_cert,
        "client_key": client_key,
        "client_cert_data": client_cert_data,
        "client_key_data": client_key_data,
        "token": config.get("token"),
        "bearer_token_file": token_file,
        "insecure_ssl": bool(config.get("insecure_ssl")),
    }


def _load_client_data(context: ssl.SSLContext, cert: str, key: str) -> None:
    # load_cert_chain only reads files
    with tempfile.TemporaryDirectory() as tmp:
        cert_path = os.path.join(tmp, "client.crt")
        key_path = os.path.join(tmp, "client.key")
        with open(cert_path, "w", encoding="utf-8") as f:
            f.write(cert)
        with open(key_path, "w", encoding="utf-8") as f:
            f.write(key)
        context.load_cert_chain(cert_path, key_path)


def build_ssl_context(credentials: dict) -> ssl.SSLContext:
    context = ssl.create_default_context(
        cafile=credentials["ca_file"], cadata=credentials.get("ca_data")
    )
    cert_data = credentials.get("client_cert_data")
    key_data = credentials.get("client_key_data")
    if credentials["client_cert"] or cert_data:
        if cert_data or key_data:
            _load_client_data(
                context,
                cert_data or _read(credentials["client_cert"]),
                key_data or _read(credentials["client_key"]),
            )
        else:
            context.load_cert_chain(credentials["client_cert"], credentials["client_key"])
    if credentials["insecure_ssl"]:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def _read(path: str) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


def decode_summary(body: str) -> Summary:
    try:
        summary = json.loads(body)
    except ValueError as exc:
        raise SnapshotDecodeError(f"Malformed summary JSON: {exc}") from exc
    if not isinstance(summary, dict):
        raise SnapshotDecodeError(
            f"Expected a JSON object from summary API, got {type(summary).__name__}"
        )
    return summary


class KubeletProvider(BaseProvider):
    """Scrapes the kubelet summary of a single node

    The HTTP session is created on first use and reused by every cycle.
    ``scraped_at`` holds the instant the last successful response arrived.
    """

    def __init__(
        self, node_name: str, config: dict, environ: Mapping[str, str] | None = None
    ) -> None:
        config = apply_kubeconfig(config)
        super().__init__(node_name, config)
        self.summary_url = resolve_summary_url(
            node_name, config, os.environ if environ is None else environ
        )
        self.credentials = resolve_credentials(config)
        self.emitter = SnapshotEmitter(TagTemplate(config.get("tag") or DEFAULT_TAG))
        self.timeout = aiohttp.ClientTimeout(
            total=None, connect=config.get("timeout") or DEFAULT_TIMEOUT
        )
        self.scraped_at: datetime | None = None
        self._ssl: ssl.SSLContext | bool = True
        if self.summary_url.startswith("https://"):
            self._ssl = build_ssl_context(self.credentials)
        self._session: aiohttp.ClientSession | None = None
        logger.info("Use URL %s for scraping metrics", self.summary_url)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.credentials["token"]
        token_file = self.credentials["bearer_token_file"]
        if token:
            headers["Authorization"] = f"Bearer {token}"
        elif token_file:
            # Re-read every time: projected service account tokens rotate
            with open(token_file, encoding="utf-8") as f:
                headers["Authorization"] = f"Bearer {f.read().strip()}"
        return headers

    async def fetch_summary(self) -> Summary:
        session = self._get_session()
        async with session.get(
            self.summary_url, headers=self._headers(), ssl=self._ssl
        ) as response:
            body = await response.text()
            if not 200 <= response.status < 300:
                raise SummaryAPIError(response.status, body)
        return decode_summary(body)

    async def collect_metrics(self) -> AsyncIterator[MetricEvent]:
        summary = await self.fetch_summary()
        self.scraped_at = datetime.now(timezone.utc)
        for event in self.emitter.emit(summary, self.scraped_at):
            yield event

    async def check_endpoint(self) -> None:
        """Raise ``ConfigError`` unless the summary endpoint answers with 2xx."""
        try:
            session = self._get_session()
            async with session.get(
                self.summary_url, headers=self._headers(), ssl=self._ssl
            ) as response:
                if not 200 <= response.status < 300:
                    raise ConfigError(
                        f"Invalid summary API endpoint {self.summary_url}: "
                        f"HTTP {response.status}"
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            raise ConfigError(
                f"Invalid summary API endpoint {self.summary_url}: {exc}"
            ) from exc

    async def health_check(self) -> bool:
        try:
            await self.check_endpoint()
        except ConfigError as exc:
            logger.warning("Summary API health check failed: %s", exc)
            return False
        return True

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
