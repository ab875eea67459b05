"""Container engine gateway over the engine's Unix socket.

Speaks the engine's local HTTP API through a pooled ``httpx.AsyncClient``
whose transport is bound to the socket. Transport failures, timeouts,
non-2xx answers and unexpected bodies are raised as the error kinds
declared in ``ports.outbound``; nothing is retried.

Usage:
    gateway = DockerEngineGateway("/var/run/docker.sock")
    async with gateway:
        containers = await gateway.list_containers_raw()
"""

from __future__ import annotations

import time
from typing import Any, Callable, TypeVar
from urllib.parse import quote

import httpx

from container_panel.infrastructure.logging import get_logger
from container_panel.infrastructure.metrics import MetricsRegistry, get_metrics
from container_panel.infrastructure.tracing import trace_span
from container_panel.ports.outbound import (
    EngineError,
    MalformedUpstreamData,
    RawContainer,
    RawImage,
    RawVolume,
    UpstreamError,
    UpstreamTimeout,
    UpstreamUnavailable,
)

T = TypeVar("T")

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost/v1.41"
DEFAULT_TIMEOUT_SECONDS = 10.0

_OUTCOMES: dict[type[EngineError], str] = {
    UpstreamUnavailable: "unavailable",
    UpstreamError: "upstream_error",
    UpstreamTimeout: "timeout",
    MalformedUpstreamData: "malformed",
}


class DockerEngineGateway:
    """Engine gateway backed by httpx.

    One client is shared by all in-flight requests; it holds no
    per-request state.
    """

    def __init__(
        self,
        socket_path: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            socket_path: Engine Unix socket path.
            base_url: Versioned URL requests are routed under; the host part
                is ignored by the socket transport.
            timeout_seconds: Timeout applied to each request.
            transport: Transport override; defaults to one bound to socket_path.
            metrics: Metrics registry; defaults to the process registry.
        """
        self._socket_path = socket_path
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds
        self._metrics = metrics or get_metrics()
        self._client = httpx.AsyncClient(
            transport=transport or httpx.AsyncHTTPTransport(uds=socket_path),
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"Content-Type": "application/json"},
        )

    @property
    def socket_path(self) -> str:
        return self._socket_path

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> DockerEngineGateway:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the pooled client."""
        await self._client.aclose()

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    async def list_containers_raw(self) -> list[RawContainer]:
        """List all containers, running or not."""
        return await self._call(
            "GET",
            "/containers/json",
            "list_containers",
            decode=lambda body: self._records(body, RawContainer.from_api, "containers"),
            params={"all": "true"},
        )

    async def list_images_raw(self) -> list[RawImage]:
        """List all local images."""
        return await self._call(
            "GET",
            "/images/json",
            "list_images",
            decode=lambda body: self._records(body, RawImage.from_api, "images"),
        )

    async def list_volumes_raw(self) -> list[RawVolume]:
        """List all volumes; engine warnings are logged and dropped."""
        return await self._call("GET", "/volumes", "list_volumes", decode=self._volumes)

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    async def start_container(self, container_id: str) -> None:
        """Ask the engine to start a container."""
        await self._call(
            "POST",
            f"/containers/{quote(container_id, safe='')}/start",
            "start_container",
            container_id=container_id,
        )
        logger.info("container_start_requested", container_id=container_id)

    async def stop_container(self, container_id: str) -> None:
        """Ask the engine to stop a container."""
        await self._call(
            "POST",
            f"/containers/{quote(container_id, safe='')}/stop",
            "stop_container",
            container_id=container_id,
        )
        logger.info("container_stop_requested", container_id=container_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _call(
        self,
        method: str,
        path: str,
        operation: str,
        decode: Callable[[Any], T] | None = None,
        params: dict[str, str] | None = None,
        container_id: str | None = None,
    ) -> T | None:
        start = time.perf_counter()
        attributes = {"engine.operation": operation, "http.method": method}
        if container_id:
            attributes["container.id"] = container_id

        with trace_span(f"engine.{operation}", attributes) as span:
            try:
                response = await self._send(method, path, operation, params, container_id)
                span.set_attribute("http.status_code", response.status_code)
                result = decode(self._json(response)) if decode else None
            except EngineError as e:
                outcome = _OUTCOMES.get(type(e), "error")
                span.set_attribute("engine.outcome", outcome)
                self._metrics.engine_requests_total.labels(operation=operation, outcome=outcome).inc()
                logger.warning(
                    "engine_request_failed",
                    operation=operation,
                    outcome=outcome,
                    error=str(e),
                    container_id=container_id,
                )
                raise
            finally:
                self._metrics.engine_request_duration_seconds.labels(operation=operation).observe(
                    time.perf_counter() - start
                )

            self._metrics.engine_requests_total.labels(operation=operation, outcome="ok").inc()
            return result

    async def _send(
        self,
        method: str,
        path: str,
        operation: str,
        params: dict[str, str] | None,
        container_id: str | None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, params=params)
        except httpx.TimeoutException as e:
            raise UpstreamTimeout(operation, self._timeout_seconds) from e
        except httpx.TransportError as e:
            raise UpstreamUnavailable(self._socket_path, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise UpstreamError(
                response.status_code,
                self._error_message(response),
                container_id=container_id,
            )
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.text or response.reason_phrase or "Unknown error occurred"

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedUpstreamData(f"engine returned invalid JSON: {e}") from e

    @staticmethod
    def _records(items: Any, parse: Callable[[Any], T], kind: str) -> list[T]:
        if not isinstance(items, list):
            raise MalformedUpstreamData(f"{kind} response is not a list")
        return [parse(item) for item in items]

    def _volumes(self, body: Any) -> list[RawVolume]:
        if not isinstance(body, dict):
            raise MalformedUpstreamData("volumes response is not an object")
        warnings = body.get("Warnings")
        if warnings:
            logger.debug("engine_volume_warnings", warnings=warnings)
        # The engine sends null rather than [] when there are no volumes.
        return self._records(body.get("Volumes") or [], RawVolume.from_api, "volumes")
