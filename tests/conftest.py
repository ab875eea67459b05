"""Pytest configuration and fixtures for container_panel tests."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest
from prometheus_client import CollectorRegistry

from container_panel.adapters.outbound.engine_gateway import DockerEngineGateway
from container_panel.infrastructure.config import Config, EngineConfig
from container_panel.infrastructure.metrics import MetricsRegistry

SOCKET_PATH = "/tmp/test-engine.sock"

Handler = Callable[[httpx.Request], httpx.Response]


def container_payload(**overrides: Any) -> dict[str, Any]:
    """Container summary shaped like ``GET /containers/json``."""
    payload: dict[str, Any] = {
        "Id": "abc123",
        "Names": ["/db"],
        "Image": "postgres:14",
        "ImageID": "sha256:5f1f",
        "Command": "docker-entrypoint.sh postgres",
        "Created": 1700000000,
        "State": "running",
        "Status": "Up 2 hours",
        "Ports": [{"PrivatePort": 5432, "Type": "tcp"}],
        "Labels": {},
        "Mounts": [],
    }
    payload.update(overrides)
    return payload


def image_payload(**overrides: Any) -> dict[str, Any]:
    """Image summary shaped like ``GET /images/json``."""
    payload: dict[str, Any] = {
        "Id": "sha256:9c7a54a9a43cca047013b82af109fe963fde787f63f9e016fdc3384500c2823d",
        "ParentId": "",
        "RepoTags": ["myapp:latest"],
        "RepoDigests": [],
        "Created": 1700000000,
        "Size": 5368709120,
        "SharedSize": -1,
        "Labels": None,
        "Containers": -1,
    }
    payload.update(overrides)
    return payload


def volume_payload(**overrides: Any) -> dict[str, Any]:
    """Volume record shaped like an entry of ``GET /volumes``."""
    payload: dict[str, Any] = {
        "Name": "pgdata",
        "Driver": "local",
        "Mountpoint": "/var/lib/docker/volumes/pgdata/_data",
        "CreatedAt": "2023-11-14T22:13:20Z",
        "Labels": None,
        "Scope": "local",
        "Options": None,
        "UsageData": {"Size": 1048576, "RefCount": 1},
    }
    payload.update(overrides)
    return payload


def engine_router(routes: dict[tuple[str, str], Any]) -> Handler:
    """Build a MockTransport handler from (method, path) -> response.

    Values are either an ``httpx.Response``, a JSON-serializable body
    (answered with 200), or an exception instance to raise.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        key = (request.method, request.url.path)
        if key not in routes:
            return httpx.Response(404, json={"message": f"no route for {key}"})
        value = routes[key]
        if isinstance(value, Exception):
            raise value
        if isinstance(value, httpx.Response):
            return value
        return httpx.Response(200, json=value)

    return handler


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry."""
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration."""
    return Config(engine=EngineConfig(socket_path=SOCKET_PATH, timeout_seconds=2.0))


@pytest.fixture
def make_gateway(metrics_registry: MetricsRegistry) -> Callable[[Handler], DockerEngineGateway]:
    """Factory for gateways whose socket is replaced by a mock handler."""

    def factory(handler: Handler) -> DockerEngineGateway:
        return DockerEngineGateway(
            SOCKET_PATH,
            timeout_seconds=2.0,
            transport=httpx.MockTransport(handler),
            metrics=metrics_registry,
        )

    return factory


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
