"""Composition root.

Builds the process-lifetime object graph from configuration: metrics,
the engine gateway and the panel service. The HTTP layer receives the
service by reference.
"""

from __future__ import annotations

import httpx

from container_panel.adapters.outbound.engine_gateway import DockerEngineGateway
from container_panel.application.panel_service import PanelService
from container_panel.domain.services.normalizer import Normalizer
from container_panel.infrastructure.config import Config
from container_panel.infrastructure.container import Container
from container_panel.infrastructure.metrics import MetricsRegistry, get_metrics
from container_panel.ports.outbound import EngineGatewayPort


def build_container(
    config: Config,
    transport: httpx.AsyncBaseTransport | None = None,
    metrics: MetricsRegistry | None = None,
) -> Container:
    """Register the panel's components.

    Args:
        config: Loaded configuration.
        transport: Optional transport override for the engine client.
        metrics: Optional metrics registry; defaults to the process one.

    Returns:
        A container resolving Config, MetricsRegistry, Normalizer,
        EngineGatewayPort and PanelService.
    """
    container = Container()
    container.register_singleton(Config, config)
    container.register_singleton(MetricsRegistry, metrics or get_metrics())
    container.register_factory(Normalizer, lambda c: Normalizer())
    container.register_factory(
        EngineGatewayPort,
        lambda c: DockerEngineGateway(
            socket_path=c.resolve(Config).engine.socket_path,
            base_url=c.resolve(Config).engine.base_url,
            timeout_seconds=c.resolve(Config).engine.timeout_seconds,
            transport=transport,
            metrics=c.resolve(MetricsRegistry),
        ),
    )
    container.register_factory(
        PanelService,
        lambda c: PanelService(c.resolve(EngineGatewayPort), c.resolve(Normalizer)),
    )
    return container
